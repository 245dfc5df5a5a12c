"""Implementation package of bimgeom; import public symbols from ``bimgeom``."""
