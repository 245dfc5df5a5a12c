"""Unit tests for row-echelon reduction and rank helpers."""
import numpy as np
import pytest

from bimgeom.core.constants import DISTANCE_TOL
from bimgeom.core.matrix import count_nonzero_rows, matrix_rank, ref_tolerance, row_echelon_form


class TestRowEchelonForm:

    def test_identity_is_fixed_point(self):
        eye = np.eye(3)
        assert np.allclose(row_echelon_form(eye), eye)
        assert np.allclose(row_echelon_form(eye, reduced=False), eye)

    def test_zero_matrix_is_fixed_point(self):
        zeros = np.zeros((2, 3))
        assert np.array_equal(row_echelon_form(zeros), zeros)

    def test_singular_rows(self):
        """Dependent second row reduces to zero."""
        out = row_echelon_form([[2.0, 4.0], [1.0, 2.0]])
        assert np.allclose(out, [[1.0, 2.0], [0.0, 0.0]])
        assert count_nonzero_rows(out) == 1

    def test_reduced_vs_plain(self):
        m = [[1.0, 2.0], [3.0, 4.0]]
        assert np.allclose(row_echelon_form(m, reduced=False), [[1.0, 2.0], [0.0, 1.0]])
        assert np.allclose(row_echelon_form(m, reduced=True), np.eye(2))

    def test_full_rank_square_reduces_to_identity(self):
        m = [[1.0, 2.0, 3.0], [4.0, 5.0, 6.0], [7.0, 8.0, 10.0]]
        assert np.allclose(row_echelon_form(m), np.eye(3))

    def test_zero_leading_entry_swaps_rows(self):
        out = row_echelon_form([[0.0, 1.0], [1.0, 0.0]])
        assert np.allclose(out, np.eye(2))

    def test_pivot_search_moves_right(self):
        out = row_echelon_form([[0.0, 2.0, 4.0], [0.0, 1.0, 3.0]])
        assert np.allclose(out, [[0.0, 1.0, 0.0], [0.0, 0.0, 1.0]])

    def test_wide_and_tall_shapes(self):
        wide = row_echelon_form([[1.0, 2.0, 3.0]])
        assert np.allclose(wide, [[1.0, 2.0, 3.0]])
        tall = row_echelon_form([[1.0], [2.0], [3.0]])
        assert np.allclose(tall, [[1.0], [0.0], [0.0]])

    def test_idempotent(self):
        rng = np.random.default_rng(3)
        m = rng.normal(size=(4, 5))
        once = row_echelon_form(m)
        twice = row_echelon_form(once)
        assert np.allclose(once, twice)

    def test_input_not_mutated(self):
        m = np.array([[2.0, 4.0], [1.0, 3.0]])
        before = m.copy()
        row_echelon_form(m)
        assert np.array_equal(m, before)

    def test_rejects_non_2d(self):
        with pytest.raises(ValueError):
            row_echelon_form(np.zeros((2, 2, 2)))

    def test_tiny_entries_are_not_pivots(self):
        tiny = DISTANCE_TOL / 10.0
        out = row_echelon_form([[tiny, 0.0], [0.0, tiny]])
        assert np.allclose(out, [[tiny, 0.0], [0.0, tiny]])


class TestRankHelpers:

    def test_count_nonzero_rows(self):
        m = [[0.0, 0.0], [DISTANCE_TOL / 1000.0, 0.0], [0.0, 1.0]]
        assert count_nonzero_rows(m) == 1
        assert count_nonzero_rows(np.zeros((0, 3))) == 0

    def test_ref_tolerance_scales(self):
        m = [[1.0, 2.0], [3.0, 4.0]]
        # max(M, N) = 2, max row abs sum = 7
        assert ref_tolerance(m) == pytest.approx(DISTANCE_TOL * 2 * 7)

    def test_ref_tolerance_is_capped(self):
        assert ref_tolerance([[1e12]]) == pytest.approx(1 - DISTANCE_TOL)

    def test_matrix_rank(self):
        assert matrix_rank(np.eye(3)) == 3
        assert matrix_rank([[1.0, 2.0], [2.0, 4.0]]) == 1
        assert matrix_rank(np.zeros((3, 3))) == 0

    def test_matrix_rank_of_zero_and_tiny_matrices(self):
        assert ref_tolerance(np.zeros((2, 3))) == 0.0
        assert matrix_rank(np.zeros((2, 3))) == 0
        assert matrix_rank([[DISTANCE_TOL / 10.0, 0.0], [0.0, 0.0]]) == 0
        assert matrix_rank(np.zeros((0, 3))) == 0


def test_nonzero_rows_of_echelon_form_match_numpy_rank():
    rng = np.random.default_rng(11)
    base = rng.normal(size=(3, 4))
    m = np.vstack([base, base[0] + base[1]])
    assert count_nonzero_rows(row_echelon_form(m)) == np.linalg.matrix_rank(m)
