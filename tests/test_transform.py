from unittest import TestCase

import numpy as np
import numpy.testing as npt
import pandas as pd

from domino_signaling.analysis.transform import (
    HEATMAP_SCALES,
    clamp,
    normalize_matrix,
    scale_matrix,
    transform,
)
from domino_signaling.errors import ConfigError, DomainError


class TestClamp(TestCase):
    def test_clamp_bounds(self):
        mat = np.array([[-2.0, 0.5], [3.0, 10.0]])
        clamped = clamp(mat, 0, 5)
        npt.assert_array_equal(clamped, [[0.0, 0.5], [3.0, 5.0]])
        self.assertTrue(np.all(clamped >= 0) and np.all(clamped <= 5))

    def test_clamp_keeps_labels_and_input(self):
        mat = pd.DataFrame([[1.0, 7.0]], index=["R_A"], columns=["L_A", "L_B"])
        clamped = clamp(mat, max_thresh=4)
        self.assertEqual(list(clamped.columns), ["L_A", "L_B"])
        self.assertEqual(clamped.loc["R_A", "L_B"], 4.0)
        self.assertEqual(mat.loc["R_A", "L_B"], 7.0)

    def test_none_thresholds_are_unbounded(self):
        mat = np.array([-1e9, 1e9])
        npt.assert_array_equal(clamp(mat, None, None), mat)

    def test_nan_untouched(self):
        clamped = clamp(np.array([np.nan, 4.0]), 0, 1)
        self.assertTrue(np.isnan(clamped[0]))
        self.assertEqual(clamped[1], 1.0)

    def test_inverted_thresholds(self):
        with self.assertRaises(ConfigError):
            clamp(np.ones((2, 2)), 3, 1)


class TestScale(TestCase):
    def test_scales_are_monotonic(self):
        values = np.array([0.5, 1.0, 4.0, 9.0])
        for scale in ("none", "sqrt", "log", "sq"):
            scaled = scale_matrix(values, scale)
            self.assertTrue(np.all(np.diff(scaled) > 0), scale)

    def test_scale_values(self):
        values = np.array([4.0, 100.0])
        npt.assert_allclose(scale_matrix(values, "sqrt"), [2.0, 10.0])
        npt.assert_allclose(scale_matrix(values, "log"), [np.log10(4.0), 2.0])
        npt.assert_allclose(scale_matrix(values, "sq"), [16.0, 10000.0])

    def test_log_of_zero(self):
        self.assertEqual(scale_matrix(np.array([0.0]), "log")[0], -np.inf)

    def test_negative_values_rejected(self):
        for scale in ("sqrt", "log"):
            with self.assertRaises(DomainError):
                scale_matrix(np.array([-1.0, 2.0]), scale)

    def test_square_accepts_negative_values(self):
        npt.assert_array_equal(scale_matrix(np.array([-2.0]), "sq"), [4.0])

    def test_unknown_scale(self):
        with self.assertRaises(ConfigError):
            scale_matrix(np.ones(2), "cube")
        with self.assertRaises(ConfigError):
            scale_matrix(np.ones(2), "sq", scales=HEATMAP_SCALES)


class TestNormalize(TestCase):
    def test_row_normalization(self):
        mat = np.array([[2.0, 4.0], [0.0, 0.0], [-6.0, 3.0]])
        normed = normalize_matrix(mat, "row")
        npt.assert_allclose(normed, [[0.5, 1.0], [0.0, 0.0], [-1.0, 0.5]])
        npt.assert_allclose(np.abs(normed[[0, 2]]).max(axis=1), [1.0, 1.0])

    def test_column_normalization(self):
        mat = np.array([[2.0, 1.0], [4.0, 0.5]])
        npt.assert_allclose(normalize_matrix(mat, "lig_norm"), [[0.5, 1.0], [1.0, 0.5]])

    def test_aliases_agree(self):
        mat = np.array([[1.0, 3.0], [2.0, 5.0]])
        npt.assert_array_equal(normalize_matrix(mat, "rec_norm"), normalize_matrix(mat, "row"))
        npt.assert_array_equal(normalize_matrix(mat, "lig_norm"), normalize_matrix(mat, "col"))

    def test_idempotent(self):
        mat = np.array([[1.0, 3.0], [2.0, 5.0]])
        for mode in ("row", "col"):
            once = normalize_matrix(mat, mode)
            npt.assert_allclose(normalize_matrix(once, mode), once)

    def test_row_normalization_after_log(self):
        normed = transform(np.array([[0.0, 10.0, 100.0]]), scale="log", normalize="row")
        npt.assert_allclose(normed, [[-np.inf, 0.5, 1.0]])
        self.assertEqual(np.nanmax(normed), 1.0)
        npt.assert_allclose(normalize_matrix(normed, "row"), normed)

    def test_column_normalization_after_log(self):
        normed = transform(np.array([[0.0, 10.0], [100.0, 1.0]]), scale="log", normalize="lig_norm")
        npt.assert_allclose(normed, [[-np.inf, 1.0], [1.0, 0.0]])

    def test_log_of_all_zero_row(self):
        normed = transform(np.array([[0.0, 0.0], [1.0, 10.0]]), scale="log", normalize="row")
        npt.assert_array_equal(normed[0], [-np.inf, -np.inf])
        npt.assert_allclose(normed[1], [0.0, 1.0])

    def test_negative_rows_peak_at_unit_magnitude(self):
        mat = np.array([[-4.0, -2.0], [-np.inf, 0.5], [-0.5, 0.25]])
        normed = normalize_matrix(mat, "row")
        npt.assert_allclose(normed, [[-1.0, -0.5], [-np.inf, 1.0], [-1.0, 0.5]])
        finite = np.where(np.isfinite(normed), np.abs(normed), 0.0)
        npt.assert_allclose(finite.max(axis=1), [1.0, 1.0, 1.0])
        npt.assert_allclose(normalize_matrix(normed, "row"), normed)

    def test_log_of_fractions(self):
        normed = transform(np.array([[0.1, 0.5]]), scale="log", normalize="row")
        npt.assert_allclose(normed, [[-1.0, np.log10(0.5)]])
        npt.assert_allclose(normalize_matrix(normed, "row"), normed)

    def test_empty_matrix(self):
        self.assertEqual(normalize_matrix(np.zeros((0, 3)), "row").shape, (0, 3))

    def test_unknown_normalize(self):
        with self.assertRaises(ConfigError):
            normalize_matrix(np.ones(2), "total")


class TestTransform(TestCase):
    def test_order_clamp_scale_normalize(self):
        mat = np.array([[4.0, 16.0]])
        npt.assert_allclose(transform(mat, 0, 9, "sqrt", "row"), [[2.0 / 3.0, 1.0]])

    def test_clamp_before_domain_check(self):
        mat = np.array([[-1.0, 4.0]])
        npt.assert_allclose(transform(mat, 0, np.inf, "sqrt"), [[0.0, 2.0]])
        with self.assertRaises(DomainError):
            transform(mat, scale="sqrt")

    def test_options_validated_first(self):
        with self.assertRaises(ConfigError):
            transform(np.array([[-1.0]]), scale="sq")
        with self.assertRaises(ConfigError):
            transform(np.array([[-1.0]]), scale="sqrt", normalize="both")

    def test_input_not_modified(self):
        mat = pd.DataFrame([[1.0, 9.0]], index=["R_A"], columns=["L_A", "L_B"])
        result = transform(mat, 2, 5, "sqrt", "row")
        self.assertEqual(mat.loc["R_A", "L_A"], 1.0)
        self.assertIsInstance(result, pd.DataFrame)
        self.assertEqual(result.loc["R_A", "L_B"], 1.0)
