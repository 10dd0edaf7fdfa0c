from dataclasses import replace

import numpy as np
import numpy.testing as npt
import pandas as pd

from domino_signaling.analysis.matrices import (
    connection_marks,
    correlation_matrix,
    correlation_scatter,
    feature_matrix,
    incoming_signaling_matrix,
    signaling_matrix,
)
from domino_signaling.errors import ConfigError, PreconditionError

from .mixins import CELLS, TestMixin, create_toy_network


class TestSignalingMatrix(TestMixin):
    def test_full_matrix(self):
        mat = signaling_matrix(self.network)
        self.assertEqual(list(mat.index), ["R_A", "R_B"])
        self.assertEqual(list(mat.columns), ["L_A", "L_B"])
        npt.assert_array_equal(mat.to_numpy(), [[2.0, 0.0], [0.0, 3.0]])

    def test_cluster_subset_and_transform(self):
        mat = signaling_matrix(self.network, clusts=["B"], scale="sqrt")
        self.assertEqual(mat.shape, (1, 1))
        npt.assert_allclose(mat.loc["R_B", "L_B"], np.sqrt(3.0))

    def test_square_not_a_heatmap_scale(self):
        with self.assertRaises(ConfigError):
            signaling_matrix(self.network, scale="sq")

    def test_unknown_cluster(self):
        with self.assertRaises(ConfigError):
            signaling_matrix(self.network, clusts=["Z"])

    def test_preconditions(self):
        with self.assertRaises(PreconditionError):
            signaling_matrix(create_toy_network(built=False))
        with self.assertRaises(PreconditionError):
            signaling_matrix(create_toy_network(clusters=False))


class TestIncomingSignalingMatrix(TestMixin):
    def test_incoming(self):
        mat = incoming_signaling_matrix(self.network, "B", normalize="lig_norm")
        self.assertEqual(list(mat.index), ["lig1", "lig3"])
        npt.assert_allclose(mat.to_numpy(), [[0.5, 1.0], [1.0, 0.0]])

    def test_no_incoming_signaling(self):
        empty = pd.DataFrame(columns=["L_A", "L_B"], dtype=float)
        network = self.network.with_build(
            self.network.signaling,
            {"A": self.network.incoming("A"), "B": empty},
            self.network.linkages,
        )
        with self.assertWarns(UserWarning):
            self.assertIsNone(incoming_signaling_matrix(network, "B"))

    def test_unknown_cluster(self):
        with self.assertRaises(ConfigError):
            incoming_signaling_matrix(self.network, "Z")


class TestFeatureMatrix(TestMixin):
    def test_binary_default(self):
        mat = feature_matrix(self.network)
        self.assertEqual(list(mat.index), ["tf1", "tf2", "tf3"])
        self.assertEqual(list(mat.columns), CELLS)
        npt.assert_array_equal(
            mat.to_numpy(),
            [[1, 0, 1, 0], [0, 1, 1, 0], [0, 1, 0, 1]],
        )

    def test_cells_ordered_by_cluster(self):
        clusters = pd.Series(pd.Categorical(["B", "A", "B", "A"], categories=["A", "B"]), index=CELLS)
        network = replace(self.network, clusters=clusters)
        mat = feature_matrix(network, feats="tf1", binary=False)
        self.assertEqual(list(mat.columns), ["c2", "c4", "c1", "c3"])
        npt.assert_array_equal(mat.to_numpy(), [[0.1, 0.0, 0.9, 0.3]])

    def test_norm_then_threshold(self):
        with self.assertWarns(UserWarning):
            mat = feature_matrix(self.network, feats=["tf1"], norm=True, max_thresh=0.5, binary=False)
        npt.assert_allclose(mat.to_numpy(), [[0.5, 0.1 / 0.9, 0.3 / 0.9, 0.0]])

    def test_missing_features_warn(self):
        with self.assertWarns(UserWarning):
            mat = feature_matrix(self.network, feats=["tf1", "tfX"])
        self.assertEqual(list(mat.index), ["tf1"])

    def test_all_features(self):
        mat = feature_matrix(self.network, feats="all", bool_thresh=0.5)
        self.assertEqual(mat.shape, (3, 4))
        npt.assert_array_equal(mat.loc["tf3"].to_numpy(), [0, 0, 0, 1])


class TestCorrelationMatrix(TestMixin):
    def test_default_selection(self):
        mat = correlation_matrix(self.network)
        self.assertEqual(list(mat.index), ["r1", "r2"])
        self.assertEqual(list(mat.columns), ["tf1", "tf2", "tf3"])
        npt.assert_array_equal(mat.to_numpy(), [[1, 0, 1], [0, 0, 1]])

    def test_receptors_follow_features(self):
        mat = correlation_matrix(self.network, feats=["tf3"], binary=False)
        self.assertEqual(list(mat.index), ["r2", "r1"])
        npt.assert_array_equal(mat["tf3"].to_numpy(), [0.4, 0.2])

    def test_requires_correlation(self):
        with self.assertRaises(PreconditionError):
            correlation_matrix(create_toy_network(built=False))

    def test_connection_marks(self):
        marks = connection_marks(self.network, ["r1", "r2"], ["tf1", "tf3"])
        self.assertEqual(marks.loc["r1", "tf1"], "X")
        self.assertEqual(marks.loc["r1", "tf3"], "X")
        self.assertEqual(marks.loc["r2", "tf3"], "X")
        self.assertEqual(marks.loc["r2", "tf1"], "")


class TestCorrelationScatter(TestMixin):
    def test_dropout_removed(self):
        scatter = correlation_scatter(self.network, "tf1", "r1")
        self.assertEqual(list(scatter.data.index), ["c1", "c3", "c4"])
        npt.assert_array_equal(scatter.data["rec"].to_numpy(), [1.5, 0.5, -1.5])
        npt.assert_array_equal(scatter.data["tf"].to_numpy(), [0.9, 0.3, 0.0])
        expected = np.corrcoef([1.5, 0.5, -1.5], [0.9, 0.3, 0.0])[0, 1]
        self.assertAlmostEqual(scatter.r, expected)

    def test_keep_dropout(self):
        scatter = correlation_scatter(self.network, "tf1", "r1", remove_rec_dropout=False)
        self.assertEqual(len(scatter.data), 4)

    def test_too_few_cells(self):
        counts = self.network.counts.copy()
        counts.loc["r1"] = [1, 0, 0, 0]
        scatter = correlation_scatter(replace(self.network, counts=counts), "tf1", "r1")
        self.assertTrue(np.isnan(scatter.r))

    def test_errors(self):
        with self.assertRaises(ConfigError):
            correlation_scatter(self.network, "tf1", "rX")
        with self.assertRaises(ConfigError):
            correlation_scatter(self.network, "tfX", "r1")
        with self.assertRaises(PreconditionError):
            correlation_scatter(replace(self.network, counts=None), "tf1", "r1")
