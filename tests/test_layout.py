from unittest import TestCase

import networkx as nx
import numpy as np
import numpy.testing as npt

from domino_signaling.errors import ConfigError
from domino_signaling.network.layout import (
    GRID_COLUMNS,
    LAYOUTS,
    check_layout,
    compute_layout,
    grid_layout,
)


class TestGridLayout(TestCase):
    def test_columns_and_spread(self):
        coords = grid_layout(
            ["l1", "l2", "l3", "r1", "f1"],
            ligands=["l1", "l2", "l3"],
            receptors=["r1"],
            features=["f1"],
        )
        npt.assert_array_equal(coords.loc[["l1", "l2", "l3"], "x"], GRID_COLUMNS["ligands"])
        npt.assert_allclose(coords.loc[["l1", "l2", "l3"], "y"], [-1.0, 0.0, 1.0])
        self.assertEqual(coords.loc["r1", "x"], 0.0)
        self.assertEqual(coords.loc["r1", "y"], 0.0)
        self.assertEqual(coords.loc["f1", "x"], 0.75)

    def test_last_class_wins(self):
        coords = grid_layout(["g"], ligands=["g"], receptors=["g"], features=[])
        self.assertEqual(coords.loc["g", "x"], GRID_COLUMNS["receptors"])

    def test_unclassified_nodes_at_origin(self):
        coords = grid_layout(["a", "b"], ligands=["a"], receptors=[], features=[])
        self.assertEqual(coords.loc["b", "x"], 0.0)
        self.assertEqual(coords.loc["b", "y"], 0.0)


class TestComputeLayout(TestCase):
    def setUp(self):
        self.graph = nx.DiGraph([("A", "B"), ("B", "C"), ("C", "A")])

    def test_all_layouts(self):
        for layout in LAYOUTS:
            coords = compute_layout(self.graph, layout, seed=1)
            self.assertEqual(list(coords.index), ["A", "B", "C"], layout)
            self.assertTrue(np.all(np.isfinite(coords.to_numpy())), layout)

    def test_seeded_layouts_reproducible(self):
        for layout in ("random", "fr"):
            npt.assert_allclose(
                compute_layout(self.graph, layout, seed=3),
                compute_layout(self.graph, layout, seed=3),
            )

    def test_empty_graph(self):
        coords = compute_layout(nx.DiGraph(), "sphere")
        self.assertEqual(list(coords.columns), ["x", "y", "z"])
        self.assertEqual(len(coords), 0)

    def test_unknown_layout(self):
        with self.assertRaises(ConfigError):
            check_layout("grid")
        with self.assertRaises(ConfigError):
            compute_layout(self.graph, "spiral")
