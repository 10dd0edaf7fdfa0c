"""
Node layouts for signaling network graphs.

The grid layout is a fixed three-column schematic (ligands, receptors,
features). Other layouts are delegated to networkx.
"""

import numpy as np
import pandas as pd
import networkx as nx
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..errors import ConfigError


LAYOUTS = ('random', 'circle', 'sphere', 'fr', 'kk')
GENE_LAYOUTS = ('grid',) + LAYOUTS

# x-offsets of the grid layout columns
GRID_COLUMNS = {
    'ligands': -0.75,
    'receptors': 0.0,
    'features': 0.75,
}


@dataclass
class NetworkResult:
    """
    A network graph and its node coordinates.

    Attributes:
        graph: Directed graph with node/edge attributes (color, size, weight)
        layout: Node coordinates indexed by node, columns x, y (and z for
            the sphere layout)
        items: Ordered node names per class, for gene networks
    """
    graph: nx.DiGraph
    layout: pd.DataFrame
    items: Dict[str, List[str]] = field(default_factory=dict)


def check_layout(layout: str, options: Sequence[str] = LAYOUTS):
    if layout not in options:
        raise ConfigError(
            f"Do not recognize layout: {layout!r} (options: {', '.join(options)})"
        )


def _spread(n: int) -> np.ndarray:
    """Evenly spread, centered y positions: (i / mean(1..n) - 1) * 2."""
    positions = np.arange(1, n + 1, dtype=float)
    return (positions / positions.mean() - 1) * 2


def grid_layout(
    nodes: Sequence[str],
    ligands: Sequence[str],
    receptors: Sequence[str],
    features: Sequence[str],
) -> pd.DataFrame:
    """
    Three-column layout: ligands at x=-0.75, receptors at 0, features at 0.75.

    Columns are assigned in the order ligands, receptors, features, so a gene
    in several classes ends up in the last one. Nodes in none of the classes
    stay at the origin.

    Args:
        nodes: All graph nodes, in graph order
        ligands: Ligand nodes, top to bottom
        receptors: Receptor nodes, top to bottom
        features: Feature nodes, top to bottom

    Returns:
        DataFrame indexed by node with x, y columns
    """
    coords = pd.DataFrame(0.0, index=pd.Index(list(nodes), name='node'), columns=['x', 'y'])

    for column, genes in (('ligands', ligands), ('receptors', receptors), ('features', features)):
        genes = [g for g in genes if g in coords.index]
        if not genes:
            continue
        coords.loc[genes, 'x'] = GRID_COLUMNS[column]
        coords.loc[genes, 'y'] = _spread(len(genes))

    return coords


def sphere_layout(graph: nx.Graph) -> Dict:
    """Place nodes evenly on the unit sphere (golden spiral)."""
    nodes = list(graph.nodes)
    n = len(nodes)
    i = np.arange(n, dtype=float)
    z = 1 - 2 * (i + 0.5) / max(n, 1)
    radius = np.sqrt(1 - z ** 2)
    theta = np.pi * (1 + np.sqrt(5)) * i
    return {
        node: np.array([radius[k] * np.cos(theta[k]), radius[k] * np.sin(theta[k]), z[k]])
        for k, node in enumerate(nodes)
    }


def compute_layout(
    graph: nx.Graph,
    layout: str = 'circle',
    seed: Optional[int] = None,
) -> pd.DataFrame:
    """
    Compute node coordinates with a networkx layout.

    Args:
        graph: Graph to lay out
        layout: 'random', 'circle', 'sphere', 'fr' (Fruchterman-Reingold) or
            'kk' (Kamada-Kawai)
        seed: Random seed for 'random' and 'fr'

    Returns:
        DataFrame indexed by node with x, y (and z for 'sphere') columns
    """
    check_layout(layout)
    columns = ['x', 'y', 'z'] if layout == 'sphere' else ['x', 'y']

    if graph.number_of_nodes() == 0:
        return pd.DataFrame(columns=columns, dtype=float)

    if layout == 'random':
        pos = nx.random_layout(graph, seed=seed)
    elif layout == 'circle':
        pos = nx.circular_layout(graph)
    elif layout == 'sphere':
        pos = sphere_layout(graph)
    elif layout == 'fr':
        pos = nx.spring_layout(graph, weight=None, seed=seed)
    elif layout == 'kk':
        pos = nx.kamada_kawai_layout(graph, weight=None)

    nodes = list(graph.nodes)
    coords = np.array([pos[node] for node in nodes], dtype=float)
    return pd.DataFrame(coords, index=pd.Index(nodes, name='node'), columns=columns)
