"""
Cluster Signaling Graph

Builds a directed graph between clusters from a cluster signaling matrix.
An edge points from the ligand-expressing cluster to the receptor-expressing
cluster; its color is taken from the ligand cluster.
"""

import numpy as np
import pandas as pd
import networkx as nx
from matplotlib.colors import to_hex
from typing import Dict, Mapping, Optional, Sequence

from ..data.keys import ClusterKey, ligand_labels, receptor_labels
from ..data.network import SignalingNetwork
from ..errors import ConfigError
from ..analysis.transform import NETWORK_SCALES, clamp, transform
from .layout import NetworkResult, check_layout, compute_layout


SCALE_BY = ('lig_sig', 'rec_sig', 'none')
DEFAULT_COLOR = '#BBBBBB'


def resolve_colors(colors: Optional[Mapping]) -> Dict[str, str]:
    """Convert user colors (any matplotlib color spec) to hex strings."""
    if colors is None:
        return {}
    resolved = {}
    for name, color in colors.items():
        try:
            resolved[str(name)] = to_hex(color)
        except ValueError:
            raise ConfigError(f"Invalid color for {name}: {color!r}") from None
    return resolved


def build_cluster_graph(
    matrix: pd.DataFrame,
    cluster_levels: Sequence,
    scale_by: str = 'rec_sig',
    vert_scale: float = 3,
    edge_weight: float = 0.3,
    colors: Optional[Mapping] = None,
    support: Optional[pd.DataFrame] = None,
) -> nx.DiGraph:
    """
    Build the cluster-to-cluster signaling graph.

    Every nonzero entry M["R_r", "L_l"] becomes one edge l -> r. Zero,
    NaN and infinite entries produce no edge. Self-loops are kept.

    Args:
        matrix: Signaling matrix ["R_<cl>" x "L_<cl>"]
        cluster_levels: Clusters to consider, in order
        scale_by: Node size mode; 'lig_sig' for summed outgoing signaling,
            'rec_sig' for summed incoming signaling, or 'none'. Sums are
            scaled with asinh.
        vert_scale: Multiplier for node sizes
        edge_weight: Multiplier for edge weights
        colors: Cluster -> color. Clusters without a color are gray.
        support: Signaling matrix before scaling; only its nonzero entries
            become edges, so e.g. log-scaled zeros (-inf) are left out

    Returns:
        nx.DiGraph with node attributes color, size, incoming, outgoing and
        edge attributes signal, weight, width, color
    """
    if scale_by not in SCALE_BY:
        raise ConfigError(
            f"Don't recognize scale_by option {scale_by!r} as 'none', 'rec_sig', or 'lig_sig'"
        )

    levels = [str(cl) for cl in cluster_levels]
    missing = [label for label in receptor_labels(levels) if label not in matrix.index]
    missing += [label for label in ligand_labels(levels) if label not in matrix.columns]
    if missing:
        raise ConfigError(f"Clusters missing from signaling matrix: {', '.join(missing)}")

    cols = resolve_colors(colors)
    graph = nx.DiGraph()

    for rcl in levels:
        for lcl in levels:
            rlabel, llabel = ClusterKey.receptor(rcl).label, ClusterKey.ligand(lcl).label
            if support is not None and not support.loc[rlabel, llabel]:
                continue
            value = matrix.loc[rlabel, llabel]
            if value == 0 or not np.isfinite(value):
                continue
            graph.add_edge(
                lcl, rcl,
                signal=float(value),
                weight=float(value) * edge_weight,
                width=float(value) * edge_weight,
                color=cols.get(lcl, DEFAULT_COLOR),
            )

    # Summed incoming (rows) and outgoing (columns) signaling per cluster
    finite = matrix.where(np.isfinite(matrix), 0.0)
    rec_sums = finite.sum(axis=1)
    lig_sums = finite.sum(axis=0)

    for node in graph.nodes:
        incoming = float(rec_sums[ClusterKey.receptor(node).label])
        outgoing = float(lig_sums[ClusterKey.ligand(node).label])

        if scale_by == 'lig_sig':
            size = np.arcsinh(outgoing) * vert_scale
        elif scale_by == 'rec_sig':
            size = np.arcsinh(incoming) * vert_scale
        else:
            size = vert_scale

        graph.nodes[node].update(
            color=cols.get(node, DEFAULT_COLOR),
            size=float(size),
            incoming=incoming,
            outgoing=outgoing,
        )

    return graph


def signaling_network(
    network: SignalingNetwork,
    clusts: Optional[Sequence] = None,
    colors: Optional[Mapping] = None,
    edge_weight: float = 0.3,
    min_thresh: float = -np.inf,
    max_thresh: float = np.inf,
    normalize: str = 'none',
    scale: str = 'sq',
    layout: str = 'circle',
    scale_by: str = 'rec_sig',
    vert_scale: float = 3,
    seed: Optional[int] = None,
) -> NetworkResult:
    """
    Cluster-to-cluster signaling network of a built SignalingNetwork.

    Args:
        network: A built SignalingNetwork with clusters
        clusts: Clusters to include. All clusters when None.
        colors: Cluster -> color
        edge_weight: Signaling values are multiplied by this for edge width
        min_thresh: Values below are set to the threshold
        max_thresh: Values above are set to the threshold
        normalize: 'none', 'rec_norm' or 'lig_norm'
        scale: 'none', 'sqrt', 'log' or 'sq', applied after thresholding
        layout: 'random', 'circle', 'sphere', 'fr' or 'kk'
        scale_by: 'lig_sig', 'rec_sig' or 'none'
        vert_scale: Node size multiplier
        seed: Seed for random layouts

    Returns:
        NetworkResult with the graph and its layout
    """
    network.require_clusters(
        'This network was not built with clusters so there is no intercluster signaling.'
    )
    network.require_built('Please build a signaling network prior to using it.')
    check_layout(layout)

    levels = network.cluster_levels if clusts is None else [str(cl) for cl in clusts]

    mat = network.signaling
    if clusts is not None:
        missing = [cl for cl in levels if ClusterKey.receptor(cl).label not in mat.index
                   or ClusterKey.ligand(cl).label not in mat.columns]
        if missing:
            raise ConfigError(f"Unknown clusters: {', '.join(missing)}")
        mat = mat.loc[receptor_labels(levels), ligand_labels(levels)]

    clamped = clamp(mat, min_thresh, max_thresh)
    support = clamped.notna() & (clamped != 0)
    mat = transform(mat, min_thresh, max_thresh, scale, normalize, scales=NETWORK_SCALES)

    graph = build_cluster_graph(
        mat,
        levels,
        scale_by=scale_by,
        vert_scale=vert_scale,
        edge_weight=edge_weight,
        colors=colors,
        support=support,
    )
    return NetworkResult(graph=graph, layout=compute_layout(graph, layout, seed=seed))
