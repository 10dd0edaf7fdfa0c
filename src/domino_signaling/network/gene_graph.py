"""
Gene Association Graph

Builds the ligand -> receptor -> feature graph behind the signaling of one or
more receptor clusters.
"""

import warnings
import pandas as pd
import networkx as nx
from typing import Iterable, List, Mapping, Optional, Sequence, Union

from ..data.linkage import LinkageIndex
from ..data.network import SignalingNetwork
from .cluster_graph import DEFAULT_COLOR, resolve_colors
from .layout import GENE_LAYOUTS, NetworkResult, check_layout, compute_layout, grid_layout


DEFAULT_CLASS_COLORS = {
    'lig': '#FF685F',
    'rec': '#47a7ff',
    'feat': '#39C740',
}
DEFAULT_NODE_SIZE = 10

# Cluster key holding the linkages of a network built without clusters
GLOBAL_CLUSTER = 'clust'


def _unique(items: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(items))


def build_gene_graph(
    linkages: LinkageIndex,
    features: Sequence[str],
    allowed_ligands: Iterable[str],
    class_colors: Optional[Mapping[str, str]] = None,
    colors: Optional[Mapping[str, str]] = None,
    ligand_sums: Optional[pd.Series] = None,
    lig_scale: Union[bool, float] = 1,
) -> nx.DiGraph:
    """
    Build a gene association graph from features of interest.

    Edges run receptor -> feature and ligand -> receptor. Duplicate edges
    collapse into one; self-loops (e.g. homophilic ligand/receptor genes)
    are kept.

    Args:
        linkages: Linkage index
        features: Transcription factors to start from
        allowed_ligands: Ligands that may be included
        class_colors: Colors for 'lig', 'rec' and 'feat' nodes
        colors: Per-gene colors overriding class colors
        ligand_sums: Aggregated signaling per ligand, used to size ligands
        lig_scale: Ligand size multiplier, or False to disable scaling

    Returns:
        nx.DiGraph with node attributes color, size, node_class and the
        ordered 'ligands', 'receptors', 'features' lists in graph.graph
    """
    class_cols = dict(DEFAULT_CLASS_COLORS)
    class_cols.update(resolve_colors(class_colors))

    graph = nx.DiGraph()

    all_recs = []
    all_tfs = []
    for tf in features:
        recs = linkages.receptors_for(tf)
        all_recs.extend(recs)
        if len(recs):
            all_tfs.append(tf)
        for rec in recs:
            graph.add_edge(rec, tf)
    all_recs = _unique(all_recs)
    all_tfs = _unique(all_tfs)

    allowed = set(allowed_ligands)
    all_ligs = []
    for rec in all_recs:
        for lig in linkages.ligands_for(rec):
            if lig in allowed:
                graph.add_edge(lig, rec)
                all_ligs.append(lig)
    all_ligs = _unique(all_ligs)

    for node in graph.nodes:
        graph.nodes[node].update(color=DEFAULT_COLOR, size=DEFAULT_NODE_SIZE, node_class=None)
    for node_class, genes in (('feat', all_tfs), ('rec', all_recs), ('lig', all_ligs)):
        for gene in genes:
            graph.nodes[gene].update(color=class_cols[node_class], node_class=node_class)
    for gene, color in resolve_colors(colors).items():
        if gene in graph:
            graph.nodes[gene]['color'] = color

    if lig_scale and ligand_sums is not None:
        for gene, total in ligand_sums.items():
            if gene in graph:
                graph.nodes[gene]['size'] = DEFAULT_NODE_SIZE * float(total) * lig_scale

    nx.set_edge_attributes(graph, 0.5, 'width')
    nx.set_edge_attributes(graph, 'black', 'color')

    graph.graph.update(ligands=all_ligs, receptors=all_recs, features=all_tfs)
    return graph


def _first_occurrence(sums: List[pd.Series]) -> pd.Series:
    """
    Concatenate per-cluster ligand sums keeping the first value per ligand.

    Warns when a ligand appears for several clusters with different sums,
    since only the first one is used.
    """
    if not sums:
        return pd.Series(dtype=float)
    combined = pd.concat(sums)
    dup = combined.index.duplicated(keep='first')
    if dup.any():
        conflicting = [
            gene for gene in _unique(combined.index[dup])
            if combined.loc[[gene]].nunique() > 1
        ]
        if conflicting:
            warnings.warn(
                'Ligands with different signaling sums across clusters, keeping the '
                f"first cluster's value: {' '.join(conflicting)}"
            )
    return combined[~dup]


def gene_network(
    network: SignalingNetwork,
    clust: Union[None, str, Sequence[str]] = None,
    class_colors: Optional[Mapping[str, str]] = None,
    colors: Optional[Mapping[str, str]] = None,
    lig_scale: Union[bool, float] = 1,
    layout: str = 'grid',
    seed: Optional[int] = None,
) -> Optional[NetworkResult]:
    """
    Gene association network for one or more receptor clusters.

    Only ligands, receptors and features associated with the receptor
    clusters are included.

    Args:
        network: A built SignalingNetwork
        clust: Receptor cluster or clusters. All clusters when None.
        class_colors: Colors for 'lig', 'rec' and 'feat' nodes
        colors: Per-gene colors overriding class colors
        lig_scale: Multiplier for ligand node sizes from their summed
            expression in the incoming signaling matrices, or False
        layout: 'grid', 'random', 'circle', 'sphere', 'fr' or 'kk'
        seed: Seed for random layouts

    Returns:
        NetworkResult, or None if no signaling was found for the clusters
    """
    check_layout(layout, GENE_LAYOUTS)

    if not network.built:
        warnings.warn('Please build a signaling network prior to using it.')

    ligand_sums = None
    if network.has_clusters:
        if clust is None:
            clust = network.cluster_levels
        elif isinstance(clust, str):
            clust = [clust]

        sums = []
        tfs = []
        allowed_ligs = []
        for cl in (str(c) for c in clust):
            mat = network.incoming(cl)
            if mat.shape[0] == 0:
                warnings.warn(f"No signaling found for {cl} under build parameters.")
                continue
            sums.append(mat.sum(axis=1))
            tfs.extend(network.linkages.features_for(cl))
            allowed_ligs.extend(mat.index)

        if len(tfs) == 0:
            warnings.warn('No signaling found for provided clusters')
            return None
        ligand_sums = _first_occurrence(sums)
    else:
        warnings.warn(
            "This network wasn't built with clusters. The global signaling network will be shown."
        )
        lig_scale = False
        tfs = list(network.linkages.features_for(GLOBAL_CLUSTER))
        allowed_ligs = list(network.genes)

    graph = build_gene_graph(
        network.linkages,
        tfs,
        allowed_ligs,
        class_colors=class_colors,
        colors=colors,
        ligand_sums=ligand_sums,
        lig_scale=lig_scale,
    )

    items = {key: list(graph.graph[key]) for key in ('ligands', 'receptors', 'features')}
    if layout == 'grid':
        coords = grid_layout(graph.nodes, items['ligands'], items['receptors'], items['features'])
    else:
        coords = compute_layout(graph, layout, seed=seed)

    return NetworkResult(graph=graph, layout=coords, items=items)
