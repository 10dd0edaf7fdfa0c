"""
Collation of network items.

Walks the linkage index from clusters to transcription factors, receptors
and ligands. Useful for comparing signaling networks across conditions.
"""

from typing import Dict, Iterable, List, Optional, Union

from ..data.linkage import LinkageIndex
from ..data.network import SignalingNetwork
from ..errors import ConfigError, NoClustersError


ITEM_KEYS = ('features', 'receptors', 'ligands')


def _unique(items: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(items))


def collate_linkages(
    linkages: LinkageIndex,
    clusters: Iterable,
    gene_universe: Iterable[str],
) -> Dict[str, List[str]]:
    """
    Collect the features, receptors and ligands reachable from clusters.

    Only features with at least one linked receptor are reported, and only
    ligands present in the gene universe are kept.

    Args:
        linkages: Linkage index
        clusters: Clusters to start from
        gene_universe: Genes present in the expression data

    Returns:
        Dict with deduplicated 'features', 'receptors' and 'ligands' lists
    """
    universe = set(gene_universe)

    de_tfs = []
    for cl in clusters:
        de_tfs.extend(linkages.features_for(cl))
    de_tfs = _unique(de_tfs)

    all_tfs = []
    all_recs = []
    for tf in de_tfs:
        recs = linkages.receptors_for(tf)
        all_recs.extend(recs)
        if len(recs):
            all_tfs.append(tf)
    all_tfs = _unique(all_tfs)
    all_recs = _unique(all_recs)

    all_ligs = []
    for rec in all_recs:
        all_ligs.extend(lig for lig in linkages.ligands_for(rec) if lig in universe)
    all_ligs = _unique(all_ligs)

    return {
        'features': all_tfs,
        'receptors': all_recs,
        'ligands': all_ligs,
    }


def collate_network_items(
    network: SignalingNetwork,
    clusters: Optional[Iterable] = None,
    which: Optional[str] = None,
) -> Union[Dict[str, List[str]], List[str]]:
    """
    Extract all features, receptors or ligands present in a signaling network.

    Args:
        network: A built SignalingNetwork
        clusters: Clusters to collate items from. All clusters when None.
        which: 'features', 'receptors' or 'ligands' to return a single list;
            None returns all three

    Returns:
        A list of items, or a dict of all three lists
    """
    if which is not None and which not in ITEM_KEYS:
        raise ConfigError(f"Unknown item type: {which!r} (options: {', '.join(ITEM_KEYS)})")
    network.require_built('Please build the signaling network prior to collating items.')

    if clusters is None:
        if not network.has_clusters:
            raise NoClustersError(
                'no clusters available: the network has no clusters, please provide clusters'
            )
        clusters = network.cluster_levels

    items = collate_linkages(network.linkages, clusters, network.genes)
    if which is None:
        return items
    return items[which]
