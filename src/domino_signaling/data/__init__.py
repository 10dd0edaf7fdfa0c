"""
domino-signaling Data Module

Typed matrix keys, linkage index and the signaling network container.
"""

__all__ = [
    # Keys
    'ClusterRole',
    'ClusterKey',
    'receptor_labels',
    'ligand_labels',
    # Linkages
    'LinkageIndex',
    # Network
    'SignalingNetwork',
    'rename_clusters',
]


def __getattr__(name):
    """Lazy import mechanism to avoid loading all submodules at import time."""
    if name in ('ClusterRole', 'ClusterKey', 'receptor_labels', 'ligand_labels'):
        from .keys import ClusterRole, ClusterKey, receptor_labels, ligand_labels
        return locals()[name]

    if name == 'LinkageIndex':
        from .linkage import LinkageIndex
        return LinkageIndex

    if name in ('SignalingNetwork', 'rename_clusters'):
        from .network import SignalingNetwork, rename_clusters
        return locals()[name]

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
