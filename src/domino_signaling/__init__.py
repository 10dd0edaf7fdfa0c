# domino-signaling: cluster and gene signaling networks from linkage models
"""
Derives cell-cell signaling networks from single-cell data: cluster-level
signaling graphs, gene association graphs and heatmap-ready matrices built
from receptor/ligand/transcription factor linkages.
"""

__version__ = "0.1.0"

from . import data
from . import analysis
from . import network
from .config import load_config
from .errors import (
    DominoError,
    ConfigError,
    PreconditionError,
    DomainError,
    NoClustersError,
)
from .data import LinkageIndex, SignalingNetwork, rename_clusters
from .analysis import collate_network_items, transform
from .network import gene_network, signaling_network
