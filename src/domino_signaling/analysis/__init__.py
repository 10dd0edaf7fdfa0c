"""
domino-signaling Analysis Module

Matrix transforms, network item collation and heatmap matrix views.
"""

from .transform import (
    HEATMAP_SCALES,
    NETWORK_SCALES,
    clamp,
    scale_matrix,
    normalize_matrix,
    transform,
)
from .collate import collate_linkages, collate_network_items
from .matrices import (
    signaling_matrix,
    incoming_signaling_matrix,
    feature_matrix,
    correlation_matrix,
    connection_marks,
    correlation_scatter,
    CorrelationScatter,
)

__all__ = [
    # Transforms
    'HEATMAP_SCALES',
    'NETWORK_SCALES',
    'clamp',
    'scale_matrix',
    'normalize_matrix',
    'transform',
    # Collation
    'collate_linkages',
    'collate_network_items',
    # Matrix views
    'signaling_matrix',
    'incoming_signaling_matrix',
    'feature_matrix',
    'correlation_matrix',
    'connection_marks',
    'correlation_scatter',
    'CorrelationScatter',
]
