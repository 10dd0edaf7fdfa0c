"""
domino-signaling Network Module

Cluster and gene signaling graphs, layouts and export.
"""

__all__ = [
    # Layouts
    'NetworkResult',
    'grid_layout',
    'compute_layout',
    # Cluster graphs
    'build_cluster_graph',
    'signaling_network',
    # Gene graphs
    'build_gene_graph',
    'gene_network',
    # Export
    'create_cytoscape_json',
    'create_sif_format',
    'write_graphml',
    'to_pyg_data',
]


def __getattr__(name):
    """Lazy import mechanism to avoid loading torch unless exporting."""
    if name in ('NetworkResult', 'grid_layout', 'compute_layout'):
        from .layout import NetworkResult, grid_layout, compute_layout
        return locals()[name]

    if name in ('build_cluster_graph', 'signaling_network'):
        from .cluster_graph import build_cluster_graph, signaling_network
        return locals()[name]

    if name in ('build_gene_graph', 'gene_network'):
        from .gene_graph import build_gene_graph, gene_network
        return locals()[name]

    if name in ('create_cytoscape_json', 'create_sif_format', 'write_graphml', 'to_pyg_data'):
        from .export import create_cytoscape_json, create_sif_format, write_graphml, to_pyg_data
        return locals()[name]

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
