"""
Export signaling network graphs to Cytoscape-compatible formats and to
PyTorch Geometric.
"""

import json
import numpy as np
import pandas as pd
import networkx as nx
import torch
from torch_geometric.data import Data
from pathlib import Path
from typing import Dict, Optional, Union


def nodes_frame(graph: nx.DiGraph, layout: Optional[pd.DataFrame] = None) -> pd.DataFrame:
    """One row per node with its attributes and, if given, its coordinates."""
    rows = []
    for node, attrs in graph.nodes(data=True):
        row = {'id': str(node)}
        row.update(attrs)
        if layout is not None and node in layout.index:
            for col in layout.columns:
                row[col] = float(layout.loc[node, col])
        rows.append(row)
    return pd.DataFrame(rows, columns=None if rows else ['id'])


def edges_frame(graph: nx.DiGraph) -> pd.DataFrame:
    """One row per edge with source, target and edge attributes."""
    rows = []
    for source, target, attrs in graph.edges(data=True):
        row = {'source': str(source), 'target': str(target)}
        row.update(attrs)
        rows.append(row)
    return pd.DataFrame(rows, columns=None if rows else ['source', 'target'])


def _json_value(value):
    if isinstance(value, (np.floating, float)):
        return None if not np.isfinite(value) else float(value)
    if isinstance(value, np.integer):
        return int(value)
    if value is not None and pd.isna(value):
        return None
    return value


def create_cytoscape_json(
    graph: nx.DiGraph,
    output_path: Optional[Union[str, Path]] = None,
    layout: Optional[pd.DataFrame] = None,
    network_name: str = 'domino-signaling',
) -> Dict:
    """
    Cytoscape.js compatible JSON document.

    Args:
        graph: Network graph
        output_path: Optional file to write the JSON to
        layout: Optional node coordinates (x, y columns)
        network_name: Network name stored in the document

    Returns:
        The JSON document as a dict
    """
    elements = {
        "nodes": [],
        "edges": []
    }

    for node, attrs in graph.nodes(data=True):
        node_data = {"id": str(node)}
        for key, value in attrs.items():
            node_data[key] = _json_value(value)
        element = {"data": node_data}
        if layout is not None and node in layout.index:
            element["position"] = {
                "x": float(layout.loc[node, 'x']),
                "y": float(layout.loc[node, 'y']),
            }
        elements["nodes"].append(element)

    for idx, (source, target, attrs) in enumerate(graph.edges(data=True)):
        edge_data = {
            "id": f"e{idx}",
            "source": str(source),
            "target": str(target)
        }
        for key, value in attrs.items():
            edge_data[key] = _json_value(value)
        elements["edges"].append({"data": edge_data})

    cytoscape_data = {
        "format_version": "1.0",
        "generated_by": "domino-signaling",
        "target_cytoscapejs_version": "~3.0",
        "data": {
            "name": network_name,
            "shared_name": network_name
        },
        "elements": elements
    }

    if output_path is not None:
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(cytoscape_data, f, indent=2)

    return cytoscape_data


def create_sif_format(graph: nx.DiGraph, output_path: Union[str, Path]) -> Path:
    """Simple Interaction Format (SIF) edge list for Cytoscape."""
    with open(output_path, 'w') as f:
        for source, target in graph.edges():
            f.write(f"{source}\tsignals\t{target}\n")
    return Path(output_path)


def write_graphml(graph: nx.DiGraph, output_path: Union[str, Path]) -> Path:
    """GraphML file for Cytoscape import; None attributes are dropped."""
    clean = nx.DiGraph()
    for node, attrs in graph.nodes(data=True):
        clean.add_node(str(node), **{k: v for k, v in attrs.items() if v is not None})
    for source, target, attrs in graph.edges(data=True):
        clean.add_edge(str(source), str(target), **{k: v for k, v in attrs.items() if v is not None})
    nx.write_graphml(clean, str(output_path))
    return Path(output_path)


def to_pyg_data(graph: nx.DiGraph, weight: str = 'weight') -> Data:
    """
    Convert a network graph to a PyTorch Geometric Data object.

    Args:
        graph: Network graph
        weight: Edge attribute used as edge_weight (1.0 when absent)

    Returns:
        Data with edge_index [2, E], edge_weight [E], node sizes as x [N, 1]
        and node_names
    """
    nodes = list(graph.nodes)
    node_to_idx = {node: i for i, node in enumerate(nodes)}

    src = []
    dst = []
    weights = []
    for source, target, attrs in graph.edges(data=True):
        src.append(node_to_idx[source])
        dst.append(node_to_idx[target])
        weights.append(float(attrs.get(weight, 1.0)))

    if src:
        edge_index = torch.tensor([src, dst], dtype=torch.long)
    else:
        edge_index = torch.zeros((2, 0), dtype=torch.long)

    sizes = [float(graph.nodes[node].get('size', 0.0)) for node in nodes]

    data = Data(
        x=torch.tensor(sizes, dtype=torch.float32).view(-1, 1),
        edge_index=edge_index,
        edge_weight=torch.tensor(weights, dtype=torch.float32),
        num_nodes=len(nodes),
    )
    data.node_names = [str(node) for node in nodes]
    return data
