# graph_cvrp/core/problem_parser.py
import os
from typing import Tuple

import pandas as pd

from .. import config
from .graph import Graph, validate_instance

NODE_COLUMNS = ['ID', 'Demand']
EDGE_COLUMNS = ['From', 'To', 'Length']


def _read_table(file_path: str, columns) -> pd.DataFrame:
    df = pd.read_csv(file_path)
    df.columns = df.columns.str.strip()
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise ValueError(f"File '{file_path}' is missing columns {missing}")
    return df


def load_graph_csv(nodes_path: str, edges_path: str,
                   capacity: float = config.VEHICLE_CAPACITY) -> Graph:
    """
    Builds and validates a graph from a node table (ID, Demand) and an edge
    table (From, To, Length). Each undirected edge is listed once.
    """
    nodes_df = _read_table(nodes_path, NODE_COLUMNS)
    edges_df = _read_table(edges_path, EDGE_COLUMNS)

    graph = Graph(capacity)
    for _, row in nodes_df.sort_values('ID').iterrows():
        graph.add_node(int(row['ID']), float(row['Demand']))
    for _, row in edges_df.iterrows():
        graph.add_edge(int(row['From']), int(row['To']), float(row['Length']))
    return validate_instance(graph)


def export_graph_csv(graph: Graph, save_dir: str, prefix: str = "instance") -> Tuple[str, str]:
    os.makedirs(save_dir, exist_ok=True)
    nodes_df = pd.DataFrame([(nid, graph.demand(nid)) for nid in range(graph.size)], columns=NODE_COLUMNS)
    edges_df = pd.DataFrame(graph.edges(), columns=EDGE_COLUMNS)

    nodes_path = os.path.join(save_dir, f"{prefix}_nodes.csv")
    edges_path = os.path.join(save_dir, f"{prefix}_edges.csv")
    nodes_df.to_csv(nodes_path, index=False)
    edges_df.to_csv(edges_path, index=False)
    return nodes_path, edges_path
