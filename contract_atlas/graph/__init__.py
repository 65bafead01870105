"""
contract_atlas.graph — NetworkX graph construction and projection layer.

Modules:
    builder     — Build the bipartite Agency→Vendor graph from the edge table.
    projection  — Project the bipartite graph onto one node class.

Bipartite graphs are NetworkX DiGraphs with the schema:
    Node types : Agency, Vendor
    Edge types : uses (Agency → Vendor; total_amount, contract_count)
"""

from contract_atlas.graph.builder import (
    AGENCY,
    VENDOR,
    InvalidGraphError,
    build_bipartite_graph,
    validate_bipartite_graph,
)
from contract_atlas.graph.projection import (
    GraphProjector,
    ProjectedEdge,
    ProjectedGraph,
    project_bipartite_graph,
)
