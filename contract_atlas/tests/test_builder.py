"""
contract_atlas/tests/test_builder.py — Tests for contract_atlas.graph.builder.

Tests verify:
- build_graph returns a DiGraph with Agency and Vendor nodes.
- uses edges run Agency → Vendor and carry amount / count weights.
- Summary table columns are copied onto nodes.
- Overlapping agency and vendor labels raise InvalidGraphError.
- validate_bipartite_graph returns the node classes and rejects violations.
"""

import networkx as nx
import pandas as pd
import pytest

from contract_atlas.graph.builder import (
    InvalidGraphError,
    build_bipartite_graph,
    validate_bipartite_graph,
)
from contract_atlas.ingestion.contract_records import normalize_contract_records
from contract_atlas.metrics.aggregation import (
    agency_summary,
    agency_vendor_edges,
    vendor_summary,
)


@pytest.fixture
def tables(contract_records_frame):
    records = normalize_contract_records(contract_records_frame)
    return agency_vendor_edges(records), agency_summary(records), vendor_summary(records)


class TestBuildBipartiteGraph:
    """Tests for the edge-table graph builder."""

    def test_returns_digraph(self, tables):
        edges, _, _ = tables
        assert isinstance(build_bipartite_graph(edges), nx.DiGraph)

    def test_node_classes(self, tables):
        edges, _, _ = tables
        G = build_bipartite_graph(edges)
        agencies = {n for n, d in G.nodes(data=True) if d["node_type"] == "Agency"}
        vendors = {n for n, d in G.nodes(data=True) if d["node_type"] == "Vendor"}
        assert agencies == {"Parks", "Police", "Library", "Fire"}
        assert vendors == {"Acme Corp", "Green Co", "Books Inc", "Hose Ltd"}
        assert G.graph["n_agencies"] == 4
        assert G.graph["n_vendors"] == 4

    def test_edges_run_agency_to_vendor(self, tables):
        edges, _, _ = tables
        G = build_bipartite_graph(edges)
        for u, v, d in G.edges(data=True):
            assert G.nodes[u]["node_type"] == "Agency"
            assert G.nodes[v]["node_type"] == "Vendor"
            assert d["edge_type"] == "uses"

    def test_edge_weights(self, tables):
        edges, _, _ = tables
        G = build_bipartite_graph(edges)
        data = G.edges["Parks", "Acme Corp"]
        assert data["contract_count"] == 2
        assert data["total_amount"] == pytest.approx(3500.0)

    def test_summary_attributes_copied(self, tables):
        edges, agencies, vendors = tables
        G = build_bipartite_graph(edges, agencies, vendors)
        assert G.nodes["Parks"]["contract_count"] == 3
        assert G.nodes["Parks"]["node_type"] == "Agency"
        assert G.nodes["Acme Corp"]["agency_count"] == 2

    def test_agencies_without_edges_are_kept(self, tables):
        edges, agencies, _ = tables
        extra = pd.concat(
            [agencies, pd.DataFrame([{"agency": "Dormant Office", "contract_count": 0}])],
            ignore_index=True,
        )
        G = build_bipartite_graph(edges, extra)
        assert "Dormant Office" in G
        assert G.degree("Dormant Office") == 0

    def test_edges_without_weight_columns(self):
        edges = pd.DataFrame({"agency": ["A"], "vendor": ["V"]})
        G = build_bipartite_graph(edges)
        assert G.edges["A", "V"]["contract_count"] == 1
        assert G.edges["A", "V"]["total_amount"] == 0.0

    def test_overlapping_labels_raise(self):
        edges = pd.DataFrame({"agency": ["Acme", "Parks"], "vendor": ["Parks", "Acme"]})
        with pytest.raises(InvalidGraphError, match="both agency and vendor"):
            build_bipartite_graph(edges)

    def test_empty_edges(self):
        G = build_bipartite_graph(pd.DataFrame(columns=["agency", "vendor"]))
        assert G.number_of_nodes() == 0


class TestValidateBipartiteGraph:

    def test_returns_classes(self):
        G = nx.DiGraph()
        G.add_node("A", node_type="Agency")
        G.add_node("V", node_type="Vendor")
        G.add_edge("A", "V")
        assert validate_bipartite_graph(G) == {"Agency": {"A"}, "Vendor": {"V"}}

    def test_same_class_edge_rejected(self):
        G = nx.Graph()
        G.add_node("A", node_type="Agency")
        G.add_node("B", node_type="Agency")
        G.add_edge("A", "B")
        with pytest.raises(InvalidGraphError, match="two Agency nodes"):
            validate_bipartite_graph(G)

    def test_unknown_node_type_rejected(self):
        G = nx.DiGraph()
        G.add_node("X", node_type="Contractor")
        with pytest.raises(InvalidGraphError):
            validate_bipartite_graph(G)


def test_blank_and_nan_labels_dropped():
    edges = pd.DataFrame({
        "agency": ["A", "B", None, " C "],
        "vendor": ["", float("nan"), "V1", "V1"],
    })
    G = build_bipartite_graph(edges)
    assert set(G.nodes) == {"C", "V1"}
    assert G.has_edge("C", "V1")
    assert "nan" not in G
