"""
contract_atlas/tests/test_network_summary.py — Tests for the per-agency network table.
"""

import pandas as pd

from contract_atlas.graph.projection import ProjectedEdge, ProjectedGraph
from contract_atlas.metrics.communities import detect_communities
from contract_atlas.metrics.network_summary import agency_network_table


def make_star() -> ProjectedGraph:
    return ProjectedGraph(
        target_class="Agency",
        nodes=("Hub", "Leaf1", "Leaf2", "Lonely"),
        edges=(ProjectedEdge("Hub", "Leaf1", 3), ProjectedEdge("Hub", "Leaf2", 1)),
    )


def test_degree_and_shared_totals():
    table = agency_network_table(make_star()).set_index("agency")
    assert table.loc["Hub", "degree"] == 2
    assert table.loc["Hub", "shared_vendor_total"] == 4
    assert table.loc["Leaf1", "shared_vendor_total"] == 3
    assert table.loc["Lonely", "degree"] == 0


def test_sorted_by_degree():
    table = agency_network_table(make_star())
    assert table["agency"].tolist() == ["Hub", "Leaf1", "Leaf2", "Lonely"]


def test_community_column_added():
    projected = make_star()
    table = agency_network_table(projected, detect_communities(projected))
    assert "community" in table.columns
    assert table.set_index("agency").loc["Lonely", "community"] != (
        table.set_index("agency").loc["Hub", "community"]
    )


def test_agency_table_joined():
    agencies = pd.DataFrame({"agency": ["Hub", "Leaf1"], "total_amount": [100.0, 5.0]})
    table = agency_network_table(make_star(), agency_table=agencies).set_index("agency")
    assert table.loc["Hub", "total_amount"] == 100.0
    assert pd.isna(table.loc["Lonely", "total_amount"])


def test_vendor_projection_uses_vendor_column():
    projected = ProjectedGraph("Vendor", ("V1", "V2"), (ProjectedEdge("V1", "V2", 1),))
    table = agency_network_table(projected)
    assert "vendor" in table.columns
