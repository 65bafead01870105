"""
contract_atlas/metrics/network_summary.py — Per-node table for the projection.

Joins the projection's structure (degree, shared-vendor total, community)
with the agency summary columns so a reader can sort agencies by how widely
their vendors are shared.
"""

import logging
from collections import defaultdict

import pandas as pd

from contract_atlas.graph.projection import ProjectedGraph
from contract_atlas.metrics.communities import CommunityPartition

logger = logging.getLogger(__name__)


def agency_network_table(
    projected: ProjectedGraph,
    partition: CommunityPartition | None = None,
    agency_table: pd.DataFrame | None = None,
) -> pd.DataFrame:
    """
    Build one row per projected node.

    Columns:
        agency               — node label (named after the target class
                               column, 'agency' or 'vendor')
        degree               — number of nodes it shares a neighbour with
        shared_vendor_total  — sum of shared_count over incident edges
        community            — community id (only when `partition` is given)
        ...                  — agency_table columns, joined on the label

    Sorted by degree descending, then label ascending.
    """
    key = projected.target_class.lower()
    degree: dict[str, int] = defaultdict(int)
    shared: dict[str, int] = defaultdict(int)
    for e in projected.edges:
        for n in (e.source, e.target):
            degree[n] += 1
            shared[n] += e.shared_count or 0

    table = pd.DataFrame({
        key: list(projected.nodes),
        "degree": [degree[n] for n in projected.nodes],
        "shared_vendor_total": [shared[n] for n in projected.nodes],
    })

    if partition is not None:
        table["community"] = [partition.membership.get(n, -1) for n in projected.nodes]

    if agency_table is not None and key in agency_table.columns:
        table = table.merge(agency_table, on=key, how="left")

    table = table.sort_values(["degree", key], ascending=[False, True]).reset_index(drop=True)

    logger.debug("Network table built for %d %s nodes.", len(table), projected.target_class)
    return table
