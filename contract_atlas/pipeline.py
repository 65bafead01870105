"""
contract_atlas/pipeline.py — Single-call pipeline orchestrator.

Provides run_full_pipeline() which executes the whole Contract Atlas sequence
in dependency order and returns a PipelineResult with every intermediate
table, graph and partition.

Usage:
    from contract_atlas.pipeline import run_full_pipeline
    result = run_full_pipeline("data/contracts.csv", output_dir="outputs")
    print(result.projected.number_of_edges)
"""

import json
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone

import networkx as nx
import pandas as pd

from contract_atlas.config import DEFAULT_CONFIG, ContractAtlasConfig
from contract_atlas.graph.builder import AGENCY, build_bipartite_graph
from contract_atlas.graph.projection import GraphProjector, ProjectedGraph
from contract_atlas.ingestion.contract_records import load_contract_records
from contract_atlas.metrics.aggregation import (
    agency_summary,
    agency_vendor_edges,
    vendor_summary,
)
from contract_atlas.metrics.communities import CommunityPartition, detect_communities
from contract_atlas.metrics.network_summary import agency_network_table

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """
    Complete output of a single Contract Atlas run.
    """

    # Inputs
    records: pd.DataFrame

    # Aggregation tables
    agency_table: pd.DataFrame
    vendor_table: pd.DataFrame
    edges: pd.DataFrame

    # Graphs
    G_bipartite: nx.DiGraph
    projected: ProjectedGraph

    # Communities
    partition: CommunityPartition
    network_table: pd.DataFrame

    # Export paths (populated when output_dir is given)
    output_paths: dict = field(default_factory=dict)

    def summary(self) -> dict:
        """Headline counts, JSON-serialisable."""
        return {
            "contracts": int(len(self.records)),
            "agencies": int(self.G_bipartite.graph.get("n_agencies", 0)),
            "vendors": int(self.G_bipartite.graph.get("n_vendors", 0)),
            "bipartite_edges": int(self.G_bipartite.number_of_edges()),
            "projected_edges": int(self.projected.number_of_edges),
            "isolated_agencies": len(self.projected.isolated_nodes()),
            "communities": int(self.partition.number_of_communities),
            "modularity": round(float(self.partition.modularity), 6),
            "total_amount": float(self.records["total_contract_amt"].sum()),
        }


def run_pipeline_on_records(
    records: pd.DataFrame,
    config: ContractAtlasConfig = DEFAULT_CONFIG,
    output_dir: str | None = None,
) -> PipelineResult:
    """
    Run every stage after ingestion on an already-normalized record frame.

    Dependency order:
        1. Aggregation tables (agency, vendor, edges)
        2. Bipartite graph
        3. Agency projection
        4. Community detection
        5. Network table
        6. Export (optional)
    """
    # ── 1. Aggregation ─────────────────────────────────────────────────────────
    df_agency = agency_summary(records)
    df_vendor = vendor_summary(records)
    df_edges = agency_vendor_edges(records)
    logger.info(
        "Phase 1/6: Aggregation — %d agencies, %d vendors, %d edges.",
        len(df_agency), len(df_vendor), len(df_edges),
    )

    # ── 2. Bipartite graph ─────────────────────────────────────────────────────
    G = build_bipartite_graph(df_edges, df_agency, df_vendor)
    logger.info("Phase 2/6: Bipartite graph — %d nodes, %d edges.", G.number_of_nodes(), G.number_of_edges())

    # ── 3. Projection ──────────────────────────────────────────────────────────
    projected = GraphProjector(config=config).project(G, target_class=AGENCY)
    logger.info("Phase 3/6: Projection — %d agency pairs share a vendor.", projected.number_of_edges)

    # ── 4. Communities ─────────────────────────────────────────────────────────
    partition = detect_communities(projected, config=config)
    logger.info("Phase 4/6: Communities — %d found.", partition.number_of_communities)

    # ── 5. Network table ───────────────────────────────────────────────────────
    network = agency_network_table(projected, partition, df_agency)
    logger.info("Phase 5/6: Network table — %d rows.", len(network))

    result = PipelineResult(
        records=records,
        agency_table=df_agency,
        vendor_table=df_vendor,
        edges=df_edges,
        G_bipartite=G,
        projected=projected,
        partition=partition,
        network_table=network,
    )

    # ── 6. Export (optional) ───────────────────────────────────────────────────
    if output_dir:
        result.output_paths = export_pipeline_outputs(result, output_dir)
        logger.info("Phase 6/6: Exported %d files to %s.", len(result.output_paths), output_dir)
    else:
        logger.info("Phase 6/6: Export skipped (no output_dir).")

    return result


def run_full_pipeline(
    records_path: str,
    config: ContractAtlasConfig = DEFAULT_CONFIG,
    output_dir: str | None = None,
) -> PipelineResult:
    """
    Execute the complete Contract Atlas pipeline in one call.

    Args:
        records_path: Path to the contract records CSV.
        config:       ContractAtlasConfig.
        output_dir:   If provided, tables and run_summary.json are written here.

    Returns:
        PipelineResult with every intermediate and final result.

    Raises:
        ValueError:        Required record columns missing.
        InvalidGraphError: Agency and vendor vocabularies overlap.
    """
    logger.info("Contract Atlas pipeline starting.")
    records = load_contract_records(records_path, config)
    result = run_pipeline_on_records(records, config, output_dir)
    logger.info("Contract Atlas pipeline complete.")
    return result


def export_pipeline_outputs(result: PipelineResult, output_dir: str) -> dict[str, str]:
    """
    Write the pipeline tables and a JSON run summary to `output_dir`.

    Files:
        agency_summary.csv, vendor_summary.csv, agency_vendor_edges.csv,
        projected_edges.csv, agency_network.csv, run_summary.json

    Returns:
        Dict mapping filename → absolute path.
    """
    os.makedirs(output_dir, exist_ok=True)
    tables = {
        "agency_summary.csv": result.agency_table,
        "vendor_summary.csv": result.vendor_table,
        "agency_vendor_edges.csv": result.edges,
        "projected_edges.csv": result.projected.to_frame(),
        "agency_network.csv": result.network_table,
    }

    paths: dict[str, str] = {}
    for filename, df in tables.items():
        path = os.path.abspath(os.path.join(output_dir, filename))
        df.to_csv(path, index=False)
        paths[filename] = path

    summary = result.summary()
    summary["generated_at"] = datetime.now(tz=timezone.utc).isoformat()
    summary["communities_members"] = [list(c) for c in result.partition.communities]
    path = os.path.abspath(os.path.join(output_dir, "run_summary.json"))
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(summary, fh, indent=2)
    paths["run_summary.json"] = path

    return paths
