"""
contract_atlas/cli.py — Command-line interface for the Contract Atlas pipeline.

Usage:
    python -m contract_atlas run contracts.csv --output-dir outputs
    python -m contract_atlas project agency_vendor_edges.csv --output projected.csv

Exit codes:
    0 — success
    2 — invalid input (missing columns, broken bipartite invariant)
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
import time

import pandas as pd

from contract_atlas.config import DEFAULT_CONFIG
from contract_atlas.graph.builder import AGENCY, NODE_CLASSES, InvalidGraphError

logger = logging.getLogger("contract_atlas.cli")


# ── Logging setup ─────────────────────────────────────────────────────────────

def _setup_logging(level: str = "INFO") -> None:
    """Configure root logger with timestamps."""
    numeric = getattr(logging, level.upper(), logging.INFO)
    fmt = "%(asctime)s  %(levelname)-8s  %(name)s — %(message)s"
    datefmt = "%H:%M:%S"
    logging.basicConfig(level=numeric, format=fmt, datefmt=datefmt, stream=sys.stderr)


# ── Subcommand: run ───────────────────────────────────────────────────────────

def cmd_run(args: argparse.Namespace) -> int:
    """Full pipeline: records → tables → bipartite graph → projection → communities."""
    from contract_atlas.pipeline import run_full_pipeline

    config = dataclasses.replace(
        DEFAULT_CONFIG,
        vendor_key=args.vendor_key,
        min_contract_amount=args.min_amount,
    )
    output_dir = args.output_dir or config.output_dir

    t0 = time.monotonic()
    result = run_full_pipeline(args.records, config=config, output_dir=output_dir)
    elapsed = time.monotonic() - t0

    summary = result.summary()
    print()
    print("=" * 60)
    print("  CONTRACT ATLAS — RUN COMPLETE")
    print("=" * 60)
    print(f"  Elapsed          : {elapsed:.1f}s")
    print(f"  Contracts        : {summary['contracts']}")
    print(f"  Agencies         : {summary['agencies']}")
    print(f"  Vendors          : {summary['vendors']}")
    print(f"  Agency→vendor    : {summary['bipartite_edges']}")
    print(f"  Agency pairs     : {summary['projected_edges']}")
    print(f"  Isolated agencies: {summary['isolated_agencies']}")
    print(f"  Communities      : {summary['communities']} (modularity {summary['modularity']:.3f})")
    print(f"  Outputs          : {output_dir}/")
    print("=" * 60)
    return 0


# ── Subcommand: project ───────────────────────────────────────────────────────

def cmd_project(args: argparse.Namespace) -> int:
    """Project an existing agency,vendor edge list and write the projected edges."""
    from contract_atlas.graph.builder import build_bipartite_graph
    from contract_atlas.graph.projection import project_bipartite_graph

    edges = pd.read_csv(
        args.edges,
        dtype={"agency": str, "vendor": str},
        keep_default_na=False,
        na_values=[""],
    )
    missing = [c for c in ("agency", "vendor") if c not in edges.columns]
    if missing:
        raise ValueError(f"Edge list is missing column(s): {', '.join(missing)}")

    G = build_bipartite_graph(edges)
    projected = project_bipartite_graph(G, target_class=args.target_class)

    df = projected.to_frame()
    if args.output:
        df.to_csv(args.output, index=False)
        logger.info("Wrote %d projected edges to %s.", len(df), args.output)
    else:
        df.to_csv(sys.stdout, index=False)
    return 0


# ── Argument parser ───────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contract-atlas",
        description="Contract Atlas — Agency–Vendor network analysis of contract records.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Full pipeline, tables written to ./outputs
  python -m contract_atlas run data/contracts.csv

  # Key vendors by ID instead of name
  python -m contract_atlas run data/contracts.csv --vendor-key vendor_id

  # Project an edge list onto vendors, print to stdout
  python -m contract_atlas project outputs/agency_vendor_edges.csv --target-class Vendor
        """,
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    # run
    p_run = subparsers.add_parser("run", help="Full pipeline on a contract records CSV")
    p_run.add_argument("records", metavar="RECORDS_CSV", help="Contract records CSV")
    p_run.add_argument(
        "--output-dir", default=None, metavar="PATH",
        help=f"Directory for CSV/JSON outputs (default: {DEFAULT_CONFIG.output_dir})",
    )
    p_run.add_argument(
        "--vendor-key", default=DEFAULT_CONFIG.vendor_key,
        choices=["vendor_name", "vendor_id"],
        help="Column used as the vendor label (default: vendor_name)",
    )
    p_run.add_argument(
        "--min-amount", type=float, default=DEFAULT_CONFIG.min_contract_amount,
        metavar="USD",
        help="Drop contracts below this amount (default: 0)",
    )
    p_run.set_defaults(func=cmd_run)

    # project
    p_project = subparsers.add_parser("project", help="Project an agency,vendor edge list")
    p_project.add_argument("edges", metavar="EDGES_CSV", help="CSV with agency and vendor columns")
    p_project.add_argument(
        "--output", default=None, metavar="PATH",
        help="Projected edge list output (default: stdout)",
    )
    p_project.add_argument(
        "--target-class", default=AGENCY, choices=list(NODE_CLASSES),
        help="Node class to keep (default: Agency)",
    )
    p_project.set_defaults(func=cmd_project)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.log_level)
    try:
        return args.func(args)
    except (InvalidGraphError, ValueError) as exc:
        logger.error("%s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
