"""
contract_atlas/config.py — All tunable parameters for Contract Atlas.

No threshold or column choice should be hardcoded in a stage module. Every
ingestion filter, projection rule and output default lives here so that a
calibration change is a single-file diff.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ContractAtlasConfig:
    """
    Immutable configuration for the Contract Atlas pipeline.

    Override by constructing a new ContractAtlasConfig with the desired values
    (or dataclasses.replace(DEFAULT_CONFIG, ...)).
    """

    # ── Ingestion ─────────────────────────────────────────────────────────────
    vendor_key: str = "vendor_name"
    # Column used as the Vendor node label. "vendor_name" matches how the
    # contract tables are read by people; "vendor_id" is stricter when the
    # same supplier is spelled several ways.

    min_contract_amount: float = 0.0
    # Rows whose total_contract_amt is below this value are dropped.
    # Default 0.0 keeps zero-dollar records (open-ended agreements) but drops
    # negative amendments.

    # ── Projection ────────────────────────────────────────────────────────────
    projection_distance: int = 2
    # Two target-class nodes are linked iff their hop distance in the
    # bipartite graph equals exactly this value. 2 = "share a neighbour".

    # ── Community detection ───────────────────────────────────────────────────
    community_weight: str | None = "shared_count"
    # Edge attribute on the projected graph passed to the detector as weight.
    # None runs the detector on the unweighted projection.

    # ── Outputs ───────────────────────────────────────────────────────────────
    output_dir: str = "outputs"
    # Default export directory for the CLI, relative to the working directory.


# Singleton default — import this everywhere instead of constructing anew.
DEFAULT_CONFIG = ContractAtlasConfig()
