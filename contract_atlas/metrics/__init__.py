"""
contract_atlas.metrics — Tables and partitions computed from contract data.

Modules:
    aggregation      — Agency table, vendor table and weighted agency→vendor edges.
    communities      — Community detection on the projected agency graph.
    network_summary  — Per-agency degree / community table for the projection.

All thresholds live in contract_atlas.config.ContractAtlasConfig.
"""
