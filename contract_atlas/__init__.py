"""
contract_atlas — Agency–Vendor network analysis for municipal contract records.

Pipeline stages:
- Ingestion of contract records (contract_atlas.ingestion.contract_records)
- Agency / vendor / edge aggregation tables (contract_atlas.metrics.aggregation)
- Bipartite graph construction (contract_atlas.graph.builder)
- Agency co-vendor projection (contract_atlas.graph.projection)
- Community detection on the projection (contract_atlas.metrics.communities)
"""

__version__ = "0.1.0"
