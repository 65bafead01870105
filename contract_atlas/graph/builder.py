"""
contract_atlas/graph/builder.py — Bipartite graph construction layer.

Builds a NetworkX DiGraph from the aggregated agency→vendor edge table.

Schema:
    Agency nodes  — node_type='Agency', plus agency_summary columns if given
    Vendor nodes  — node_type='Vendor', plus vendor_summary columns if given
    uses edges    — Agency → Vendor, edge_type='uses',
                    total_amount (float), contract_count (int)

The same label may never name both an agency and a vendor: NetworkX keys
nodes by label alone, so a shared label would silently merge two entities
and create an edge inside one class.
"""

import logging

import networkx as nx
import pandas as pd

logger = logging.getLogger(__name__)

AGENCY = "Agency"
VENDOR = "Vendor"
NODE_CLASSES = (AGENCY, VENDOR)


class InvalidGraphError(ValueError):
    """The graph violates the bipartite Agency/Vendor invariants."""


def build_bipartite_graph(
    edges: pd.DataFrame,
    agency_table: pd.DataFrame | None = None,
    vendor_table: pd.DataFrame | None = None,
) -> nx.DiGraph:
    """
    Build the bipartite Agency→Vendor graph.

    Args:
        edges:        Edge table with columns agency, vendor and optionally
                      contract_count, total_amount (see agency_vendor_edges()).
        agency_table: Optional agency_summary() frame. Its columns are copied
                      onto Agency nodes; agencies listed here but absent from
                      `edges` are added as isolated nodes.
        vendor_table: Optional vendor_summary() frame, same treatment for
                      Vendor nodes.

    Returns:
        G: nx.DiGraph following the module schema. G.graph carries
           source='contract_edges', n_agencies and n_vendors.

    Raises:
        InvalidGraphError: If a label is used as both an agency and a vendor.
    """
    edges = _drop_unlabelled_edges(edges)

    agencies: set[str] = set(edges["agency"].astype(str)) if len(edges) else set()
    vendors: set[str] = set(edges["vendor"].astype(str)) if len(edges) else set()
    if agency_table is not None and len(agency_table):
        agencies |= set(agency_table["agency"].astype(str))
    if vendor_table is not None and len(vendor_table):
        vendors |= set(vendor_table["vendor"].astype(str))

    overlap = agencies & vendors
    if overlap:
        raise InvalidGraphError(
            f"{len(overlap)} label(s) appear as both agency and vendor: "
            f"{', '.join(sorted(overlap)[:5])}"
        )

    G = nx.DiGraph()

    # ── Nodes ─────────────────────────────────────────────────────────────────
    G.add_nodes_from(sorted(agencies), node_type=AGENCY)
    G.add_nodes_from(sorted(vendors), node_type=VENDOR)

    if agency_table is not None:
        _copy_node_attributes(G, agency_table, "agency")
    if vendor_table is not None:
        _copy_node_attributes(G, vendor_table, "vendor")

    # ── uses edges ────────────────────────────────────────────────────────────
    for row in edges.itertuples(index=False):
        G.add_edge(
            str(row.agency),
            str(row.vendor),
            edge_type="uses",
            total_amount=float(getattr(row, "total_amount", 0.0)),
            contract_count=int(getattr(row, "contract_count", 1)),
        )

    G.graph["source"] = "contract_edges"
    G.graph["n_agencies"] = len(agencies)
    G.graph["n_vendors"] = len(vendors)

    logger.info(
        "Bipartite graph built: %d agencies, %d vendors, %d uses edges.",
        len(agencies),
        len(vendors),
        G.number_of_edges(),
    )
    return G


def _drop_unlabelled_edges(edges: pd.DataFrame) -> pd.DataFrame:
    """Drop edge rows whose agency or vendor is blank or NaN; strip the rest."""
    if not len(edges):
        return edges

    agency = edges["agency"].fillna("").astype(str).str.strip()
    vendor = edges["vendor"].fillna("").astype(str).str.strip()
    keep = (agency != "") & (vendor != "")

    n_dropped = int((~keep).sum())
    if n_dropped:
        logger.warning("Dropping %d edge rows with an empty agency or vendor.", n_dropped)

    return edges[keep].assign(agency=agency[keep], vendor=vendor[keep])


def _copy_node_attributes(G: nx.DiGraph, table: pd.DataFrame, key: str) -> None:
    """Copy every non-key column of `table` onto the node named by `key`."""
    for record in table.to_dict("records"):
        label = str(record.pop(key))
        G.nodes[label].update(record)


def validate_bipartite_graph(G: nx.Graph) -> dict[str, set]:
    """
    Check the bipartite invariants and return the node classes.

    Invariants:
        - every node has node_type 'Agency' or 'Vendor'
        - no self-loops
        - no edge joins two nodes of the same class

    Args:
        G: Directed or undirected NetworkX graph.

    Returns:
        classes: {'Agency': set of labels, 'Vendor': set of labels}.

    Raises:
        InvalidGraphError: On the first violated invariant.
    """
    classes: dict[str, set] = {cls: set() for cls in NODE_CLASSES}

    for node, data in G.nodes(data=True):
        node_type = data.get("node_type")
        if node_type not in classes:
            raise InvalidGraphError(
                f"Node {node!r} has node_type {node_type!r}; "
                f"expected one of {', '.join(NODE_CLASSES)}."
            )
        classes[node_type].add(node)

    for u, v in G.edges():
        if u == v:
            raise InvalidGraphError(f"Self-loop on node {u!r}.")
        u_type = G.nodes[u]["node_type"]
        if u_type == G.nodes[v]["node_type"]:
            raise InvalidGraphError(
                f"Edge {u!r} → {v!r} joins two {u_type} nodes."
            )

    return classes
