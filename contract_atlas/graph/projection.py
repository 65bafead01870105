"""
contract_atlas/graph/projection.py — Co-vendor projection of the bipartite graph.

Two agencies are linked when they have contracted the same vendor. In graph
terms: their hop distance in the bipartite Agency–Vendor graph is exactly 2
(agency → shared vendor → agency). The projection runs the distance test
over the *undirected* view of the full bipartite graph, so paths pass through
the opposite class, and keeps one edge per unordered pair.

Distance computation is delegated to a pluggable ShortestPathOracle:
any callable (graph, source) -> {target: hops}. The default is NetworkX's
BFS (single_source_shortest_path_length) truncated at the projection
distance, because nodes further away than 2 hops can never produce an edge.

The projection never mutates the input graph; it returns an immutable
ProjectedGraph that can be turned into a fresh nx.Graph or a DataFrame.
"""

import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Callable

import networkx as nx
import pandas as pd

from contract_atlas.config import DEFAULT_CONFIG, ContractAtlasConfig
from contract_atlas.graph.builder import (
    AGENCY,
    NODE_CLASSES,
    InvalidGraphError,
    validate_bipartite_graph,
)

logger = logging.getLogger(__name__)

ShortestPathOracle = Callable[[nx.Graph, str], dict]


@dataclass(frozen=True, order=True)
class ProjectedEdge:
    """
    One undirected edge of the projection.

    Fields:
        source:       Lexicographically smaller endpoint label.
        target:       Larger endpoint label.
        shared_count: Number of opposite-class nodes adjacent to both endpoints.
                      None when the projection distance is not 2, since the
                      endpoints then have no common neighbour.
    """
    source: str
    target: str
    shared_count: int | None = 1


@dataclass(frozen=True)
class ProjectedGraph:
    """
    Immutable same-class adjacency derived from a bipartite graph.

    Fields:
        target_class: 'Agency' or 'Vendor'.
        nodes:        Every target-class node, sorted (isolated nodes included).
        edges:        Canonical edges, sorted by (source, target).
    """
    target_class: str
    nodes: tuple[str, ...]
    edges: tuple[ProjectedEdge, ...]
    _pairs: frozenset = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(
            self, "_pairs", frozenset((e.source, e.target) for e in self.edges)
        )

    @property
    def number_of_nodes(self) -> int:
        return len(self.nodes)

    @property
    def number_of_edges(self) -> int:
        return len(self.edges)

    def edge_pairs(self) -> list[tuple[str, str]]:
        """Plain (source, target) pairs, one per unordered pair."""
        return [(e.source, e.target) for e in self.edges]

    def has_edge(self, u: str, v: str) -> bool:
        """Order-insensitive membership test."""
        return _canonical_pair(u, v) in self._pairs

    def isolated_nodes(self) -> list[str]:
        """Target-class nodes that share no neighbour with any other node."""
        linked = {n for e in self.edges for n in (e.source, e.target)}
        return [n for n in self.nodes if n not in linked]

    def to_networkx(self) -> nx.Graph:
        """
        Build a new undirected nx.Graph.

        shared_count is set as an edge attribute only where it is known, so
        weighted NetworkX routines fall back to weight 1 elsewhere.
        """
        G = nx.Graph()
        G.add_nodes_from(self.nodes, node_type=self.target_class)
        for e in self.edges:
            if e.shared_count is None:
                G.add_edge(e.source, e.target)
            else:
                G.add_edge(e.source, e.target, shared_count=e.shared_count)
        G.graph["target_class"] = self.target_class
        return G

    def to_frame(self) -> pd.DataFrame:
        """Edge list as a DataFrame with columns source, target, shared_count."""
        return pd.DataFrame(
            [(e.source, e.target, e.shared_count) for e in self.edges],
            columns=["source", "target", "shared_count"],
        )


def _canonical_pair(u, v) -> tuple:
    return (u, v) if str(u) <= str(v) else (v, u)


def default_oracle(config: ContractAtlasConfig = DEFAULT_CONFIG) -> ShortestPathOracle:
    """BFS hop distances from one source, truncated at config.projection_distance."""
    return partial(nx.single_source_shortest_path_length, cutoff=config.projection_distance)


class GraphProjector:
    """
    Project a bipartite Agency–Vendor graph onto one of its node classes.

    Usage:
        projector = GraphProjector()
        projected = projector.project(G, target_class="Agency")
    """

    def __init__(
        self,
        oracle: ShortestPathOracle | None = None,
        config: ContractAtlasConfig = DEFAULT_CONFIG,
    ):
        self.config = config
        self.oracle = oracle or default_oracle(config)

    def project(self, G: nx.Graph, target_class: str = AGENCY) -> ProjectedGraph:
        """
        Compute the co-occurrence graph over `target_class`.

        Algorithm:
            1. Validate the bipartite invariants (validate_bipartite_graph).
            2. For each target node, in sorted order, ask the oracle for hop
               distances over the undirected view of G.
            3. For each other target node reached at exactly
               config.projection_distance hops, emit the canonical pair once.
               A distance of 1 between two target nodes means the bipartite
               invariant is broken and raises InvalidGraphError.
            4. At distance 2, attach shared_count = |N(a) ∩ N(b)| to each
               edge. At any other distance shared_count is None.

        Args:
            G:            Bipartite graph from build_bipartite_graph().
            target_class: 'Agency' (default) or 'Vendor'.

        Returns:
            ProjectedGraph over every target-class node of G.

        Raises:
            InvalidGraphError: Invariant violation, unknown target class, or
                               a target class with no nodes in G.
        """
        if target_class not in NODE_CLASSES:
            raise InvalidGraphError(
                f"Unknown target class {target_class!r}; "
                f"expected one of {', '.join(NODE_CLASSES)}."
            )

        classes = validate_bipartite_graph(G)
        targets = classes[target_class]
        if not targets:
            raise InvalidGraphError(f"Graph has no {target_class} nodes to project onto.")

        U = G.to_undirected(as_view=True) if G.is_directed() else G
        wanted = self.config.projection_distance
        ordered = sorted(targets, key=str)

        pairs: set[tuple] = set()
        for source in ordered:
            distances = self.oracle(U, source)
            for other, hops in distances.items():
                if other == source or other not in targets:
                    continue
                if hops == 1:
                    raise InvalidGraphError(
                        f"{target_class} nodes {source!r} and {other!r} are adjacent."
                    )
                if hops == wanted:
                    pairs.add(_canonical_pair(source, other))

        edges = tuple(sorted(
            ProjectedEdge(a, b, len(set(U[a]) & set(U[b])) if wanted == 2 else None)
            for a, b in pairs
        ))
        projected = ProjectedGraph(
            target_class=target_class,
            nodes=tuple(ordered),
            edges=edges,
        )

        logger.info(
            "Projection onto %s complete: %d nodes, %d edges, %d isolated.",
            target_class,
            projected.number_of_nodes,
            projected.number_of_edges,
            len(projected.isolated_nodes()),
        )
        return projected


def project_bipartite_graph(
    G: nx.Graph,
    target_class: str = AGENCY,
    oracle: ShortestPathOracle | None = None,
    config: ContractAtlasConfig = DEFAULT_CONFIG,
) -> ProjectedGraph:
    """Functional shortcut for GraphProjector(oracle, config).project(G, target_class)."""
    return GraphProjector(oracle, config).project(G, target_class)
