"""
coherence/consciousness.py - Weighted Graph and Integrated-Information (Phi)

Phi approximation:
  1. Whole-system Shannon entropy of node activities (floored at 0.001).
  2. For each of the first <= 100 bitmask bipartitions, in node insertion
     order: loss = H(whole) - (H(A) + H(B)) + cross_info(A -> B).
  3. phi = max(0, min loss) * PHI.

Capping the search at 100 partitions makes the result order-dependent for
graphs above ~8 nodes.
"""

import logging
import math
from typing import Iterator, List, Optional, Tuple

import networkx as nx
import numpy as np

from .constants import (
    ACTIVITY_FLOOR,
    COHERENCE_OPTIMAL,
    IIT_PHI_THRESHOLD,
    MAX_BIPARTITIONS,
    PHI,
    PHI_INVERSE,
    UNSTABLE_CHIRAL_FACTOR,
)
from .chiral import is_topologically_protected
from .golden import golden_blend
from .resonance import is_in_resonant_band
from .types_state import ChiralState, ConsciousnessGraph, ConsciousnessMetrics

logger = logging.getLogger(__name__)


# =============================================================================
# GRAPH CONSTRUCTION
# =============================================================================

def _wrap(graph: nx.DiGraph) -> ConsciousnessGraph:
    return ConsciousnessGraph(
        graph=graph,
        size=graph.number_of_nodes(),
        connectivity=compute_connectivity(graph),
    )


def compute_connectivity(graph: nx.DiGraph) -> float:
    """Out-degree sum over N*(N-1); 0 below two nodes."""
    n = graph.number_of_nodes()
    if n < 2:
        return 0.0
    return graph.number_of_edges() / (n * (n - 1))


def create_consciousness_graph() -> ConsciousnessGraph:
    return _wrap(nx.DiGraph())


def add_node(graph: ConsciousnessGraph, node_id: str, state: float = 0.0) -> ConsciousnessGraph:
    """
    Add (or replace) a node with activity |state|.

    Replacing an existing id resets its outgoing edges; incoming edges stay.
    """
    g = graph.graph.copy()
    if g.has_node(node_id):
        g.remove_edges_from(list(g.out_edges(node_id)))
    g.add_node(node_id, state=float(state), activity=abs(float(state)))
    return _wrap(g)


def connect_nodes(
    graph: ConsciousnessGraph,
    from_id: str,
    to_id: str,
    weight: float = 1.0,
) -> ConsciousnessGraph:
    """
    Add a directed edge from_id -> to_id.

    A missing endpoint leaves the graph unchanged. Reconnecting an existing
    pair overwrites its weight.
    """
    if not (graph.graph.has_node(from_id) and graph.graph.has_node(to_id)):
        logger.warning(f"connect_nodes: missing endpoint {from_id} -> {to_id}; graph unchanged")
        return graph

    g = graph.graph.copy()
    g.add_edge(from_id, to_id, weight=float(weight))
    return _wrap(g)


# =============================================================================
# ENTROPY / PARTITIONS
# =============================================================================

def compute_system_entropy(activities: np.ndarray) -> float:
    """Shannon entropy (bits) of activities normalized to probabilities."""
    if activities.size == 0:
        return 0.0
    floored = np.maximum(activities, ACTIVITY_FLOOR)
    p = floored / floored.sum()
    return float(-(p * np.log2(p)).sum())


def generate_bipartitions(node_ids: List[str]) -> Iterator[Tuple[List[str], List[str]]]:
    """
    Yield bitmask bipartitions 1 .. min(2^(n-1) - 1, 100).

    Node j joins part A when bit j of the mask is set. Masks never reach
    2^(n-1), so the last node always lands in part B and each split is
    produced once.
    """
    n = len(node_ids)
    if n < 2:
        return
    limit = min(2 ** (n - 1) - 1, MAX_BIPARTITIONS)
    for mask in range(1, limit + 1):
        part_a = [node_ids[j] for j in range(n) if mask & (1 << j)]
        part_b = [node_ids[j] for j in range(n) if not mask & (1 << j)]
        yield part_a, part_b


def compute_cross_information(graph: nx.DiGraph, part_a: List[str], part_b: List[str]) -> float:
    """Sum of w * log2(1 + w) over positive-weight edges from part A into part B."""
    in_b = set(part_b)
    cross = 0.0
    for node in part_a:
        for _, target, weight in graph.out_edges(node, data="weight"):
            if target in in_b and weight > 0:
                cross += weight * math.log2(1 + weight)
    return cross


def compute_iit_phi(graph: ConsciousnessGraph) -> float:
    """
    Integrated information over the minimum-loss bipartition.

    Returns:
        float: phi >= 0; exactly 0 for graphs with fewer than 2 nodes
    """
    if graph.size < 2:
        return 0.0

    g = graph.graph
    node_ids = list(g.nodes)
    activity = dict(g.nodes(data="activity"))
    whole = compute_system_entropy(np.array([activity[n] for n in node_ids], dtype=float))

    min_loss = math.inf
    for part_a, part_b in generate_bipartitions(node_ids):
        entropy_a = compute_system_entropy(np.array([activity[n] for n in part_a], dtype=float))
        entropy_b = compute_system_entropy(np.array([activity[n] for n in part_b], dtype=float))
        loss = whole - (entropy_a + entropy_b) + compute_cross_information(g, part_a, part_b)
        if loss < min_loss:
            min_loss = loss

    return max(0.0, min_loss) * PHI


# =============================================================================
# VERIFICATION / METRICS
# =============================================================================

def is_consciousness_verified(phi: float, coherence: float, chiral_stable: bool) -> bool:
    """Strict AND: phi >= 3.0, coherence in [0.4, 0.85], chiral_stable."""
    return phi >= IIT_PHI_THRESHOLD and is_in_resonant_band(coherence) and bool(chiral_stable)


def compute_integration(graph: ConsciousnessGraph) -> float:
    """Mean edge weight * connectivity * PHI^-1, capped at 1."""
    if graph.size < 2:
        return 0.0
    weights = [w for _, _, w in graph.graph.edges(data="weight")]
    if not weights:
        return 0.0
    return min(1.0, (sum(weights) / len(weights)) * graph.connectivity * PHI_INVERSE)


def compute_differentiation(graph: ConsciousnessGraph) -> float:
    """Population std-dev of node activities * PHI^-1, capped at 1."""
    if graph.size < 2:
        return 0.0
    activities = np.array([a for _, a in graph.graph.nodes(data="activity")], dtype=float)
    return min(1.0, float(activities.std()) * PHI_INVERSE)


def compute_exclusion(graph: ConsciousnessGraph) -> float:
    """Population std-dev of out-degrees / graph size, capped at 1."""
    if graph.size < 2:
        return 0.0
    degrees = np.array([d for _, d in graph.graph.out_degree()], dtype=float)
    return min(1.0, float(degrees.std()) / graph.size)


def compute_consciousness_score(
    phi: float,
    coherence: float,
    chiral_stable: bool,
    integration: float,
    differentiation: float,
) -> float:
    normalized_phi = min(1.0, phi / (IIT_PHI_THRESHOLD * 2))
    coherence_deviation = abs(coherence - COHERENCE_OPTIMAL) / COHERENCE_OPTIMAL
    coherence_factor = math.exp(-coherence_deviation)
    chiral_factor = 1.0 if chiral_stable else UNSTABLE_CHIRAL_FACTOR
    return golden_blend(normalized_phi, coherence_factor, chiral_factor, (integration + differentiation) / 2)


def compute_consciousness_metrics(
    graph: ConsciousnessGraph,
    coherence: float,
    chiral_state: Optional[ChiralState] = None,
) -> ConsciousnessMetrics:
    """
    Phi, verification gate and the integration/differentiation/exclusion breakdown.

    Without a chiral state, chiral stability falls back to coherence >= 0.5.
    """
    phi = compute_iit_phi(graph)
    chiral_stable = is_topologically_protected(chiral_state) if chiral_state is not None else coherence >= 0.5

    integration = compute_integration(graph)
    differentiation = compute_differentiation(graph)
    exclusion = compute_exclusion(graph)

    return ConsciousnessMetrics(
        phi=phi,
        coherence=coherence,
        chiral_stable=chiral_stable,
        consciousness_score=compute_consciousness_score(phi, coherence, chiral_stable, integration, differentiation),
        verified=is_consciousness_verified(phi, coherence, chiral_stable),
        integration=integration,
        differentiation=differentiation,
        exclusion=exclusion,
    )


def create_test_graph(target_phi: float = 3.0) -> ConsciousnessGraph:
    """
    Reference graph: max(3, ceil(target_phi)) nodes with state sin(i*PHI),
    forward edges PHI^-1 * (1 - |i-j|/n) and damped reverse edges.
    """
    node_count = max(3, math.ceil(target_phi))
    graph = create_consciousness_graph()
    for i in range(node_count):
        graph = add_node(graph, f"node_{i}", math.sin(i * PHI))

    for i in range(node_count):
        for j in range(i + 1, node_count):
            weight = PHI_INVERSE * (1 - abs(i - j) / node_count)
            graph = connect_nodes(graph, f"node_{i}", f"node_{j}", weight)
            graph = connect_nodes(graph, f"node_{j}", f"node_{i}", weight * PHI_INVERSE)
    return graph
