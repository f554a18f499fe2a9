"""Topology analysis for floor plan room graphs.

This module builds the attachment graph of a room (or part) list with
NetworkX and diagnoses why an entity's attachment chain cannot be resolved.
Every entity has exactly one outgoing edge (to its target) unless it
attaches to the origin or to its parent, so each chain is a simple path
that either terminates or runs into a cycle.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

import networkx as nx

from ..config import PARENT_ID, ZEROPOINT_ID
from .model import Room, RoomPart, TargetKind

CHAIN_SOUND = "sound"
CHAIN_MISSING = "missing"
CHAIN_CYCLE = "cycle"

RESERVED_NODE = "reserved"


@dataclass(frozen=True)
class ChainDiagnosis:
    """Outcome of following an entity's attachment chain.

    Attributes:
        status: CHAIN_SOUND, CHAIN_MISSING or CHAIN_CYCLE.
        missing_id: The undefined id the chain ends at, if missing.
        members: The cycle the chain runs into, if cyclic.
    """

    status: str
    missing_id: str | None = None
    members: tuple[str, ...] = ()


def build_attachment_graph(
    entities: Sequence[Union[Room, RoomPart]],
    terminal: TargetKind = TargetKind.ORIGIN,
) -> nx.DiGraph:
    """Build a directed graph with an edge from each entity to its target.

    Nodes for declared entities carry ``declared=True`` and their declaration
    ``order``. Targets that are never declared appear as bare nodes.

    Args:
        entities: Rooms, or the parts of a single room.
        terminal: The reserved target that ends a chain in this namespace
            (the origin for rooms, the parent for parts). The other reserved
            target is an undeclared ``(RESERVED_NODE, name)`` node, so it
            never merges with a declared entity of the same name.

    Returns:
        NetworkX DiGraph of attachments.
    """
    G = nx.DiGraph()

    for order, entity in enumerate(entities):
        if entity.id not in G:
            G.add_node(entity.id, declared=True, order=order)

    reserved_ids = {TargetKind.ORIGIN: ZEROPOINT_ID, TargetKind.PARENT: PARENT_ID}
    for entity in entities:
        target = entity.attach_to.target
        if target.kind is TargetKind.ENTITY:
            G.add_edge(entity.id, target.entity_id)
        elif target.kind is not terminal:
            node = (RESERVED_NODE, reserved_ids[target.kind])
            G.add_node(node, name=reserved_ids[target.kind])
            G.add_edge(entity.id, node)

    return G


def diagnose_chain(graph: nx.DiGraph, entity_id: str) -> ChainDiagnosis:
    """Follow an entity's attachment chain and report how it ends.

    Args:
        graph: Graph from build_attachment_graph.
        entity_id: Declared entity to start from.

    Returns:
        A ChainDiagnosis. Cycle members are rotated so the earliest declared
        member comes first.
    """
    try:
        cycle_edges = nx.find_cycle(graph, source=entity_id)
    except nx.NetworkXNoCycle:
        cycle_edges = None

    if cycle_edges:
        members = [u for u, _ in cycle_edges]
        first = min(
            range(len(members)),
            key=lambda i: graph.nodes[members[i]].get("order", len(graph)),
        )
        return ChainDiagnosis(CHAIN_CYCLE, members=tuple(members[first:] + members[:first]))

    # No cycle reachable: the preorder walk is the chain itself
    terminal = list(nx.dfs_preorder_nodes(graph, entity_id))[-1]
    node = graph.nodes[terminal]
    if not node.get("declared", False):
        return ChainDiagnosis(CHAIN_MISSING, missing_id=node.get("name", terminal))

    return ChainDiagnosis(CHAIN_SOUND)
