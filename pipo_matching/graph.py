"""
LangGraph orchestration for a reconciliation run.
Defines the workflow nodes and the routing between them.
"""

from typing import Any, Dict, Literal
from langgraph.graph import StateGraph, END

from pipo_matching.matching.availability import build_availability_pool
from pipo_matching.matching.finder import find_item_candidates
from pipo_matching.matching.summary import generate_matching_summary
from pipo_matching.schemas.output import ItemMatches
from pipo_matching.state import ReconciliationRunState
from pipo_matching.utils.logging import setup_logging, log_engine_action


logger = setup_logging(__name__)


def partition_items(state: ReconciliationRunState) -> Dict[str, Any]:
    """
    Split PI items into already matched and unmatched.

    Already matched items never reach the candidate finder, so a later
    apply call cannot re-link them.
    """
    unmatched = [item for item in state.pi_items if not item.is_already_matched()]
    already_matched = len(state.pi_items) - len(unmatched)

    log_engine_action(
        logger,
        "Partition",
        f"{len(unmatched)} unmatched, {already_matched} already matched",
        {"unmatched": len(unmatched), "already_matched": already_matched},
    )
    return {"unmatched_items": unmatched, "already_matched_count": already_matched}


def build_pool(state: ReconciliationRunState) -> Dict[str, Any]:
    """Derive the availability pool from every PI item, matched or not."""
    ledger_items = list(state.pi_items) + list(state.linked_items)
    pool = build_availability_pool(state.purchase_orders, ledger_items)

    log_engine_action(
        logger,
        "AvailabilityPool",
        f"{len(pool)} of {len(state.purchase_orders)} POs have available lines",
        {"available_pos": len(pool), "total_pos": len(state.purchase_orders)},
    )
    return {"availability_pool": pool}


def find_candidates(state: ReconciliationRunState) -> Dict[str, Any]:
    """Run the candidate finder for each unmatched PI item."""
    matches = []
    for pi_item in state.unmatched_items:
        candidates = find_item_candidates(pi_item, state.availability_pool, state.settings)
        logger.debug(f"PI item {pi_item.id}: {len(candidates)} candidates")
        if candidates:
            matches.append(ItemMatches(pi_item=pi_item, matches=candidates))

    return {"matches": matches}


def summarize(state: ReconciliationRunState) -> Dict[str, Any]:
    """Compute run statistics."""
    summary = generate_matching_summary(
        state.matches,
        total_items=len(state.pi_items),
        searched_items=len(state.unmatched_items),
        high_confidence_percent=state.settings.high_confidence_percent,
    )

    log_engine_action(logger, "Summary", "Matching complete", summary.model_dump())
    return {"summary": summary}


def route_after_partition(state: ReconciliationRunState) -> Literal["build_pool", "summarize"]:
    """Skip scoring when every item is already matched."""
    if not state.unmatched_items:
        return "summarize"
    return "build_pool"


def build_matching_graph():
    """
    Build the LangGraph workflow for one reconciliation run.

    Flow:
    1. partition_items - drop already matched PI items
    2. build_pool - available PO line items from the link ledger
    3. find_candidates - ranked candidates per unmatched item
    4. summarize - run statistics
    """

    graph = StateGraph(ReconciliationRunState)

    graph.add_node("partition_items", partition_items)
    graph.add_node("build_pool", build_pool)
    graph.add_node("find_candidates", find_candidates)
    graph.add_node("summarize", summarize)

    graph.set_entry_point("partition_items")

    graph.add_conditional_edges(
        "partition_items",
        route_after_partition,
        {
            "build_pool": "build_pool",
            "summarize": "summarize",
        }
    )
    graph.add_edge("build_pool", "find_candidates")
    graph.add_edge("find_candidates", "summarize")
    graph.add_edge("summarize", END)

    return graph.compile()


# Compiled graph holds no run data, only the workflow structure
_matching_graph = None


def get_matching_graph():
    """Get or create the compiled matching graph."""
    global _matching_graph
    if _matching_graph is None:
        _matching_graph = build_matching_graph()
    return _matching_graph
