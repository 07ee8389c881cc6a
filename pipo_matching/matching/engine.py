"""
Reconciliation entry points.

find_matches proposes PO line items for the unmatched items of a Proforma
Invoice; apply_matches writes the operator's confirmed choices back onto
the PI items. The engine performs no I/O: callers supply the purchase
orders and persist the items apply_matches returns.

Exclusivity is enforced optimistically. Each find_matches call rebuilds the
link ledger from the PI items it is given, so two runs over a stale
snapshot can still propose the same PO line to two PI items. apply_matches
refuses such a conflict within one collection; across collections the
caller is expected to confirm matches serially between runs.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Type

from pydantic import BaseModel, ValidationError

from pipo_matching.config import MatchingSettings, get_config
from pipo_matching.graph import get_matching_graph
from pipo_matching.matching.availability import validate_purchase_orders
from pipo_matching.schemas.line_item import ProformaInvoiceItem
from pipo_matching.schemas.output import MatchCandidate, MatchingResult, MatchingSummary
from pipo_matching.state import ReconciliationRunState
from pipo_matching.utils.logging import setup_logging, log_engine_action, log_rejected_selection


logger = setup_logging(__name__)
config = get_config()


def _coerce(items: Sequence[Any], model: Type[BaseModel]) -> List[Any]:
    """Validate raw dicts or other models into the given model type."""
    coerced = []
    for item in items:
        if isinstance(item, model):
            coerced.append(item)
        elif isinstance(item, BaseModel):
            coerced.append(model.model_validate(item.model_dump()))
        else:
            coerced.append(model.model_validate(item))
    return coerced


def _is_item_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and len(value) > 0


def find_matches(
    pi_items: Optional[Sequence[Any]],
    purchase_orders: Optional[Sequence[Any]] = None,
    linked_items: Optional[Sequence[Any]] = None,
    settings: Optional[MatchingSettings] = None,
) -> MatchingResult:
    """
    Propose PO line-item candidates for every unmatched PI item.

    Args:
        pi_items: Items of the PI being reconciled (models or dicts)
        purchase_orders: Every known PO with its line items
        linked_items: PI items from other invoices; their links also
            remove PO lines from the pool
        settings: Matching parameters, defaults from configuration

    Returns:
        MatchingResult. Never raises: empty input yields an empty
        successful result, anything else that goes wrong a failure result
        with a zeroed summary.
    """
    if not _is_item_list(pi_items):
        logger.warning("No PI items provided for matching")
        return MatchingResult.empty()

    try:
        items = _coerce(pi_items, ProformaInvoiceItem)
        pos = validate_purchase_orders(purchase_orders or [])
        others = _coerce(linked_items or [], ProformaInvoiceItem)
        if settings is None:
            settings = MatchingSettings.from_config(config)

        log_engine_action(
            logger,
            "FindMatches",
            f"Matching {len(items)} PI items against {len(pos)} POs",
            {"pi_items": len(items), "purchase_orders": len(pos), "linked_items": len(others)},
        )

        graph = get_matching_graph()
        result = graph.invoke(
            {
                "pi_items": items,
                "purchase_orders": pos,
                "linked_items": others,
                "settings": settings,
            },
            config={"recursion_limit": config.GRAPH_RECURSION_LIMIT},
        )
        final_state = ReconciliationRunState(**result) if isinstance(result, dict) else result

        logger.debug(f"Run state: {final_state.get_summary()}")

        return MatchingResult(
            success=True,
            matches=final_state.matches,
            summary=final_state.summary or MatchingSummary(),
        )

    except ValidationError as e:
        logger.error(f"Invalid matching input: {e}")
        return MatchingResult.failure(f"Invalid matching input: {e}")
    except Exception as e:
        logger.exception(f"Unexpected error finding PO matches: {e}")
        return MatchingResult.failure(str(e))


def apply_matches(
    pi_items: Optional[Sequence[Any]],
    selections: Optional[Mapping[str, Any]],
) -> List[ProformaInvoiceItem]:
    """
    Write confirmed selections onto the PI items.

    Args:
        pi_items: The PI items (models or dicts)
        selections: PI item id -> chosen MatchCandidate (model or dict)

    Returns:
        A new list; selected items are updated copies, the rest are
        returned unchanged. Inputs are not mutated.

    A selection is refused, leaving the item unchanged, when the candidate
    was proposed for another PI item, when its PO line is already linked to
    a different PI item in the collection or was claimed by an earlier
    selection in this call, or when the item is already matched to a
    different PO line. Linkage ids left on an item that is not matched are
    replaced. Re-applying a selection to the item it was applied to gives
    the same result.
    """
    if not pi_items:
        return []

    items = _coerce(pi_items, ProformaInvoiceItem)
    if not selections:
        return list(items)

    chosen: Dict[str, MatchCandidate] = {
        str(pi_id): MatchCandidate.model_validate(candidate) if not isinstance(candidate, MatchCandidate) else candidate
        for pi_id, candidate in selections.items()
    }

    unknown = set(chosen) - {item.id for item in items}
    if unknown:
        logger.warning(f"Selections for unknown PI items ignored: {sorted(unknown)}")

    # PO line -> position of the PI item that holds it
    claimed: Dict[tuple, int] = {}
    for index, item in enumerate(items):
        if item.link_key is not None:
            claimed.setdefault(item.link_key, index)

    updated_items = []
    applied = 0

    for index, item in enumerate(items):
        candidate = chosen.get(item.id)
        if candidate is None:
            updated_items.append(item)
            continue

        if candidate.pi_item_id != item.id:
            log_rejected_selection(
                logger, item.id, candidate.po_id, candidate.po_line_id,
                f"Candidate was proposed for PI item {candidate.pi_item_id}",
            )
            updated_items.append(item)
            continue

        key = candidate.link_key
        owner = claimed.get(key)

        if owner is not None and owner != index:
            log_rejected_selection(
                logger, item.id, candidate.po_id, candidate.po_line_id,
                f"PO line already linked to PI item {items[owner].id}",
            )
            updated_items.append(item)
            continue

        if item.is_already_matched() and item.link_key != key:
            log_rejected_selection(
                logger, item.id, candidate.po_id, candidate.po_line_id,
                f"PI item already linked to {item.link_key[0]}/{item.link_key[1]}",
            )
            updated_items.append(item)
            continue

        # An unconfirmed link is replaced, freeing its line for later selections
        if item.link_key is not None and item.link_key != key and claimed.get(item.link_key) == index:
            del claimed[item.link_key]
        claimed[key] = index
        updated_items.append(item.model_copy(update={
            "linked_po_id": candidate.po_id,
            "linked_po_line_id": candidate.po_line_id,
            "client_po_number": candidate.po_number,
            "client_item_code": candidate.po_item.product_code,
            "project_code": candidate.project_code or candidate.po_number,
            "matched": True,
            "match_confidence": candidate.confidence,
            "match_tier": candidate.tier,
        }))
        applied += 1

    log_engine_action(
        logger,
        "ApplyMatches",
        f"Applied {applied} of {len(chosen)} selections",
        {"applied": applied, "selections": len(chosen)},
    )
    return updated_items
