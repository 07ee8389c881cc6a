"""
Command-line entry point for the reconciliation engine.
"""

import json
from typing import List, Optional

from pydantic import ValidationError

from pipo_matching.matching import find_matches
from pipo_matching.matching.availability import validate_purchase_orders
from pipo_matching.schemas.line_item import ProformaInvoiceItem
from pipo_matching.schemas.po import PurchaseOrder
from pipo_matching.schemas.output import MatchingResult
from pipo_matching.utils.logging import setup_logging
from pipo_matching.utils import dict_to_json_string
from pipo_matching.config import get_config


logger = setup_logging(__name__)
config = get_config()


def _read_records(path: str, key: str) -> list:
    """Read a JSON list, or the list stored under key in a JSON object."""
    with open(path, 'r') as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get(key, [])
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of records in {path}")
    return data


def load_purchase_orders_from_file(po_file: str) -> List[PurchaseOrder]:
    """Load POs from JSON file."""
    try:
        pos = validate_purchase_orders(_read_records(po_file, "purchase_orders"))
        logger.info(f"Loaded {len(pos)} purchase orders from {po_file}")
        return pos

    except FileNotFoundError:
        logger.warning(f"PO file not found: {po_file}. Using empty PO list.")
        return []
    except (ValueError, ValidationError) as e:
        logger.error(f"Error loading PO file: {e}")
        return []


def load_pi_items_from_file(pi_file: str) -> List[ProformaInvoiceItem]:
    """Load PI line items from JSON file."""
    try:
        items = [ProformaInvoiceItem(**item) for item in _read_records(pi_file, "items")]
        logger.info(f"Loaded {len(items)} PI items from {pi_file}")
        return items

    except FileNotFoundError:
        logger.warning(f"PI file not found: {pi_file}. Using empty item list.")
        return []
    except (ValueError, ValidationError) as e:
        logger.error(f"Error loading PI file: {e}")
        return []


def run_reconciliation(
    pi_file: str,
    po_database_path: Optional[str] = None,
) -> MatchingResult:
    """
    Reconcile the PI items in a file against the PO database.

    Args:
        pi_file: Path to a JSON file of PI line items
        po_database_path: Optional path to PO database JSON file

    Returns:
        MatchingResult with ranked candidates and summary
    """
    if not po_database_path:
        po_database_path = config.PO_DATABASE_PATH

    pi_items = load_pi_items_from_file(pi_file)
    pos = load_purchase_orders_from_file(po_database_path)

    result = find_matches(pi_items, pos)

    logger.info(
        f"Reconciliation complete. {result.summary.matched_items}/{result.summary.searched_items} "
        f"items have candidates ({result.summary.match_rate}%)"
    )
    return result


def format_output_json(result: MatchingResult) -> str:
    """Format result as JSON string."""
    return dict_to_json_string(result.model_dump(mode="json"))


if __name__ == "__main__":
    import sys

    if len(sys.argv) > 1:
        pi_file = sys.argv[1]
        po_file = sys.argv[2] if len(sys.argv) > 2 else None

        result = run_reconciliation(pi_file, po_file)
        print(format_output_json(result))
    else:
        print("Usage: python -m pipo_matching.main <pi_items.json> [purchase_orders.json]")
