"""
Line-item reconciliation between Proforma Invoices and Purchase Orders.
"""

from pipo_matching.matching.engine import find_matches, apply_matches

__all__ = [
    "find_matches",
    "apply_matches",
]
