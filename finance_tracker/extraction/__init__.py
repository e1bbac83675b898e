"""Receipt scanning: text reading and field extraction."""

from finance_tracker.extraction.fields import (
    ReceiptFields,
    extract_fields,
    find_amount,
    find_date,
    find_description,
)
from finance_tracker.extraction.reader import ReceiptReader, ReceiptScan

__all__ = [
    "ReceiptFields",
    "ReceiptReader",
    "ReceiptScan",
    "extract_fields",
    "find_amount",
    "find_date",
    "find_description",
]
