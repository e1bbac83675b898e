"""
Pydantic schemas for receipt scanning.
"""

from pydantic import BaseModel


class ReceiptScanResponse(BaseModel):
    """
    Scanned text plus the fields found in it.

    found is False when no field could be extracted; that is a
    normal result, not an error.
    """
    text: str
    amount: str | None
    date: str | None
    description: str | None
    found: bool
