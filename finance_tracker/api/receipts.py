"""
Receipt scanning endpoint.

The handler is a plain def, so FastAPI runs it in its
threadpool: a slow OCR job ties up one worker thread, not the
event loop.
"""

from fastapi import APIRouter, Depends, File, UploadFile

from finance_tracker.api.deps import get_receipt_reader, http_error
from finance_tracker.errors import FinanceTrackerError
from finance_tracker.extraction.reader import ReceiptReader
from finance_tracker.schemas.receipt import ReceiptScanResponse

router = APIRouter(prefix="/receipts", tags=["Receipts"])


@router.post("/scan", response_model=ReceiptScanResponse)
def scan_receipt(
    file: UploadFile = File(...),
    reader: ReceiptReader = Depends(get_receipt_reader),
):
    """
    Read an uploaded receipt image or PDF.

    Returns the raw text and whatever amount, date and
    description could be found in it.
    """
    data = file.file.read()
    try:
        scan = reader.scan(file.content_type, file.filename, data)
    except FinanceTrackerError as e:
        raise http_error(e)

    return ReceiptScanResponse(
        text=scan.text,
        amount=scan.fields.amount,
        date=scan.fields.date,
        description=scan.fields.description,
        found=not scan.fields.is_empty,
    )
