"""
Tests for the receipt scanning endpoint.

The reader is replaced with a stub so no OCR runs.
"""

from finance_tracker.api.deps import get_receipt_reader
from finance_tracker.errors import ExtractionError, ValidationError
from finance_tracker.extraction.fields import ReceiptFields, extract_fields
from finance_tracker.extraction.reader import ReceiptScan


class StubReader:

    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.seen = None

    def scan(self, content_type, filename, data):
        self.seen = (content_type, filename, data)
        if self.error is not None:
            raise self.error
        return ReceiptScan(text=self.text, fields=extract_fields(self.text))


def upload(client, name="receipt.png", content_type="image/png", data=b"bytes"):
    return client.post(
        "/receipts/scan", files={"file": (name, data, content_type)}
    )


def test_scan_returns_fields(client, override_dependency):
    reader = StubReader("Total: $45.67\n03/15/2024\nCoffee Shop Purchase")
    override_dependency(get_receipt_reader, reader)

    response = upload(client)

    assert response.status_code == 200
    assert response.json() == {
        "text": "Total: $45.67\n03/15/2024\nCoffee Shop Purchase",
        "amount": "45.67",
        "date": "2024-03-15",
        "description": "Coffee Shop Purchase",
        "found": True,
    }
    assert reader.seen == ("image/png", "receipt.png", b"bytes")


def test_nothing_found(client, override_dependency):
    override_dependency(get_receipt_reader, StubReader("~~"))

    data = upload(client).json()

    assert data["found"] is False
    assert ReceiptFields(data["amount"], data["date"], data["description"]).is_empty


def test_unsupported_file(client, override_dependency):
    override_dependency(
        get_receipt_reader,
        StubReader(error=ValidationError("Unsupported file type.")),
    )
    response = upload(client, name="notes.txt", content_type="text/plain")
    assert response.status_code == 400


def test_ocr_failure(client, override_dependency):
    override_dependency(
        get_receipt_reader,
        StubReader(error=ExtractionError("Failed to process image.")),
    )
    response = upload(client)
    assert response.status_code == 502
    assert response.json()["detail"] == "Failed to process image."


def test_file_required(client):
    assert client.post("/receipts/scan").status_code == 422
