"""
Receipt field extraction.

Best-effort recovery of amount, date and description from
the raw text of a scanned receipt. Every finder is a pure
function of its input and returns None when it finds nothing;
deciding whether an all-empty result is a problem is up to
the caller.
"""

import math
import re
from dataclasses import dataclass
from datetime import date

# Tried in order; the first capture that is a positive number wins.
AMOUNT_PATTERNS = [
    re.compile(r"total[\s:]*\$?\s*(\d+\.?\d*)", re.I | re.A),
    re.compile(r"amount[\s:]*\$?\s*(\d+\.?\d*)", re.I | re.A),
    re.compile(r"\btotal\b.*?\$\s*(\d+\.?\d*)", re.I | re.A),
    re.compile(r"\$\s*(\d+\.?\d*)\s*$", re.M | re.A),
    re.compile(r"\$\s*(\d+\.?\d*)", re.A),
    re.compile(r"(\d+\.?\d*)\s*(?:USD|EUR|GBP)", re.I | re.A),
    re.compile(r"(?:USD|EUR|GBP)\s*(\d+\.?\d*)", re.I | re.A),
    re.compile(r"(\d+\.?\d*)\s*(?:total|amount)", re.I | re.A),
    re.compile(r"(?:total|amount)\s*(\d+\.?\d*)", re.I | re.A),
]

# Every number, with or without a dollar sign.
ANY_AMOUNT = re.compile(r"\$?\s*(\d+\.?\d*)", re.A)

_MONTH = r"(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*"

NUMERIC_DATE = re.compile(r"(?<!\d)(\d{1,2})[-/](\d{1,2})[-/](\d{2,4})(?!\d)", re.A)
ISO_DATE = re.compile(r"(?<!\d)(\d{4})[-/](\d{1,2})[-/](\d{1,2})(?!\d)", re.A)
MONTH_FIRST_DATE = re.compile(_MONTH + r" (\d{1,2}),? (\d{4})", re.I | re.A)
DAY_FIRST_DATE = re.compile(r"(\d{1,2})\s+" + _MONTH + r"\s+(\d{4})", re.I | re.A)

MONTHS = {
    name: number
    for number, name in enumerate(
        ["jan", "feb", "mar", "apr", "may", "jun",
         "jul", "aug", "sep", "oct", "nov", "dec"],
        start=1,
    )
}

# Lines starting with these are labels, not what was bought.
RESERVED_LINE = re.compile(
    r"^(total|amount|date|time|tel|fax|receipt|invoice|#|no\.|thank|welcome"
    r"|subtotal|tax|discount)",
    re.I,
)
LEADING_DATE = re.compile(r"^(\d{1,2}[-/]\d{1,2}[-/]\d{2,4})", re.A)
MONEY_ONLY = re.compile(r"^\$?\d+\.\d{2}$", re.A)


@dataclass(frozen=True)
class ReceiptFields:
    amount: str | None = None
    date: str | None = None
    description: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.amount is None and self.date is None and self.description is None


def _positive(number: str) -> float | None:
    try:
        value = float(number)
    except ValueError:
        return None
    if math.isfinite(value) and value > 0:
        return value
    return None


def find_amount(text: str) -> str | None:
    """
    Best guess at the receipt total, as a string with two decimals.

    Labelled totals are preferred. Failing those, the largest
    number anywhere in the text is taken, since the total is
    usually the biggest figure on a receipt.
    """
    for pattern in AMOUNT_PATTERNS:
        match = pattern.search(text)
        if match and match.group(1):
            value = _positive(match.group(1))
            if value is not None:
                return f"{value:.2f}"

    amounts = [
        value
        for value in (_positive(n) for n in ANY_AMOUNT.findall(text))
        if value is not None
    ]
    if amounts:
        return f"{max(amounts):.2f}"
    return None


def _full_year(year: str) -> int:
    value = int(year)
    if len(year) == 2:
        return 2000 + value if value < 50 else 1900 + value
    return value


def _make_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _numeric_date(match: re.Match) -> date | None:
    first, second, year = match.groups()
    full_year = _full_year(year)
    # Month first, then day first.
    return (
        _make_date(full_year, int(first), int(second))
        or _make_date(full_year, int(second), int(first))
    )


def _iso_date(match: re.Match) -> date | None:
    year, month, day = match.groups()
    return _make_date(int(year), int(month), int(day))


def _month_first_date(match: re.Match) -> date | None:
    month, day, year = match.groups()
    return _make_date(int(year), MONTHS[month.lower()], int(day))


def _day_first_date(match: re.Match) -> date | None:
    day, month, year = match.groups()
    return _make_date(int(year), MONTHS[month.lower()], int(day))


DATE_PARSERS = [
    (NUMERIC_DATE, _numeric_date),
    (ISO_DATE, _iso_date),
    (MONTH_FIRST_DATE, _month_first_date),
    (DAY_FIRST_DATE, _day_first_date),
]


def find_date(text: str) -> str | None:
    """First date in the text that is a real calendar date, as YYYY-MM-DD."""
    for pattern, parse in DATE_PARSERS:
        match = pattern.search(text)
        if match:
            found = parse(match)
            if found is not None:
                return found.isoformat()
    return None


def find_description(text: str) -> str | None:
    """First line that looks like a merchant or item name."""
    for raw in text.split("\n"):
        line = raw.strip()
        if len(line) <= 3:
            continue
        if RESERVED_LINE.match(line) or LEADING_DATE.match(line):
            continue
        if MONEY_ONLY.match(line):
            continue
        return line
    return None


def extract_fields(text: str) -> ReceiptFields:
    return ReceiptFields(
        amount=find_amount(text),
        date=find_date(text),
        description=find_description(text),
    )
