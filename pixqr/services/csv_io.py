"""CSV export of generated payloads and CSV import of payers."""
from __future__ import annotations

import csv
import io
from typing import Iterable

from ..brcode import Payer
from .generator import PayerResult

BOM = "\ufeff"
CSV_COLUMNS = ("REFERÊNCIA", "VALOR", "CÓDIGO")
CSV_HEADER = ";".join(CSV_COLUMNS)
MAX_IMPORTED_REFERENCE = 20


def format_brl(amount: str) -> str:
    return f"R$ {amount.replace('.', ',')}"


def payers_to_csv(rows: Iterable[PayerResult]) -> str:
    """Render results as a semicolon separated, Excel-friendly CSV document."""

    buffer = io.StringIO(newline="")
    buffer.write(f"{BOM}{CSV_HEADER}\r\n")
    writer = csv.writer(buffer, delimiter=";", quoting=csv.QUOTE_ALL, lineterminator="\r\n")
    for row in rows:
        value = format_brl(row.amount) if row.amount else ""
        writer.writerow([row.reference, value, row.payload])
    return buffer.getvalue()


def _clean_amount(raw: str) -> str:
    return raw.replace("R$ ", "").replace("R$", "").replace(",", ".").strip()


def parse_payers_csv(text: str) -> list[Payer]:
    """Read ``reference;value`` rows, skipping blank or incomplete ones.

    The header written by :func:`payers_to_csv` and a leading BOM are ignored
    so exported files can be imported again.
    """

    payers: list[Payer] = []
    reader = csv.reader(io.StringIO(text.lstrip(BOM), newline=""), delimiter=";")
    for row in reader:
        columns = [column.strip() for column in row]
        if len(columns) < 2:
            continue
        reference, value = columns[0], columns[1]
        if not reference or not value or (reference, value) == CSV_COLUMNS[:2]:
            continue
        payers.append(Payer(reference=reference[:MAX_IMPORTED_REFERENCE], amount=_clean_amount(value)))
    return payers
