"""Tests for invoice assembly and file exports."""

from io import BytesIO

import pandas as pd
import pytest

from invoice_generator import (
    _tax_lines,
    build_invoice,
    generate_invoice_csv_bytes,
    generate_invoice_image_bytes,
    generate_invoice_pdf,
    generate_invoice_xlsx_bytes,
)
from tax_calc import calculate_invoice_totals

FREELANCER = {"name": "Asha Rao", "gstin": "27ABCDE1234F1Z5", "pan": "ABCDE1234F"}
CLIENT = {"name": "Acme Corporation", "gstin": "06AAAAA0000A1Z5"}
ITEMS = [
    {"description": "Website development", "quantity": 1, "rate": 40000, "amount": 40000},
    {"description": "Consulting hours", "quantity": 5, "rate": 2000, "amount": 10000},
]


def _invoice(is_inter_state=False, upi_id="asha@upi"):
    totals = calculate_invoice_totals(ITEMS, 18, 2, "company", is_inter_state)
    return build_invoice("INV-001", "2024-11-01", FREELANCER, CLIENT, ITEMS, totals,
                         due_date="2024-12-01", upi_id=upi_id)


@pytest.fixture
def invoice():
    return _invoice()


def test_build_invoice(invoice):
    assert [it["sr"] for it in invoice["items"]] == [1, 2]
    assert invoice["amount_in_words"] == "Fifty Eight Thousand Rupees Only"
    assert invoice["upi_link"].startswith("upi://pay?pa=asha@upi&pn=Asha%20Rao&am=58000&")


def test_build_invoice_without_upi():
    assert _invoice(upi_id=None)["upi_link"] is None


def test_tax_lines_intra_state(invoice):
    labels = [label for label, _ in _tax_lines(invoice["totals"])]

    assert labels == ["Subtotal", "CGST @ 9%", "SGST @ 9%", "Less TDS @ 2%"]


def test_tax_lines_inter_state():
    rows = _tax_lines(_invoice(is_inter_state=True)["totals"])

    assert ("IGST @ 18%", 9000) in rows
    assert ("Less TDS @ 2%", -1000) in rows


def test_pdf(invoice):
    assert generate_invoice_pdf(invoice).startswith(b"%PDF")


def test_png(invoice):
    assert generate_invoice_image_bytes(invoice).startswith(b"\x89PNG")


def test_csv(invoice):
    lines = generate_invoice_csv_bytes(invoice).decode("utf-8").splitlines()

    assert lines[0] == "Sr,Description,Qty/Hours,Rate,Amount"
    assert lines[1] == "1,Website development,1,40000,40000"
    assert len(lines) == 3


def test_xlsx(invoice):
    sheets = pd.read_excel(BytesIO(generate_invoice_xlsx_bytes(invoice)), sheet_name=None)

    assert set(sheets) == {"Items", "Totals"}
    totals = dict(zip(sheets["Totals"]["Head"], sheets["Totals"]["Value"]))
    assert totals["Total Amount"] == 58000
    assert totals["CGST"] == 4500
    assert totals["Amount in Words"] == "Fifty Eight Thousand Rupees Only"
    assert list(sheets["Items"].columns) == ["Sr", "Description", "Qty/Hours", "Rate", "Amount"]
    assert len(sheets["Items"]) == 2
