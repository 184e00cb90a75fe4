"""Tests for formatting, UPI links and small invoice helpers."""

from datetime import date

import pytest

from utils import (
    calculate_due_date,
    format_currency,
    generate_upi_link,
    is_invoice_overdue,
    number_to_words,
    to_paise,
    validate_gstin,
    validate_pan,
)


@pytest.mark.parametrize("amount,expected", [
    (0, "₹0.00"),
    (100, "₹100.00"),
    (1234.5, "₹1,234.50"),
    (100000, "₹1,00,000.00"),
    (1234567.891, "₹12,34,567.89"),
    (10000000, "₹1,00,00,000.00"),
    (-1234.5, "-₹1,234.50"),
])
def test_format_currency(amount, expected):
    assert format_currency(amount) == expected


def test_format_currency_nan():
    assert format_currency(float("nan")) == "₹NaN"


@pytest.mark.parametrize("amount,expected", [
    (0, "Zero Rupees Only"),
    (115, "One Hundred Fifteen Rupees Only"),
    (1234, "One Thousand Two Hundred Thirty Four Rupees Only"),
    (58000, "Fifty Eight Thousand Rupees Only"),
    (100000, "One Lakh Rupees Only"),
    (10000000, "One Crore Rupees Only"),
    (12345678, "One Crore Twenty Three Lakh Forty Five Thousand Six Hundred Seventy Eight Rupees Only"),
    (1250.5, "One Thousand Two Hundred Fifty Rupees and Fifty Paise Only"),
    (0.5, "Zero Rupees and Fifty Paise Only"),
    (0.001, "Zero Rupees Only"),
    (10_000_000_000, "One Thousand Crore Rupees Only"),
])
def test_number_to_words(amount, expected):
    assert number_to_words(amount) == expected


def test_number_to_words_rejects_nan():
    with pytest.raises(ValueError):
        number_to_words(float("nan"))


class TestUPILink:
    def test_invoice_link(self):
        link = generate_upi_link("freelancer@upi", 1000, "INV-001", "Freelancer")

        assert link == "upi://pay?pa=freelancer@upi&pn=Freelancer&am=1000&cu=INR&tn=Payment%20for%20Invoice%20INV-001"

    def test_fractional_amount_and_spaces(self):
        link = generate_upi_link("asha.rao@okbank", 1234.5, "INV 7", "Asha Rao")

        assert "am=1234.5&" in link
        assert "pn=Asha%20Rao" in link
        assert link.endswith("tn=Payment%20for%20Invoice%20INV%207")

    def test_upi_id_not_validated(self):
        assert "pa=not-a-vpa&" in generate_upi_link("not-a-vpa", 10, "X", "Y")


def test_to_paise():
    assert to_paise(58000.5) == 5800050
    assert to_paise(0.1 + 0.2) == 30


@pytest.mark.parametrize("gstin,valid", [
    ("06AAAAA0000A1Z5", True),
    ("27ABCDE1234F1Z5", True),
    ("27abcde1234f1z5", False),
    ("27ABCDE1234F0Z5", False),
    ("", False),
])
def test_validate_gstin(gstin, valid):
    assert validate_gstin(gstin) is valid


@pytest.mark.parametrize("pan,valid", [("AAAAA0000A", True), ("AAAA0000A", False), ("AAAAA00000", False)])
def test_validate_pan(pan, valid):
    assert validate_pan(pan) is valid


def test_calculate_due_date():
    assert calculate_due_date("2024-11-01") == "2024-12-01"
    assert calculate_due_date("2024-11-01T10:30:00Z", 15) == "2024-11-16"
    assert calculate_due_date(date(2024, 2, 20), 10) == "2024-03-01"


def test_is_invoice_overdue():
    today = date(2024, 12, 2)

    assert is_invoice_overdue("2024-12-01", "sent", today)
    assert not is_invoice_overdue("2024-12-02", "sent", today)
    assert not is_invoice_overdue("2024-01-01", "paid", today)
