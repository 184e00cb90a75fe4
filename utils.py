import math
import re
from datetime import date, datetime, timedelta
from typing import List, Optional, Union
from urllib.parse import quote, urlencode

ONES = ["", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine"]
TEENS = ["Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen",
         "Sixteen", "Seventeen", "Eighteen", "Nineteen"]
TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]

GSTIN_RE = re.compile(r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z][1-9A-Z]Z[0-9A-Z]$")
PAN_RE = re.compile(r"^[A-Z]{5}[0-9]{4}[A-Z]$")

DateLike = Union[str, date]


def format_currency(amount: float) -> str:
    """
    Format as Indian Rupees with lakh/crore grouping.
    1234.5 -> ₹1,234.50, 1234567.891 -> ₹12,34,567.89
    """
    if math.isnan(amount):
        return "₹NaN"
    sign = "-" if amount < 0 else ""
    if math.isinf(amount):
        return f"{sign}₹∞"

    rupees, paise = f"{abs(amount):.2f}".split(".")
    head, tail = rupees[:-3], rupees[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    groups.append(tail)
    return f"{sign}₹{','.join(groups)}.{paise}"


def _convert_hundreds(num: int) -> List[str]:
    words = []
    if num >= 100:
        words += [ONES[num // 100], "Hundred"]
        num %= 100
    if num >= 20:
        words.append(TENS[num // 10])
        num %= 10
    elif num >= 10:
        words.append(TEENS[num - 10])
        return words
    if num > 0:
        words.append(ONES[num])
    return words


def _indian_words(num: int) -> List[str]:
    crores, num = divmod(num, 10_000_000)
    lakhs, num = divmod(num, 100_000)
    thousands, hundreds = divmod(num, 1000)

    words = []
    if crores:
        # anything past 99 crore is itself spelled in lakh/thousand groups
        words += _indian_words(crores) + ["Crore"]
    if lakhs:
        words += _convert_hundreds(lakhs) + ["Lakh"]
    if thousands:
        words += _convert_hundreds(thousands) + ["Thousand"]
    if hundreds:
        words += _convert_hundreds(hundreds)
    return words


def number_to_words(amount: float) -> str:
    """
    Amount in words using the Indian numbering system.
    1250.5 -> "One Thousand Two Hundred Fifty Rupees and Fifty Paise Only"

    Raises ValueError for NaN or infinite amounts.
    """
    if amount == 0:
        return "Zero Rupees Only"
    if not math.isfinite(amount):
        raise ValueError(f"cannot spell non-finite amount {amount!r}")

    words = ["Minus"] if amount < 0 else []
    rupees, paise = divmod(int(round(abs(amount) * 100)), 100)
    words += (_indian_words(rupees) or ["Zero"]) + ["Rupees"]
    if paise:
        words += ["and"] + _convert_hundreds(paise) + ["Paise"]
    words.append("Only")
    return " ".join(words)


def _plain_amount(amount: float) -> str:
    amount = float(amount)
    if amount.is_integer():
        return str(int(amount))
    return repr(amount)


def generate_upi_link(upi_id: str, amount: float, invoice_number: str, payee_name: str) -> str:
    """
    Build a upi://pay deep link. The UPI app validates the payee address,
    nothing is checked here.
    """
    params = {
        "pa": upi_id,
        "pn": payee_name,
        "am": _plain_amount(amount),
        "cu": "INR",
        "tn": f"Payment for Invoice {invoice_number}",
    }
    return "upi://pay?" + urlencode(params, quote_via=quote, safe="@")


def to_paise(amount: float) -> int:
    """Rupees to integer paise, as payment gateways expect."""
    return int(round(amount * 100))


def validate_gstin(gstin: str) -> bool:
    return bool(GSTIN_RE.match(gstin or ""))


def validate_pan(pan: str) -> bool:
    return bool(PAN_RE.match(pan or ""))


def _to_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def calculate_due_date(invoice_date: DateLike, payment_terms: int = 30) -> str:
    """ISO due date, payment_terms days after invoice_date."""
    return (_to_date(invoice_date) + timedelta(days=payment_terms)).isoformat()


def is_invoice_overdue(due_date: DateLike, status: str, today: Optional[date] = None) -> bool:
    """Unpaid and past due. An invoice falling due today is not yet overdue."""
    if status == "paid":
        return False
    today = today or date.today()
    return _to_date(due_date) < today
