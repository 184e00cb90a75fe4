import copy
import uuid
from datetime import date, datetime, timezone
from typing import Dict, List, Optional

import pandas as pd  # type: ignore
import structlog
from rapidfuzz import process, fuzz  # type: ignore
from rapidfuzz.utils import default_process  # type: ignore

from tax_calc import CLIENT_TYPES, calculate_invoice_totals, compute_line, money
from utils import calculate_due_date, is_invoice_overdue, validate_gstin, validate_pan

logger = structlog.get_logger()

INVOICE_STATUSES = ("draft", "sent", "paid", "overdue", "cancelled")

INVOICE_COLUMNS = [
    "invoice_number", "client_name", "invoice_date", "due_date", "status",
    "payment_status", "subtotal", "tax_amount", "tds_amount", "total_amount", "paid_amount",
]

SAMPLE_CLIENTS = [
    {
        "name": "Acme Corporation",
        "email": "contact@acme.com",
        "phone": "+91 98765 43210",
        "company": "Acme Corporation Pvt Ltd",
        "address": "Plot No. 123, Sector 15\nGurgaon, Haryana 122001\nIndia",
        "gstin": "06AAAAA0000A1Z5",
        "pan": "AAAAA0000A",
        "client_type": "company",
    },
    {
        "name": "Priya Sharma",
        "email": "priya.sharma@gmail.com",
        "phone": "+91 87654 32109",
        "company": "",
        "address": "Flat 4B, Green Valley Apartments\nBandra West, Mumbai 400050\nIndia",
        "gstin": "",
        "pan": "BBBBB1111B",
        "client_type": "individual",
    },
]


class ClientNotFound(LookupError):
    pass


class InvoiceNotFound(LookupError):
    pass


class DuplicateClientError(ValueError):
    pass


def _now():
    return datetime.now(timezone.utc).isoformat()


def _new_id():
    return uuid.uuid4().hex


class DemoStore:
    """
    In-memory clients and invoices for demo mode, when no database is
    configured. Each instance owns its own data.
    """

    def __init__(self, seed: bool = True, number_prefix: str = "INV"):
        self.number_prefix = number_prefix
        self._clients: Dict[str, Dict] = {}
        self._invoices: Dict[str, Dict] = {}
        self._invoice_seq = 0
        if seed:
            for client in SAMPLE_CLIENTS:
                self.add_client(**client)

    # -------------------------
    # Clients
    # -------------------------
    def _check_client(self, fields: Dict, client_id: Optional[str] = None):
        if fields.get("client_type", "individual") not in CLIENT_TYPES:
            raise ValueError(f"Unknown client type: {fields['client_type']}")
        if fields.get("gstin") and not validate_gstin(fields["gstin"]):
            raise ValueError(f"Invalid GSTIN: {fields['gstin']}")
        if fields.get("pan") and not validate_pan(fields["pan"]):
            raise ValueError(f"Invalid PAN: {fields['pan']}")
        email = fields.get("email")
        if email:
            for other in self._clients.values():
                if other["email"] == email and other["id"] != client_id:
                    raise DuplicateClientError(f"Email already exists: {email}")

    def add_client(self, name: str, email: str = "", client_type: str = "individual", **extra) -> Dict:
        fields = {"name": name, "email": email, "client_type": client_type, **extra}
        self._check_client(fields)
        client = {
            "id": _new_id(),
            "name": name,
            "email": email,
            "phone": extra.get("phone", ""),
            "company": extra.get("company", ""),
            "address": extra.get("address", ""),
            "gstin": extra.get("gstin", ""),
            "pan": extra.get("pan", ""),
            "client_type": client_type,
            "created_at": _now(),
            "updated_at": _now(),
        }
        self._clients[client["id"]] = client
        logger.info("client_added", client_id=client["id"], client_type=client_type)
        return dict(client)

    def get_client(self, client_id: str) -> Dict:
        try:
            return dict(self._clients[client_id])
        except KeyError:
            raise ClientNotFound(client_id) from None

    def list_clients(self) -> List[Dict]:
        return [dict(c) for c in self._clients.values()]

    def update_client(self, client_id: str, **changes) -> Dict:
        client = self._clients.get(client_id)
        if client is None:
            raise ClientNotFound(client_id)
        changes.pop("id", None)
        changes.pop("created_at", None)
        self._check_client({**client, **changes}, client_id=client_id)
        client.update(changes, updated_at=_now())
        logger.info("client_updated", client_id=client_id, fields=sorted(changes))
        return dict(client)

    def delete_client(self, client_id: str):
        if client_id not in self._clients:
            raise ClientNotFound(client_id)
        if any(inv["client_id"] == client_id for inv in self._invoices.values()):
            raise ValueError("Client has invoices and cannot be deleted")
        del self._clients[client_id]
        logger.info("client_deleted", client_id=client_id)

    def search_clients(self, query: str, limit: int = 5, score_cutoff: float = 60) -> List[Dict]:
        """Fuzzy match clients by name."""
        clients = list(self._clients.values())
        if not query or not clients:
            return []
        choices = [c["name"] for c in clients]
        matches = process.extract(query, choices, scorer=fuzz.WRatio, processor=default_process,
                                  limit=limit, score_cutoff=score_cutoff)
        results = []
        for match, score, idx in matches:
            results.append({**clients[idx], "score": score})
        return results

    # -------------------------
    # Invoices
    # -------------------------
    def add_invoice(
        self,
        client_id: str,
        items: List[Dict],
        tax_rate: float = 18,
        tds_rate: Optional[float] = 0,
        is_inter_state: bool = False,
        invoice_date: Optional[str] = None,
        payment_terms: int = 30,
        description: str = "",
    ) -> Dict:
        """
        Create a draft invoice. Item amounts are recomputed from
        quantity x rate before totals are aggregated.
        """
        client = self.get_client(client_id)
        lines = []
        for it in items:
            res = compute_line(it["quantity"], it["rate"], tax_rate, is_inter_state)
            lines.append({
                "id": _new_id(),
                "description": it.get("description", ""),
                "quantity": it["quantity"],
                "rate": it["rate"],
                "amount": res["amount"],
                "cgst": money(res["cgst"]),
                "sgst": money(res["sgst"]),
                "igst": money(res["igst"]),
                "line_total": money(res["line_total"]),
            })
        totals = calculate_invoice_totals(lines, tax_rate, tds_rate, client["client_type"], is_inter_state)

        self._invoice_seq += 1
        invoice_date = invoice_date or date.today().isoformat()
        invoice_id = _new_id()
        for line in lines:
            line["invoice_id"] = invoice_id

        invoice = {
            "id": invoice_id,
            "invoice_number": f"{self.number_prefix}-{self._invoice_seq:03d}",
            "client_id": client_id,
            "client_name": client["name"],
            "invoice_date": invoice_date,
            "due_date": calculate_due_date(invoice_date, payment_terms),
            "description": description,
            "is_inter_state": is_inter_state,
            "status": "draft",
            "payment_status": "pending",
            "paid_amount": 0,
            "amount": totals["subtotal"],
            **totals,
            "items": lines,
            "created_at": _now(),
            "updated_at": _now(),
        }
        self._invoices[invoice_id] = invoice
        logger.info(
            "invoice_added",
            invoice_number=invoice["invoice_number"],
            client_id=client_id,
            total_amount=invoice["total_amount"],
        )
        return copy.deepcopy(invoice)

    def get_invoice(self, invoice_id: str) -> Dict:
        try:
            return copy.deepcopy(self._invoices[invoice_id])
        except KeyError:
            raise InvoiceNotFound(invoice_id) from None

    def list_invoices(self, client_id: Optional[str] = None) -> List[Dict]:
        return [
            copy.deepcopy(inv) for inv in self._invoices.values()
            if client_id is None or inv["client_id"] == client_id
        ]

    def update_invoice_status(self, invoice_id: str, status: str) -> Dict:
        if status not in INVOICE_STATUSES:
            raise ValueError(f"Unknown invoice status: {status}")
        invoice = self._invoices.get(invoice_id)
        if invoice is None:
            raise InvoiceNotFound(invoice_id)
        invoice["status"] = status
        if status == "paid":
            invoice["payment_status"] = "paid"
            invoice["paid_amount"] = invoice["total_amount"]
        else:
            invoice["payment_status"] = "pending"
            invoice["paid_amount"] = 0
        invoice["updated_at"] = _now()
        logger.info("invoice_status_changed", invoice_number=invoice["invoice_number"], status=status)
        return copy.deepcopy(invoice)

    def delete_invoice(self, invoice_id: str):
        if self._invoices.pop(invoice_id, None) is None:
            raise InvoiceNotFound(invoice_id)
        logger.info("invoice_deleted", invoice_id=invoice_id)

    def overdue_invoices(self, today: Optional[date] = None) -> List[Dict]:
        return [
            copy.deepcopy(inv) for inv in self._invoices.values()
            if inv["status"] != "cancelled" and is_invoice_overdue(inv["due_date"], inv["status"], today)
        ]

    def to_dataframe(self) -> pd.DataFrame:
        """Invoice summary table for reports."""
        rows = [{col: inv[col] for col in INVOICE_COLUMNS} for inv in self._invoices.values()]
        return pd.DataFrame(rows, columns=INVOICE_COLUMNS)
