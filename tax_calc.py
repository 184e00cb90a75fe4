GST_RATES = {
    "standard": 18,
    "reduced": 12,
    "zero": 0,
}

# threshold is inclusive: amount >= threshold attracts the rate
TDS_RATES = {
    "individual": {"threshold": 50000, "rate": 1},
    "company": {"threshold": 30000, "rate": 2},
}

CLIENT_TYPES = ("individual", "company")


def tds_rate_for(amount, client_type):
    """Default TDS rate (percent) for a client type and billed amount."""
    policy = TDS_RATES["individual"] if client_type == "individual" else TDS_RATES["company"]
    return policy["rate"] if amount >= policy["threshold"] else 0


def calculate_tds(amount, client_type, custom_rate=None):
    """
    TDS to withhold on amount.
    A custom rate (0 included) always wins over the threshold policy.
    """
    if custom_rate is not None:
        return amount * custom_rate / 100
    return amount * tds_rate_for(amount, client_type) / 100


def calculate_gst(amount, gst_rate, is_inter_state=False):
    """
    Split GST on amount.
    Inter-state → IGST only
    Intra-state → CGST + SGST (equal halves)
    """
    total = amount * gst_rate / 100
    if is_inter_state:
        return {"cgst": 0.0, "sgst": 0.0, "igst": total, "total": total}
    return {"cgst": total / 2, "sgst": total / 2, "igst": 0.0, "total": total}


def compute_line(quantity, rate, gst_rate, is_inter_state=False):
    """
    Compute amount and tax breakdown for one invoice line.
    Values are left unrounded.
    """
    amount = quantity * rate
    gst = calculate_gst(amount, gst_rate, is_inter_state)
    return {
        "amount": amount,
        "cgst": gst["cgst"],
        "sgst": gst["sgst"],
        "igst": gst["igst"],
        "line_total": amount + gst["total"],
    }


def calculate_invoice_totals(items, tax_rate=18, tds_rate=0, client_type="individual", is_inter_state=False):
    """
    Aggregate line items into the invoice totals record.

    Each item's stored ``amount`` is summed as-is. ``tds_rate`` is passed
    straight through as the custom TDS rate, so ``0`` means no TDS at all;
    pass ``None`` to apply the threshold policy for ``client_type``.

    Every monetary field is rounded from its own unrounded value.
    """
    subtotal = sum((item["amount"] for item in items), 0.0)
    gst = calculate_gst(subtotal, tax_rate, is_inter_state)

    if tds_rate is None:
        tds_rate = tds_rate_for(subtotal, client_type)
    tds_amount = calculate_tds(subtotal, client_type, tds_rate)

    total_amount = subtotal + gst["total"] - tds_amount

    return {
        "subtotal": money(subtotal),
        "tax_rate": tax_rate,
        "tax_amount": money(gst["total"]),
        "cgst_rate": tax_rate / 2,
        "cgst_amount": money(gst["cgst"]),
        "sgst_rate": tax_rate / 2,
        "sgst_amount": money(gst["sgst"]),
        "igst_rate": tax_rate if is_inter_state else 0,
        "igst_amount": money(gst["igst"]),
        "tds_rate": tds_rate,
        "tds_amount": money(tds_amount),
        "total_amount": money(total_amount),
    }


def money(val):
    """Round to 2 decimals consistently for money values."""
    return round(float(val), 2)
