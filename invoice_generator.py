from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from io import BytesIO
import pandas as pd
import structlog
from PIL import Image, ImageDraw, ImageFont

from utils import generate_upi_link, number_to_words

logger = structlog.get_logger()


def build_invoice(invoice_number, invoice_date, freelancer, client, items, totals, due_date=None, upi_id=None):
    """
    Assemble the dict every export below renders from.
    items need description, quantity, rate and amount; totals is the
    output of calculate_invoice_totals.
    """
    lines = [
        {
            "sr": sr,
            "description": it.get("description", ""),
            "quantity": it["quantity"],
            "rate": it["rate"],
            "amount": it["amount"],
        }
        for sr, it in enumerate(items, start=1)
    ]
    upi_link = None
    if upi_id:
        upi_link = generate_upi_link(upi_id, totals["total_amount"], invoice_number, freelancer.get("name", ""))
    return {
        "invoice_number": invoice_number,
        "date": invoice_date,
        "due_date": due_date,
        "freelancer": freelancer,
        "client": client,
        "items": lines,
        "totals": totals,
        "amount_in_words": number_to_words(totals["total_amount"]),
        "upi_link": upi_link,
    }


def _tax_lines(totals):
    """Label/amount pairs for the totals block, skipping empty GST heads."""
    rows = [("Subtotal", totals["subtotal"])]
    if totals["cgst_amount"]:
        rows.append((f"CGST @ {totals['cgst_rate']:g}%", totals["cgst_amount"]))
    if totals["sgst_amount"]:
        rows.append((f"SGST @ {totals['sgst_rate']:g}%", totals["sgst_amount"]))
    if totals["igst_amount"]:
        rows.append((f"IGST @ {totals['igst_rate']:g}%", totals["igst_amount"]))
    if totals["tds_amount"]:
        rows.append((f"Less TDS @ {totals['tds_rate']:g}%", -totals["tds_amount"]))
    return rows


def generate_invoice_pdf(invoice_dict):
    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4

    # Set initial coordinates
    x, y = 40, height - 40

    # Header Section
    c.setFont("Helvetica-Bold", 14)
    c.drawCentredString(width/2, y, "TAX INVOICE")
    y -= 30

    # Invoice Details
    c.setFont("Helvetica", 10)
    c.drawString(x, y, f"Invoice: {invoice_dict['invoice_number']}")
    c.drawString(width/2, y, f"Date: {invoice_dict['date']}")
    y -= 15
    if invoice_dict.get("due_date"):
        c.drawString(width/2, y, f"Due: {invoice_dict['due_date']}")
    y -= 20

    # Freelancer Information
    freelancer = invoice_dict["freelancer"]
    c.drawString(x, y, f"From: {freelancer['name']}")
    c.drawString(width/2, y, f"GSTIN: {freelancer.get('gstin', '')}  PAN: {freelancer.get('pan', '')}")
    y -= 20

    # Client Information
    client = invoice_dict["client"]
    c.drawString(x, y, f"Bill To: {client.get('name', '')}")
    c.drawString(width/2, y, f"GSTIN: {client.get('gstin', '')}")
    y -= 30

    # Table Header
    c.setFont("Helvetica-Bold", 10)
    headers = ["Sr", "Description", "Qty", "Rate", "Amount"]
    positions = [x, x+40, x+300, x+360, x+440]

    for header, pos in zip(headers, positions):
        c.drawString(pos, y, header)
    y -= 20

    # Table Items
    c.setFont("Helvetica", 9)
    for item in invoice_dict['items']:
        c.drawString(positions[0], y, str(item['sr']))
        c.drawString(positions[1], y, str(item['description'])[:45])
        c.drawString(positions[2], y, f"{item['quantity']:g}")
        c.drawString(positions[3], y, f"{item['rate']:.2f}")
        c.drawString(positions[4], y, f"{item['amount']:.2f}")
        y -= 15

        # Page break if needed
        if y < 140:
            c.showPage()
            y = height - 40
            c.setFont("Helvetica", 9)

    # Totals
    y -= 10
    totals = invoice_dict["totals"]
    for label, value in _tax_lines(totals):
        c.drawString(positions[3] - 40, y, label)
        c.drawString(positions[4], y, f"{value:.2f}")
        y -= 15

    c.setFont("Helvetica-Bold", 10)
    c.drawString(positions[3] - 40, y, "Total:")
    c.drawString(positions[4], y, f"{totals['total_amount']:.2f}")
    y -= 25

    c.setFont("Helvetica", 9)
    c.drawString(x, y, f"Amount in words: {invoice_dict['amount_in_words']}")
    if invoice_dict.get("upi_link"):
        y -= 15
        c.drawString(x, y, f"Pay via UPI: {invoice_dict['upi_link']}")

    c.showPage()
    c.save()
    buffer.seek(0)
    logger.info("invoice_exported", invoice_number=invoice_dict["invoice_number"], format="pdf")
    return buffer.read()


def generate_invoice_image_bytes(invoice_dict, width=1000, row_height=30):
    rows = max(len(invoice_dict['items']), 1) + 10
    height = rows * row_height + 200
    img = Image.new("RGB", (width, height), "white")
    draw = ImageDraw.Draw(img)

    try:
        font = ImageFont.truetype("arial.ttf", 14)
        font_bold = ImageFont.truetype("arialbd.ttf", 14)
    except OSError:
        font = ImageFont.load_default()
        font_bold = ImageFont.load_default()

    y = 30

    # Header
    draw.text((width/2 - 100, y), "TAX INVOICE", font=font_bold, fill="black")
    y += 40

    # Invoice Details
    draw.text((50, y), f"Invoice: {invoice_dict['invoice_number']}", font=font, fill="black")
    draw.text((width/2, y), f"Date: {invoice_dict['date']}", font=font, fill="black")
    y += 30

    # Freelancer & Client
    draw.text((50, y), f"From: {invoice_dict['freelancer']['name']}", font=font, fill="black")
    draw.text((width/2, y), f"GSTIN: {invoice_dict['freelancer'].get('gstin', '')}", font=font, fill="black")
    y += 25

    draw.text((50, y), f"Bill To: {invoice_dict['client'].get('name', '')}", font=font, fill="black")
    draw.text((width/2, y), f"GSTIN: {invoice_dict['client'].get('gstin', '')}", font=font, fill="black")
    y += 40

    # Table Header
    header_text = "Sr   Description                     Qty      Rate        Amount"
    draw.text((50, y), header_text, font=font_bold, fill="black")
    y += row_height

    # Table Items
    for item in invoice_dict['items']:
        item_text = (f"{item['sr']}   {item['description'][:30]:<30}   "
                     f"{item['quantity']:<6g}   {item['rate']:<10.2f}   {item['amount']:<10.2f}")
        draw.text((50, y), item_text, font=font, fill="black")
        y += row_height

    # Totals
    y += 20
    for label, value in _tax_lines(invoice_dict["totals"]):
        draw.text((50, y), f"{label}: {value:.2f}", font=font, fill="black")
        y += row_height
    draw.text((50, y), f"Total: INR {invoice_dict['totals']['total_amount']:.2f}",
              font=font_bold, fill="black")
    y += row_height
    draw.text((50, y), invoice_dict["amount_in_words"], font=font, fill="black")

    buffer = BytesIO()
    img.save(buffer, format="PNG")
    buffer.seek(0)
    logger.info("invoice_exported", invoice_number=invoice_dict["invoice_number"], format="png")
    return buffer.getvalue()


ITEM_COLUMNS = {
    "sr": "Sr",
    "description": "Description",
    "quantity": "Qty/Hours",
    "rate": "Rate",
    "amount": "Amount",
}

TOTALS_ROWS = {
    "subtotal": "Subtotal",
    "tax_rate": "GST Rate %",
    "cgst_amount": "CGST",
    "sgst_amount": "SGST",
    "igst_amount": "IGST",
    "tax_amount": "Total GST",
    "tds_rate": "TDS Rate %",
    "tds_amount": "TDS",
    "total_amount": "Total Amount",
}


def _items_frame(invoice_dict):
    df = pd.DataFrame(invoice_dict['items'], columns=list(ITEM_COLUMNS))
    return df.rename(columns=ITEM_COLUMNS)


def _totals_frame(invoice_dict):
    """Totals as Head/Value rows, closing with the amount in words."""
    totals = invoice_dict['totals']
    rows = [(label, totals[key]) for key, label in TOTALS_ROWS.items()]
    rows.append(("Amount in Words", invoice_dict['amount_in_words']))
    return pd.DataFrame(rows, columns=["Head", "Value"])


def generate_invoice_xlsx_bytes(invoice_dict):
    buffer = BytesIO()

    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        _items_frame(invoice_dict).to_excel(writer, index=False, sheet_name="Items")
        _totals_frame(invoice_dict).to_excel(writer, index=False, sheet_name="Totals")

    buffer.seek(0)
    logger.info("invoice_exported", invoice_number=invoice_dict["invoice_number"], format="xlsx")
    return buffer.getvalue()


def generate_invoice_csv_bytes(invoice_dict):
    """Item rows only; totals live in the PDF and Excel exports."""
    csv_text = _items_frame(invoice_dict).to_csv(index=False)
    logger.info("invoice_exported", invoice_number=invoice_dict["invoice_number"], format="csv")
    return csv_text.encode('utf-8')
