import streamlit as st
from datetime import date

from config import configure_logging, get_settings
from demo_store import DemoStore, DuplicateClientError
from tax_calc import GST_RATES, calculate_invoice_totals, compute_line
from invoice_generator import (
    build_invoice,
    generate_invoice_csv_bytes,
    generate_invoice_pdf,
    generate_invoice_xlsx_bytes,
)
from utils import calculate_due_date, format_currency

settings = get_settings()
configure_logging()

# ---------------------------------------------------
# PAGE CONFIG
# ---------------------------------------------------
st.set_page_config(page_title="Freelancer GST Invoices", layout="wide")

st.markdown("""
    <style>
        .main, .stApp {
            background-color: #f7faff;
        }
        h1, h2, h3, h4 {
            color: #0b5394;
        }
        .summary-box {
            background-color: #eaf1fb;
            padding: 12px 18px;
            border-radius: 8px;
            font-weight: 600;
            margin-top: 15px;
            border-left: 4px solid #0b5394;
        }
    </style>
""", unsafe_allow_html=True)

FREELANCER_INFO = settings.freelancer_info()

st.title("🧾 Freelancer GST Invoices")
st.caption(f"{FREELANCER_INFO['name']} | GSTIN: {FREELANCER_INFO['gstin'] or '-'} | PAN: {FREELANCER_INFO['pan'] or '-'}")

# Demo store lives for the browser session only
if "store" not in st.session_state:
    st.session_state.store = DemoStore(number_prefix=settings.INVOICE_NUMBER_PREFIX)
store = st.session_state.store

# ---------------------------------------------------
# CLIENTS
# ---------------------------------------------------
st.header("Clients")

with st.expander("➕ Add Client"):
    with st.form("new_client"):
        c_name = st.text_input("Name")
        c_email = st.text_input("Email")
        c_company = st.text_input("Company")
        c_gstin = st.text_input("GSTIN").strip().upper()
        c_pan = st.text_input("PAN").strip().upper()
        c_type = st.selectbox("Client Type", ["individual", "company"])
        if st.form_submit_button("Save Client"):
            try:
                store.add_client(c_name, email=c_email, company=c_company, gstin=c_gstin,
                                 pan=c_pan, client_type=c_type)
                st.success(f"Client {c_name} added")
            except DuplicateClientError as e:
                st.warning(str(e))
            except ValueError as e:
                st.error(str(e))

query = st.text_input("Search clients")
clients = store.search_clients(query) if query else store.list_clients()
if not clients:
    st.info("No clients found.")
    st.stop()

labels = {f"{c['name']} ({c['client_type']})": c for c in clients}
client = labels[st.selectbox("Bill To", list(labels))]

# ---------------------------------------------------
# LINE ITEMS
# ---------------------------------------------------
st.header("New Invoice")

if "invoice_items" not in st.session_state:
    st.session_state.invoice_items = [{"description": "", "quantity": 1.0, "rate": 0.0}]

col1, col2 = st.columns(2)
with col1:
    if st.button("➕ Add Item"):
        st.session_state.invoice_items.append({"description": "", "quantity": 1.0, "rate": 0.0})
with col2:
    if st.button("➖ Remove Item") and len(st.session_state.invoice_items) > 1:
        st.session_state.invoice_items.pop()

rate_labels = {f"{name.title()} ({rate}%)": rate for name, rate in GST_RATES.items()}
default_rate = next((i for i, r in enumerate(rate_labels.values()) if r == settings.DEFAULT_TAX_RATE), 0)
tax_rate = rate_labels[st.selectbox("GST Rate", list(rate_labels), index=default_rate)]
is_inter_state = st.checkbox("Inter-state supply (IGST)")
auto_tds = st.checkbox("Automatic TDS by client type")
tds_rate = None if auto_tds else st.number_input("TDS Rate %", min_value=0.0, max_value=100.0, value=0.0)
invoice_date = st.date_input("Invoice Date", value=date.today())

items = st.session_state.invoice_items
for i, it in enumerate(items):
    c1, c2, c3 = st.columns([3, 1, 1])
    it["description"] = c1.text_input(f"Description {i+1}", value=it["description"], key=f"desc{i}")
    it["quantity"] = c2.number_input(f"Qty/Hours {i+1}", min_value=0.01, value=it["quantity"], key=f"qty{i}")
    it["rate"] = c3.number_input(f"Rate {i+1}", min_value=0.0, value=it["rate"], key=f"rate{i}")
    line = compute_line(it["quantity"], it["rate"], tax_rate, is_inter_state)
    it["amount"] = line["amount"]
    st.caption(f"Amount: {format_currency(line['amount'])} | "
               f"GST: {format_currency(line['cgst'] + line['sgst'] + line['igst'])} | "
               f"Line Total: {format_currency(line['line_total'])}")

totals = calculate_invoice_totals(items, tax_rate, tds_rate, client["client_type"], is_inter_state)

gst_text = (f"IGST: {format_currency(totals['igst_amount'])}" if is_inter_state else
            f"CGST: {format_currency(totals['cgst_amount'])} | SGST: {format_currency(totals['sgst_amount'])}")
st.markdown(f"""
<div class="summary-box">
    Subtotal: {format_currency(totals['subtotal'])}<br>
    {gst_text}<br>
    TDS ({totals['tds_rate']:g}%): -{format_currency(totals['tds_amount'])}<br>
    <b>Total: {format_currency(totals['total_amount'])}</b>
</div>
""", unsafe_allow_html=True)

# ---------------------------------------------------
# GENERATE INVOICE
# ---------------------------------------------------
if st.button("Generate Invoice"):
    if not any(it["description"] for it in items):
        st.warning("Please describe at least one item to generate the invoice.")
    else:
        record = store.add_invoice(client["id"], items, tax_rate, tds_rate, is_inter_state,
                                   invoice_date.isoformat(), settings.DEFAULT_PAYMENT_TERMS)
        invoice = build_invoice(
            record["invoice_number"], record["invoice_date"], FREELANCER_INFO, client,
            record["items"], record, due_date=record["due_date"], upi_id=settings.UPI_ID,
        )
        st.success(f"Invoice {record['invoice_number']} created, due {record['due_date']}")
        st.write(invoice["amount_in_words"])
        if invoice["upi_link"]:
            st.markdown(f"[Pay via UPI]({invoice['upi_link']})")

        col1, col2, col3 = st.columns(3)
        with col1:
            st.download_button("📄 Download Invoice (PDF)",
                               data=generate_invoice_pdf(invoice),
                               file_name=f"{record['invoice_number']}.pdf",
                               mime="application/pdf")
        with col2:
            st.download_button("📊 Download Invoice (Excel)",
                               data=generate_invoice_xlsx_bytes(invoice),
                               file_name=f"{record['invoice_number']}.xlsx",
                               mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")
        with col3:
            st.download_button("⬇️ Download Items (CSV)",
                               data=generate_invoice_csv_bytes(invoice),
                               file_name=f"{record['invoice_number']}.csv",
                               mime="text/csv")

# ---------------------------------------------------
# INVOICES
# ---------------------------------------------------
st.header("Invoices")
df_all = store.to_dataframe()
if df_all.empty:
    st.info("📝 No invoices yet.")
else:
    st.dataframe(df_all, use_container_width=True)
    col1, col2, col3 = st.columns(3)
    col1.metric("Invoices", len(df_all))
    col2.metric("Billed", format_currency(df_all["total_amount"].sum()))
    overdue = store.overdue_invoices()
    col3.metric("Overdue", len(overdue))
    st.caption(f"Default payment terms: {settings.DEFAULT_PAYMENT_TERMS} days "
               f"(next due {calculate_due_date(date.today(), settings.DEFAULT_PAYMENT_TERMS)})")
