"""
Statement Export Module

This module renders a person's statement as CSV text or a PDF document.

Features:
    - CSV with one row per charge and payment, followed by a summary block
    - PDF report built from HTML using xhtml2pdf

CSV Layout:
    Type, Date, Description, Amount, Status / Method, Notes
    Charge, <date>, <title>, <share>, Open|Settled, <notes>
    Payment, <date>, Payment, -<amount>, <method>, <note>
    (blank row)
    Summary
    Total Charges, , , <total>
    Total Payments, , , <total>
    Balance, , , <balance>

Functions:
    statement_filename: Download file name for a statement.
    content_disposition: Latin-1 safe download header for a file name.
    statement_to_csv: Render a statement as CSV text.
    statement_to_pdf: Render a statement as PDF bytes.
"""

import csv
import html
import io
from datetime import date
from urllib.parse import quote

from xhtml2pdf import pisa

from money import cents_to_amount_str, format_currency
from statement import export_rows


CSV_HEADER = ["Type", "Date", "Description", "Amount", "Status / Method", "Notes"]


def statement_filename(statement: dict, extension: str) -> str:
    """Build a download name like "Alice-statement.csv"."""
    return f"{statement['person_name']}-statement.{extension}"


def content_disposition(filename: str) -> str:
    """
    Build an attachment Content-Disposition header value.

    Header values must be Latin-1, so the real name travels percent-encoded
    in filename* and filename carries a plain ASCII fallback.

    Args:
        filename: Download name, possibly non-ASCII (e.g. "李雷-statement.csv").

    Returns:
        str: e.g. attachment; filename="-statement.csv"; filename*=UTF-8''%E6%9D%8E...
    """
    fallback = "".join(c for c in filename if " " <= c <= "~" and c not in '"\\') or "statement"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


def statement_to_csv(statement: dict) -> str:
    """
    Render a statement as CSV text.

    Args:
        statement: Output of statement.build_statement().

    Returns:
        str: CSV content with every field quoted and "\\n" line endings.
    """
    totals = statement["totals"]
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")

    writer.writerow(CSV_HEADER)
    for row in export_rows(statement):
        writer.writerow([
            row["type"],
            row["date"],
            row["description"],
            row["amount"],
            row["status_or_method"],
            row["notes"]
        ])

    writer.writerow([])
    writer.writerow(["Summary", "", "", "", "", ""])
    writer.writerow(["Total Charges", "", "", cents_to_amount_str(totals["charges_cents"]), "", ""])
    writer.writerow(["Total Payments", "", "", cents_to_amount_str(totals["payments_cents"]), "", ""])
    writer.writerow(["Balance", "", "", cents_to_amount_str(totals["balance_cents"]), "", ""])

    return buffer.getvalue()


def _table_rows(rows: list[dict]) -> str:
    if not rows:
        return '<tr><td colspan="5">Nothing recorded</td></tr>'
    return "".join(
        "<tr>"
        f"<td>{html.escape(row['type'])}</td>"
        f"<td>{html.escape(row['date'])}</td>"
        f"<td>{html.escape(row['description'])}</td>"
        f"<td>{format_currency(row['amount_cents'])}</td>"
        f"<td>{html.escape(row['status_or_method'])}</td>"
        "</tr>"
        for row in rows
    )


def statement_to_html(statement: dict) -> str:
    """Build the HTML document used for the PDF statement."""
    totals = statement["totals"]
    name = html.escape(statement["person_name"])

    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="UTF-8">
        <style>
            body {{ font-family: Arial, sans-serif; padding: 20px; color: #333; }}
            h1 {{ color: #4f46e5; border-bottom: 2px solid #4f46e5; padding-bottom: 10px; }}
            h2 {{ color: #444; margin-top: 25px; }}
            table {{ width: 100%; border-collapse: collapse; margin: 15px 0; }}
            th, td {{ border: 1px solid #ddd; padding: 8px; text-align: left; }}
            th {{ background: #4f46e5; color: white; }}
            .highlight {{ background: #eef2ff; padding: 15px; margin: 15px 0; }}
            .footer {{ margin-top: 30px; text-align: center; color: #888; font-size: 12px; }}
        </style>
    </head>
    <body>
        <h1>Statement for {name}</h1>
        <p><strong>Generated:</strong> {date.today().strftime('%B %d, %Y')}</p>

        <div class="highlight">
            <p><strong>Total Charges:</strong> {format_currency(totals['charges_cents'])}</p>
            <p><strong>Total Payments:</strong> {format_currency(totals['payments_cents'])}</p>
            <p><strong>Balance:</strong> {format_currency(totals['balance_cents'])}</p>
        </div>

        <h2>Activity</h2>
        <table>
            <tr><th>Type</th><th>Date</th><th>Description</th><th>Amount</th><th>Status / Method</th></tr>
            {_table_rows(export_rows(statement))}
        </table>

        <div class="footer">
            <p>Generated by Group Money Tracker</p>
        </div>
    </body>
    </html>
    """


def statement_to_pdf(statement: dict) -> bytes:
    """
    Render a statement as a PDF document.

    Args:
        statement: Output of statement.build_statement().

    Returns:
        bytes: PDF file content.

    Raises:
        RuntimeError: If xhtml2pdf reports a rendering error.
    """
    pdf_buffer = io.BytesIO()
    result = pisa.CreatePDF(io.StringIO(statement_to_html(statement)), dest=pdf_buffer)
    if result.err:
        raise RuntimeError("Failed to render statement PDF")
    return pdf_buffer.getvalue()
