"""
Report Service.

Turns metrics plus the client, adjustment and transaction snapshots into
the downloadable money management report.

Two steps:
1. build_report() - deterministic layout model (plain strings, fixed
   section order, input row order preserved)
2. render_pdf() - draws that model with reportlab
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from io import BytesIO
from typing import Iterable, List, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from backend.app.core.config import settings
from backend.app.models.enums import SubscriptionType
from backend.app.schemas.analytics import DashboardMetrics
from backend.app.services.analytics import AnalyticsService

HEADER_FILL = colors.Color(237 / 255, 63 / 255, 39 / 255)

SUMMARY_HEADERS = ["Metric", "Value"]
ADJUSTMENT_HEADERS = ["#", "Reason", "Amount", "Date"]
CLIENT_HEADERS = ["#", "Client Name", "Type", "Total Amount", "Paid Amount"]
TRANSACTION_HEADERS = ["#", "Client Name", "Amount Paid", "Payment Date"]


@dataclass
class ReportSection:
    """One titled table (or its placeholder) in the report."""
    title: Optional[str]
    headers: List[str]
    rows: List[List[str]]
    placeholder: str = ""
    footer: List[str] = field(default_factory=list)
    new_page: bool = False
    # Summary uses a full grid, listings use striped rows
    grid: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.rows


@dataclass
class ReportDocument:
    title: str
    generated_line: str
    user_line: str
    filename: str
    sections: List[ReportSection]


def _ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def _as_date(value) -> date:
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if isinstance(value, datetime):
        return value.date()
    return value


def format_long_date(value) -> str:
    """October 18th, 2026"""
    day = _as_date(value)
    return f"{day.strftime('%B')} {_ordinal(day.day)}, {day.year}"


def format_short_date(value) -> str:
    """Oct 18, 2026"""
    day = _as_date(value)
    return f"{day.strftime('%b')} {day.day}, {day.year}"


def format_money(value, currency: str) -> str:
    amount = float(value or 0)
    if not math.isfinite(amount):
        amount = 0.0
    return f"{amount:.2f} {currency}"


def report_filename(generated_at: datetime) -> str:
    return f"money-management-report-{generated_at.strftime('%Y-%m-%d')}.pdf"


def subscription_label(subscription_type) -> str:
    return SubscriptionType(subscription_type).label


def build_report(
    metrics: DashboardMetrics,
    clients: Iterable,
    adjustments: Iterable,
    transactions: Iterable,
    generated_at: datetime,
    user_email: Optional[str] = None,
    currency: Optional[str] = None,
) -> ReportDocument:
    """
    Build the fixed-layout report model.

    Rows keep the order of the snapshots passed in; sorting is the caller's job.
    """
    currency = currency or settings.currency_suffix
    clients = list(clients)
    adjustments = list(adjustments)
    transactions = list(transactions)

    summary = ReportSection(
        title=None,
        headers=SUMMARY_HEADERS,
        rows=[
            ["Total Revenue", format_money(metrics.total_revenue, currency)],
            ["Total Paid", format_money(metrics.total_paid, currency)],
            ["Remaining Amount", format_money(metrics.total_remaining, currency)],
            ["Company Balance", format_money(metrics.company_balance, currency)],
            ["Number of Clients", str(metrics.client_count)],
        ],
        grid=True,
    )

    adjustment_section = ReportSection(
        title="Company Balance Adjustments",
        headers=ADJUSTMENT_HEADERS,
        rows=[
            [
                str(index),
                adjustment.reason or "N/A",
                format_money(adjustment.amount, currency),
                format_short_date(adjustment.created_at),
            ]
            for index, adjustment in enumerate(adjustments, start=1)
        ],
        placeholder="No adjustments found",
    )

    client_section = ReportSection(
        title="Client List",
        headers=CLIENT_HEADERS,
        rows=[
            [
                str(index),
                client.name,
                subscription_label(client.subscription_type),
                format_money(client.total_amount, currency),
                format_money(client.paid_amount, currency),
            ]
            for index, client in enumerate(clients, start=1)
        ],
        placeholder="No clients found",
    )

    transaction_section = ReportSection(
        title="Payment Transaction Log",
        headers=TRANSACTION_HEADERS,
        rows=[
            [
                str(index),
                transaction.client_name,
                format_money(transaction.amount, currency),
                format_short_date(transaction.payment_date),
            ]
            for index, transaction in enumerate(transactions, start=1)
        ],
        placeholder="No payment transactions found",
        new_page=True,
    )
    if transactions:
        totals = AnalyticsService.transaction_totals(transactions)
        transaction_section.footer = [
            f"Total Transactions: {totals.count}",
            f"Total Amount: {format_money(totals.total_amount, currency)}",
        ]

    return ReportDocument(
        title=settings.report_title,
        generated_line=f"Generated on {format_long_date(generated_at)}",
        user_line=f"User: {user_email or settings.report_fallback_user}",
        filename=report_filename(generated_at),
        sections=[summary, adjustment_section, client_section, transaction_section],
    )


def _table_style(section: ReportSection) -> TableStyle:
    commands = [
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_FILL),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, 0), 10),
        ("FONTSIZE", (0, 1), (-1, -1), 9),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]
    if section.grid:
        commands += [
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ("FONTNAME", (0, 1), (0, -1), "Helvetica-Bold"),
            ("ALIGN", (1, 1), (1, -1), "RIGHT"),
        ]
    else:
        commands += [
            ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.whitesmoke]),
            ("ALIGN", (0, 0), (0, -1), "CENTER"),
        ]
    return TableStyle(commands)


def render_pdf(document: ReportDocument) -> bytes:
    """Render the report model to PDF bytes (A4)."""
    buffer = BytesIO()
    pdf = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=14 * mm,
        rightMargin=14 * mm,
        topMargin=20 * mm,
        bottomMargin=20 * mm,
        title=document.title,
        invariant=True,
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle("ReportTitle", parent=styles["Title"], fontSize=20, alignment=TA_CENTER)
    meta_style = ParagraphStyle("ReportMeta", parent=styles["Normal"], fontSize=10, alignment=TA_CENTER)
    heading_style = ParagraphStyle("SectionHeading", parent=styles["Heading2"], fontSize=14)
    placeholder_style = ParagraphStyle("Placeholder", parent=styles["Italic"], fontSize=10)
    footer_style = ParagraphStyle("Footer", parent=styles["Normal"], fontName="Helvetica-Bold", fontSize=12)

    story = [
        Paragraph(escape(document.title), title_style),
        Paragraph(escape(document.generated_line), meta_style),
        Paragraph(escape(document.user_line), meta_style),
        Spacer(1, 10 * mm),
    ]

    for section in document.sections:
        if section.new_page:
            story.append(PageBreak())
        if section.title:
            story.append(Paragraph(escape(section.title), heading_style))

        if section.is_empty:
            story.append(Paragraph(escape(section.placeholder), placeholder_style))
        else:
            table = Table([section.headers] + section.rows, repeatRows=1, hAlign="LEFT")
            table.setStyle(_table_style(section))
            story.append(table)

        for line in section.footer:
            story.append(Spacer(1, 3 * mm))
            story.append(Paragraph(escape(line), footer_style))
        story.append(Spacer(1, 6 * mm))

    pdf.build(story)
    return buffer.getvalue()
