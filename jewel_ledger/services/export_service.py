"""
Ledger exports for the shop's accountant.

CSV and PDF are both built from the windowed, chronologically sorted selection
made by ``StatementService.select``, so an empty window is rejected the same
way for both and neither produces an empty file.
"""

import csv
import io
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from jewel_ledger.core.config import settings
from jewel_ledger.core.exceptions import PdfRenderError
from jewel_ledger.core.logger import logger
from jewel_ledger.models.ledger import Ledger
from jewel_ledger.models.transaction import Transaction, Voucher, bill_number, classify, kind_label
from jewel_ledger.schemas.statement import RunningBalanceRow, Statement
from jewel_ledger.services.balance_service import BalanceService, transaction_total
from jewel_ledger.services.statement_service import StatementService, local_naive
from jewel_ledger.utils.numbers import fmt_fixed, to_finite_number

UTF8_BOM = "\ufeff"

CSV_HEADERS = [
    "Date", "Type", "Bill No", "Payment", "Item Name", "Metal",
    "Pcs", "Gross Wt (g)", "Net Wt (g)", "Melting %", "Fine Wt (g)",
    "Rate (Rs/g)", "Labour (Rs)", "Item Amount (Rs)",
    "Stone Amt (Rs)", "Bill Total (Rs)", "Cash Received (Rs)", "Narration",
]

PDF_HEADERS = [
    "Date", "Type", "Bill #", "Items", "Gold(g)", "Silver(g)",
    "Melt%", "Rate", "Amount", "Cash Rcvd", "Running Bal",
]

BRAND_BLUE = colors.HexColor("#1e3a8a")
LIGHT_BLUE = colors.HexColor("#f0f4ff")
GRID_GREY = colors.HexColor("#e0e0e0")
DEBIT_RED = colors.HexColor("#dc2626")
CREDIT_GREEN = colors.HexColor("#16a34a")
KIND_COLORS = {
    "Settlement": CREDIT_GREEN,
    "Purchase": colors.HexColor("#7c3aed"),
    "GST Sale": colors.HexColor("#ea580c"),
    "Sale": colors.HexColor("#2563eb"),
}


@dataclass
class ShopInfo:
    shop_name: str = settings.DEFAULT_SHOP_NAME
    phone_number: str = ""


def _money(value) -> str:
    return fmt_fixed(value, settings.CURRENCY_DECIMALS)


def _weight(value) -> str:
    return fmt_fixed(value, settings.WEIGHT_DECIMALS)


def _ddmmyyyy(value: Optional[datetime]) -> str:
    value = local_naive(value)
    return value.strftime("%d-%m-%Y") if value else ""


def _ddmmyy(value: Optional[datetime]) -> str:
    value = local_naive(value)
    return value.strftime("%d-%m-%y") if value else "-"


def running_balance_text(cash: float, gold: float, silver: float) -> str:
    """Compact running balance; metal parts appear only when non-zero."""
    text = f"Rs {cash:.0f}"
    if gold != 0:
        text += f" | G:{gold:.3f}g"
    if silver != 0:
        text += f" | S:{silver:.3f}g"
    return text


class ExportService:
    # ---------------------------------------------------------------- CSV

    @staticmethod
    def csv_rows_for(txn: Transaction) -> List[List[str]]:
        """
        One row per voucher item. Date, type, bill no and the other
        voucher-level cells are filled on the first row of the group only.
        """
        kind = classify(txn)
        txn_type = kind_label(txn, kind)
        bill_no = bill_number(txn, kind, default="")
        date_str = _ddmmyyyy(txn.effective_date)
        payment = txn.payment_type or ""
        narration = txn.narration or ""
        total = transaction_total(txn)

        if isinstance(txn, Voucher):
            items = txn.items
            cash_received = to_finite_number(txn.cash_received)
            stone_amount = to_finite_number(txn.stone_amount)
        else:
            items = []
            cash_received = 0.0
            stone_amount = 0.0

        if not items:
            return [[
                date_str, txn_type, bill_no, payment,
                "", "", "", "", "", "", "", "", "", "",
                "", _money(total), _money(cash_received), narration,
            ]]

        rows = []
        for index, item in enumerate(items):
            first = index == 0
            if item.metal_type == "gold":
                rate = _money(txn.gold_rate)
            elif item.metal_type == "silver":
                rate = _money(txn.silver_rate)
            else:
                rate = ""
            pieces = item.pieces
            rows.append([
                date_str if first else "",
                txn_type if first else "",
                bill_no if first else "",
                payment if first else "",
                item.item_name or "",
                item.metal_type or "",
                f"{pieces:g}" if pieces else "",
                _weight(item.gross_weight),
                _weight(item.net_weight),
                fmt_fixed(item.melting, 2),
                _weight(item.fine_weight),
                rate,
                _money(item.labour_rate),
                _money(item.amount),
                _money(stone_amount) if first else "",
                _money(total) if first else "",
                _money(cash_received) if first else "",
                narration if first else "",
            ])
        return rows

    @staticmethod
    def build_csv(
        ledger: Ledger,
        transactions: Sequence[Transaction],
        shop: ShopInfo,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> str:
        """CSV statement text, UTF-8 BOM first so spreadsheets pick the encoding."""
        selected = StatementService.select(transactions, from_date, to_date)
        now = now or datetime.now()
        balance = BalanceService.ledger_balance(ledger)
        counts = BalanceService.count_by_kind(selected)

        meta_rows = [
            [f"{shop.shop_name} - CUSTOMER LEDGER STATEMENT"],
            [f"Customer: {ledger.name or 'Customer'}", f"Phone: {ledger.phone_number or ''}"],
            [f"Ledger Type: {'GST' if ledger.is_gst else 'Regular'}"],
            [f"Period: {from_date.isoformat() if from_date else 'All'} to {to_date.isoformat() if to_date else 'All'}"],
            [f"Exported: {now.strftime('%d/%m/%Y %H:%M:%S')}"],
            [],
            ["--- CURRENT BALANCE ---"],
            [f"Cash Balance: Rs {_money(balance.cash)}"],
            [f"Gold Fine Weight: {_weight(balance.gold)} g"],
            [f"Silver Fine Weight: {_weight(balance.silver)} g"],
            [],
        ]
        data_rows = [row for txn in selected for row in ExportService.csv_rows_for(txn)]
        summary_rows = [
            [],
            ["--- SUMMARY ---"],
            [f"Total Transactions: {counts['total']}"],
            [f"Sales: {counts['sales']}"],
            [f"Purchases: {counts['purchases']}"],
            [f"Settlements: {counts['settlements']}"],
        ]

        output = io.StringIO()
        writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerows(meta_rows)
        writer.writerow(CSV_HEADERS)
        writer.writerows(data_rows)
        writer.writerows(summary_rows)
        return UTF8_BOM + output.getvalue()

    # ---------------------------------------------------------------- PDF

    @staticmethod
    def pdf_row(row: RunningBalanceRow, cell_style: ParagraphStyle, right_style: ParagraphStyle) -> list:
        return [
            _ddmmyy(row.date),
            row.type,
            row.bill_no,
            Paragraph(escape(row.items), cell_style),
            _weight(row.gold_fine) if row.gold_fine else "-",
            _weight(row.silver_fine) if row.silver_fine else "-",
            f"{row.melting:.2f}%" if row.melting is not None else "-",
            f"Rs {row.rate:.0f}" if row.rate else "-",
            _money(row.amount),
            _money(row.cash_received) if row.cash_received else "-",
            Paragraph(escape(running_balance_text(row.run_cash, row.run_gold, row.run_silver)), right_style),
        ]

    @staticmethod
    def build_pdf(
        ledger: Ledger,
        transactions: Sequence[Transaction],
        shop: ShopInfo,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> bytes:
        statement = StatementService.build_statement(ledger, transactions, from_date, to_date)
        story = ExportService._statement_story(statement, ledger, shop, now or datetime.now())

        buffer = io.BytesIO()
        try:
            doc = SimpleDocTemplate(
                buffer,
                pagesize=A4,
                leftMargin=5 * mm,
                rightMargin=5 * mm,
                topMargin=5 * mm,
                bottomMargin=5 * mm,
                title=f"Statement - {statement.customer_name}",
                author=shop.shop_name,
            )
            doc.build(story)
            return buffer.getvalue()
        except Exception as e:
            logger.exception(f"PDF export failed for ledger {ledger.id}")
            raise PdfRenderError() from e
        finally:
            buffer.close()

    @staticmethod
    def _statement_story(statement: Statement, ledger: Ledger, shop: ShopInfo, now: datetime) -> list:
        styles = getSampleStyleSheet()
        small = ParagraphStyle("small", parent=styles["Normal"], fontSize=7, leading=8)
        small_right = ParagraphStyle("small_right", parent=small, alignment=TA_RIGHT, textColor=colors.HexColor("#555555"))
        label = ParagraphStyle("label", parent=styles["Normal"], fontSize=7, textColor=colors.grey)
        value = ParagraphStyle("value", parent=styles["Normal"], fontSize=11, leading=13, fontName="Helvetica-Bold")
        brand = ParagraphStyle("brand", parent=value, fontSize=13, textColor=colors.white)
        brand_sub = ParagraphStyle("brand_sub", parent=label, textColor=colors.white)
        width = A4[0] - 10 * mm

        balance = BalanceService.ledger_balance(ledger)
        rows = statement.rows
        period_from = statement.from_date.strftime("%d-%m-%Y") if statement.from_date else _ddmmyyyy(rows[0].date) or "-"
        period_to = statement.to_date.strftime("%d-%m-%Y") if statement.to_date else _ddmmyyyy(rows[-1].date) or "-"

        header = Table(
            [[
                [Paragraph(escape(settings.BRAND_NAME), brand), Paragraph("JEWELLERY MANAGEMENT SOFTWARE", brand_sub)],
                [Paragraph("Software Support", brand_sub), Paragraph(escape(settings.BRAND_PHONE or "-"), brand_sub)],
            ]],
            colWidths=[width * 0.7, width * 0.3],
        )
        header.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, -1), BRAND_BLUE),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("LEFTPADDING", (0, 0), (-1, -1), 8),
        ]))

        parties = Table(
            [
                [
                    [Paragraph("SHOP NAME", label), Paragraph(escape(shop.shop_name), value)],
                    [Paragraph("SHOP PHONE", label), Paragraph(escape(shop.phone_number or "-"), value)],
                ],
                [
                    [Paragraph("CUSTOMER / SHOP", label), Paragraph(escape(statement.customer_name), value)],
                    [Paragraph("PHONE", label), Paragraph(escape(ledger.phone_number or "-"), value)],
                ],
                [
                    Paragraph("<b>CUSTOMER LEDGER STATEMENT</b>", small),
                    Paragraph(
                        f"Type: <b>{'GST' if ledger.is_gst else 'Regular'}</b> | "
                        f"Period: <b>{period_from}</b> to <b>{period_to}</b>",
                        small_right,
                    ),
                ],
            ],
            colWidths=[width * 0.6, width * 0.4],
        )
        parties.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), LIGHT_BLUE),
            ("BOX", (0, 0), (-1, -1), 0.5, GRID_GREY),
            ("LINEBELOW", (0, 0), (-1, 1), 0.5, GRID_GREY),
        ]))

        cards = Table(
            [
                ["CASH BALANCE", "GOLD FINE", "SILVER FINE"],
                [f"Rs {_money(balance.cash)}", f"{_weight(balance.gold)} g", f"{_weight(balance.silver)} g"],
            ],
            colWidths=[width / 3] * 3,
        )
        cards.setStyle(TableStyle([
            ("ALIGN", (0, 0), (-1, -1), "CENTER"),
            ("FONTSIZE", (0, 0), (-1, 0), 7),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.grey),
            ("FONTNAME", (0, 1), (-1, 1), "Helvetica-Bold"),
            ("FONTSIZE", (0, 1), (-1, 1), 12),
            ("TEXTCOLOR", (0, 1), (0, 1), DEBIT_RED if balance.cash < 0 else CREDIT_GREEN),
            ("TEXTCOLOR", (1, 1), (1, 1), colors.HexColor("#b45309")),
            ("TEXTCOLOR", (2, 1), (2, 1), colors.HexColor("#6b7280")),
            ("BOX", (0, 0), (0, -1), 0.75, GRID_GREY),
            ("BOX", (1, 0), (1, -1), 0.75, GRID_GREY),
            ("BOX", (2, 0), (2, -1), 0.75, GRID_GREY),
        ]))

        closing = statement.closing
        table_rows = [PDF_HEADERS]
        table_rows += [ExportService.pdf_row(row, small, small_right) for row in rows]
        table_rows.append([
            "CLOSING BALANCE:", "", "", "", "", "", "", "",
            f"Rs {_money(closing.cash)}",
            f"Gold: {_weight(closing.gold)}g | Silver: {_weight(closing.silver)}g",
            "",
        ])
        footer_index = len(table_rows) - 1

        transactions_table = Table(
            table_rows,
            colWidths=[w * mm for w in (14, 18, 18, 34, 15, 15, 13, 15, 18, 17, 23)],
            repeatRows=1,
        )
        table_style = [
            ("FONTSIZE", (0, 0), (-1, -1), 7),
            ("BACKGROUND", (0, 0), (-1, 0), BRAND_BLUE),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("GRID", (0, 0), (-1, -1), 0.5, GRID_GREY),
            ("ALIGN", (4, 0), (-1, -1), "RIGHT"),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("FONTNAME", (8, 1), (8, footer_index), "Helvetica-Bold"),
            ("SPAN", (0, footer_index), (7, footer_index)),
            ("SPAN", (9, footer_index), (10, footer_index)),
            ("BACKGROUND", (0, footer_index), (-1, footer_index), LIGHT_BLUE),
            ("FONTNAME", (0, footer_index), (-1, footer_index), "Helvetica-Bold"),
            ("TEXTCOLOR", (8, footer_index), (8, footer_index), DEBIT_RED if closing.cash < 0 else CREDIT_GREEN),
        ]
        for index, row in enumerate(rows, start=1):
            table_style.append(("TEXTCOLOR", (1, index), (1, index), KIND_COLORS.get(row.type, BRAND_BLUE)))
        transactions_table.setStyle(TableStyle(table_style))

        footer = Table(
            [[
                f"{settings.BRAND_NAME} | {settings.BRAND_PHONE or '-'}",
                "Computer-generated statement",
                now.strftime("%d-%b-%Y"),
            ]],
            colWidths=[width / 3] * 3,
        )
        footer.setStyle(TableStyle([
            ("FONTSIZE", (0, 0), (-1, -1), 7),
            ("TEXTCOLOR", (0, 0), (-1, -1), colors.grey),
            ("ALIGN", (1, 0), (1, 0), "CENTER"),
            ("ALIGN", (2, 0), (2, 0), "RIGHT"),
            ("LINEABOVE", (0, 0), (-1, 0), 0.5, GRID_GREY),
        ]))

        return [header, parties, Spacer(1, 4 * mm), cards, Spacer(1, 4 * mm), transactions_table, Spacer(1, 4 * mm), footer]
