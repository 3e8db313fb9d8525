import csv
import io
from datetime import date, datetime
from unittest.mock import patch

import pytest

from jewel_ledger.core.exceptions import NothingToExportError, PdfRenderError
from jewel_ledger.models.ledger import Ledger
from jewel_ledger.models.transaction import parse_transactions
from jewel_ledger.services.export_service import CSV_HEADERS, ExportService, ShopInfo, running_balance_text
from jewel_ledger.utils.share import export_filename

SHOP = ShopInfo(shop_name="Lakshmi Jewellers", phone_number="0801234567")
NOW = datetime(2024, 3, 15, 18, 30, 0)


@pytest.fixture
def ledger(ledger_doc):
    return Ledger.model_validate(ledger_doc)


@pytest.fixture
def transactions(transaction_docs):
    return parse_transactions(transaction_docs)


def _csv_rows(text):
    return list(csv.reader(io.StringIO(text[1:])))


def test_csv_starts_with_bom_and_quotes_every_cell(ledger, transactions):
    text = ExportService.build_csv(ledger, transactions, SHOP, now=NOW)

    assert text.startswith("\ufeff")
    assert '"Date","Type","Bill No"' in text
    assert '"Lakshmi Jewellers - CUSTOMER LEDGER STATEMENT"' in text
    assert '"Exported: 15/03/2024 18:30:00"' in text
    assert '"Cash Balance: Rs 1300.00"' in text


def test_csv_rows_grouped_by_voucher(ledger, transactions):
    rows = _csv_rows(ExportService.build_csv(ledger, transactions, SHOP, now=NOW))
    start = rows.index(CSV_HEADERS) + 1
    data = rows[start:start + 5]

    purchase, chain, ring, settlement_voucher, settlement = data
    assert purchase[:6] == ["01-03-2024", "Purchase", "P-7", "cash", "Old Bangle", "gold"]
    assert purchase[10] == "0.500"
    assert purchase[15:17] == ["3000.00", "3000.00"]

    assert chain[:5] == ["05-03-2024", "Sale", "V-101", "credit", "Chain"]
    assert chain[11] == "6000.00"
    assert chain[15] == "1000.00"
    # Voucher-level cells only on the first row of the group
    assert ring[:4] == ["", "", "", ""]
    assert ring[4] == "Ring"
    assert ring[13] == "200.00"
    assert ring[14:18] == ["", "", "", ""]

    assert settlement_voucher[:4] == ["10-03-2024", "Settlement", "SET-SETV00", "money_to_gold"]
    assert settlement_voucher[4:14] == [""] * 10
    assert settlement_voucher[16] == "1200.00"

    assert settlement[:3] == ["12-03-2024", "Settlement", "SET-ABCDEF"]
    assert settlement[15] == "3000.00"


def test_csv_summary_counts(ledger, transactions):
    rows = _csv_rows(ExportService.build_csv(ledger, transactions, SHOP, now=NOW))

    assert rows[-4:] == [
        ["Total Transactions: 4"],
        ["Sales: 1"],
        ["Purchases: 1"],
        ["Settlements: 2"],
    ]


def test_csv_respects_window(ledger, transactions):
    rows = _csv_rows(
        ExportService.build_csv(ledger, transactions, SHOP, date(2024, 3, 5), date(2024, 3, 5), now=NOW)
    )

    assert ["Period: 2024-03-05 to 2024-03-05"] in rows
    assert ["Total Transactions: 1"] in rows


def test_empty_window_produces_no_file(ledger, transactions):
    with patch("jewel_ledger.services.export_service.SimpleDocTemplate") as mock_doc:
        with pytest.raises(NothingToExportError):
            ExportService.build_csv(ledger, transactions, SHOP, date(2025, 1, 1), date(2025, 1, 31))
        with pytest.raises(NothingToExportError):
            ExportService.build_pdf(ledger, transactions, SHOP, date(2025, 1, 1), date(2025, 1, 31))
        mock_doc.assert_not_called()


def test_pdf_renders(ledger, transactions):
    content = ExportService.build_pdf(ledger, transactions, SHOP, now=NOW)

    assert content.startswith(b"%PDF")


def test_pdf_failure_closes_buffer(ledger, transactions):
    with patch("jewel_ledger.services.export_service.SimpleDocTemplate") as mock_doc:
        mock_doc.return_value.build.side_effect = ValueError("layout error")

        with pytest.raises(PdfRenderError):
            ExportService.build_pdf(ledger, transactions, SHOP, now=NOW)

        buffer = mock_doc.call_args[0][0]
        assert buffer.closed


def test_running_balance_text():
    assert running_balance_text(1000, 0, 0) == "Rs 1000"
    assert running_balance_text(-800, 3.3, 0) == "Rs -800 | G:3.300g"
    assert running_balance_text(0, 0, 12.5) == "Rs 0 | S:12.500g"


def test_export_filenames():
    assert export_filename("Ledger", "Ravi  Kumar", "csv", date(2024, 3, 15)) == "Ledger_Ravi_Kumar_2024-03-15.csv"
    assert export_filename("Statement", None, "pdf", date(2024, 3, 15)) == "Statement_Customer_2024-03-15.pdf"


def test_csv_bill_total_of_voucher_without_total():
    voucher = parse_transactions(
        [{"_id": "v9", "date": "2024-03-06T10:00:00", "stoneAmount": 10, "items": [{"amount": 100}, {"amount": 50}]}]
    )[0]

    first, second = ExportService.csv_rows_for(voucher)

    assert first[15] == "160.00"
    assert second[15] == ""
