"""File names and share-sheet fallbacks for exported documents."""
import re
from datetime import date
from typing import Optional
from urllib.parse import quote

WHATSAPP_SHARE_URL = "https://wa.me/?text="


def whatsapp_share_url(text: str) -> str:
    return WHATSAPP_SHARE_URL + quote(text, safe="")


def voucher_share_text(ledger_name: Optional[str], voucher_number: Optional[str], total: float) -> str:
    return f"Check out this voucher for {ledger_name or 'N/A'}. Voucher #{voucher_number or '-'}. Amount: {total:.2f}"


def settlement_share_text(ledger_name: Optional[str], amount: float) -> str:
    return f"Settlement Receipt for {ledger_name or 'N/A'}. Amount: {amount:.2f}"


def statement_share_text(ledger_name: Optional[str], closing_cash: float) -> str:
    return f"Ledger statement for {ledger_name or 'N/A'}. Closing balance: {closing_cash:.2f}"


def export_filename(prefix: str, customer_name: Optional[str], extension: str, today: Optional[date] = None) -> str:
    """e.g. Statement_Ravi_Kumar_2024-03-01.pdf"""
    today = today or date.today()
    safe_name = re.sub(r"\s+", "_", (customer_name or "Customer").strip())
    return f"{prefix}_{safe_name}_{today.isoformat()}.{extension}"
