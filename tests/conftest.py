from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from jewel_ledger.clients.remote_api import RemoteApi
from jewel_ledger.core.auth import get_remote_api
from jewel_ledger.core.session import ShopSession
from jewel_ledger.main import app

LEDGER_ID = "65f1a2b3c4d5e6f708192a3b"


@pytest.fixture
def ledger_doc():
    """Ledger as the shop API returns it, with the cash/credit split."""
    return {
        "_id": LEDGER_ID,
        "name": "Ravi Kumar",
        "phoneNumber": "9876543210",
        "ledgerType": "regular",
        "balances": {
            "cashBalance": 1500,
            "creditBalance": -200,
            "amount": 999,
            "goldFineWeight": 2.5,
            "silverFineWeight": 0,
        },
        "openingBalance": {"amount": 0, "goldFineWeight": 0, "silverFineWeight": 0},
    }


@pytest.fixture
def transaction_docs():
    """A sale, a purchase, a settlement voucher and a settlement record, out of date order."""
    return [
        {
            "_id": "sale00000000000000000001",
            "type": "voucher",
            "voucherNumber": "V-101",
            "date": "2024-03-05T10:00:00",
            "ledgerId": {"_id": LEDGER_ID, "name": "Ravi Kumar"},
            "paymentType": "credit",
            "items": [
                {"itemName": "Chain", "metalType": "gold", "fineWeight": 2, "melting": 91.6, "amount": 800},
                {"itemName": "Ring", "metalType": "gold", "fineWeight": 1, "melting": 91.6, "amount": 200},
            ],
            "total": 1000,
            "cashReceived": 0,
            "goldRate": 6000,
        },
        {
            "_id": "purch0000000000000000002",
            "type": "voucher",
            "voucherNumber": "P-7",
            "date": "2024-03-01T09:00:00",
            "ledgerId": LEDGER_ID,
            "paymentType": "cash",
            "voucherType": "purchase",
            "items": [{"itemName": "Old Bangle", "metalType": "gold", "fineWeight": 0.5, "amount": 3000}],
            "total": 3000,
            "cashReceived": 3000,
        },
        {
            "_id": "setv00000000000000000003",
            "type": "voucher",
            "voucherNumber": "V-102",
            "date": "2024-03-10T12:00:00",
            "ledgerId": LEDGER_ID,
            "paymentType": "money_to_gold",
            "items": [],
            "total": 0,
            "cashReceived": 1200,
            "goldRate": 6000,
        },
        {
            "_id": "abcdef000000000000000004",
            "type": "settlement",
            "date": "2024-03-12T15:30:00",
            "ledgerId": LEDGER_ID,
            "metalType": "gold",
            "metalRate": 6000,
            "fineGiven": 0.5,
            "amount": 3000,
        },
    ]


@pytest.fixture
def mock_api():
    api = MagicMock(spec=RemoteApi)
    api.session = ShopSession(token="opaque-token", user={"shopName": "Lakshmi Jewellers", "phoneNumber": "0801234567"})
    for group in ("auth", "ledger", "voucher", "settlement", "expense", "report"):
        setattr(api, group, MagicMock())
    return api


@pytest.fixture
def client(mock_api):
    app.dependency_overrides[get_remote_api] = lambda: mock_api
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
