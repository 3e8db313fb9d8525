from fastapi.testclient import TestClient

from jewel_ledger.main import app


def test_calculate_from_fine():
    response = TestClient(app).post(
        "/api/v1/settlements/calculate",
        json={"metal_rate": 5000, "fine_given": 2, "calculation_source": "fine"},
    )

    assert response.status_code == 200
    assert response.json()["amount"] == 10000


def test_calculate_from_amount_without_rate():
    response = TestClient(app).post(
        "/api/v1/settlements/calculate",
        json={"metal_rate": 0, "fine_given": 2.4, "amount": 12000, "calculation_source": "amount"},
    )

    assert response.json()["fine_given"] == 2.4


def test_create_settlement(client, mock_api, ledger_doc, transaction_docs):
    mock_api.ledger.get_one.return_value = ledger_doc
    mock_api.ledger.get_transactions.return_value = {"ledger": ledger_doc, "transactions": transaction_docs}

    response = client.post(
        "/api/v1/settlements",
        json={
            "ledger_id": ledger_doc["_id"],
            "metal_type": "gold",
            "metal_rate": 6000,
            "amount": 6000,
            "calculation_source": "amount",
        },
    )

    assert response.status_code == 201
    payload = mock_api.settlement.create.call_args[0][0]
    assert payload["fineGiven"] == 1
    assert payload["amount"] == 6000


def test_create_settlement_validation(client, mock_api, ledger_doc):
    mock_api.ledger.get_one.return_value = ledger_doc

    response = client.post(
        "/api/v1/settlements",
        json={"ledger_id": ledger_doc["_id"], "metal_type": "gold", "metal_rate": 6000},
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_SETTLEMENT_INVALID"
