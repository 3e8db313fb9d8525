def test_cash_in_hand(client, mock_api):
    mock_api.ledger.get_all.return_value = [{"_id": "L1", "name": "A", "balances": {"cashBalance": 100}}]
    mock_api.voucher.get_all.return_value = [{"_id": "v1", "items": [{"amount": 1000}], "cashReceived": 200}]
    mock_api.expense.get_all.return_value = [{"_id": "e1", "amount": 50, "paymentMethod": "cash"}]

    response = client.get("/api/v1/reports/cash-in-hand")

    assert response.status_code == 200
    assert response.json()["cash_in_hand"] == 650


def test_period_summary(client, mock_api):
    mock_api.report.get_vouchers.return_value = [
        {"_id": "v1", "date": "2024-03-04T10:00:00", "ledgerId": "L1", "paymentType": "cash", "total": 1000}
    ]
    mock_api.report.get_expenses.return_value = []
    mock_api.report.get_ledgers.return_value = []

    response = client.get(
        "/api/v1/reports/summary", params={"start_date": "2024-03-01", "end_date": "2024-03-31"}
    )

    assert response.status_code == 200
    assert response.json()["total_sales"] == 1000
    mock_api.report.get_vouchers.assert_called_once_with(
        {"limit": 2000, "dateFrom": "2024-03-01", "dateTo": "2024-03-31"}
    )
    mock_api.report.get_expenses.assert_called_once_with({"limit": 2000})
    mock_api.report.get_ledgers.assert_called_once_with({"limit": 2000})
