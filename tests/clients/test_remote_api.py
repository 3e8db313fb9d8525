from unittest.mock import MagicMock

import pytest
import requests

from jewel_ledger.clients.remote_api import RemoteApi
from jewel_ledger.core.exceptions import ApiError
from jewel_ledger.core.session import ShopSession


def _response(status_code=200, body=None, text=""):
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.ok = status_code < 400
    response.content = b"{}" if body is not None else text.encode()
    response.text = text
    if body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def http():
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    return session


@pytest.fixture
def api(http):
    return RemoteApi(ShopSession("tok"), base_url="http://shop.test/", timeout=5, http=http)


def test_request_sends_token_and_drops_empty_params(api, http):
    http.request.return_value = _response(body={"ledgers": [{"_id": "L1"}]})

    ledgers = api.ledger.get_all({"search": "", "type": None, "page": 1})

    assert ledgers == [{"_id": "L1"}]
    http.request.assert_called_once_with(
        "GET",
        "http://shop.test/api/ledger",
        params={"page": 1},
        json=None,
        headers={"Authorization": "Bearer tok"},
        timeout=5,
    )
    assert http.headers["Content-Type"] == "application/json"


def test_transactions_use_date_params(api, http):
    http.request.return_value = _response(body={"transactions": []})

    api.ledger.get_transactions("L1", "2024-03-01", None)

    assert http.request.call_args.kwargs["params"] == {"startDate": "2024-03-01"}


def test_unauthorized_clears_session(api, http):
    http.request.return_value = _response(401, body={"message": "jwt expired"})

    with pytest.raises(ApiError) as exc_info:
        api.voucher.get_all()

    assert exc_info.value.status_code == 401
    assert api.session.token is None
    assert not api.session.is_authenticated


def test_failed_login_keeps_session_state(http):
    session = ShopSession()
    api = RemoteApi(session, base_url="http://shop.test", http=http)
    http.request.return_value = _response(401, body={"message": "Invalid credentials"})

    with pytest.raises(ApiError) as exc_info:
        api.auth.login({"phoneNumber": "1", "password": "x"})

    assert exc_info.value.message == "Invalid credentials"
    assert exc_info.value.status_code == 401


def test_login_populates_session(http):
    session = ShopSession()
    api = RemoteApi(session, base_url="http://shop.test", http=http)
    http.request.return_value = _response(body={"token": "new", "user": {"shopName": "S"}})

    api.auth.login({"phoneNumber": "1", "password": "x"})

    assert session.token == "new"
    assert session.shop_name == "S"


def test_error_message_from_body(api, http):
    http.request.return_value = _response(500, text="Internal error")

    with pytest.raises(ApiError) as exc_info:
        api.ledger.recalculate_balance("L1")

    assert exc_info.value.message == "Internal error"
    assert exc_info.value.status_code == 500


def test_transport_error(api, http):
    http.request.side_effect = requests.exceptions.ConnectionError("refused")

    with pytest.raises(ApiError) as exc_info:
        api.ledger.get_one("L1")

    assert exc_info.value.status_code == 503


def test_empty_body(api, http):
    http.request.return_value = _response(body=None, text="")

    assert api.voucher.delete("V1") == {}
