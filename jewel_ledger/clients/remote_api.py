"""
Client for the remote shop REST API.

All persistence lives behind this API; the service only reads snapshots from it
and forwards writes. Calls are grouped the way the API groups its routes.
"""

from typing import Any, Dict, List, Optional

import requests

from jewel_ledger.core.config import settings
from jewel_ledger.core.exceptions import ApiError
from jewel_ledger.core.logger import logger
from jewel_ledger.core.session import ShopSession

LOGIN_PATH = "/api/auth/login"


class RemoteApi:
    def __init__(
        self,
        session: ShopSession,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        http: Optional[requests.Session] = None,
    ):
        self.session = session
        self.base_url = (base_url or settings.LEDGER_API_URL).rstrip("/")
        self.timeout = timeout or settings.REQUEST_TIMEOUT
        self.http = http or requests.Session()
        self.http.headers.update({"Content-Type": "application/json"})

        self.auth = AuthApi(self)
        self.ledger = LedgerApi(self)
        self.voucher = VoucherApi(self)
        self.settlement = SettlementApi(self)
        self.expense = ExpenseApi(self)
        self.report = ReportApi(self)

    def close(self) -> None:
        self.http.close()

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        headers = {}
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"

        # Empty filter values are never sent
        if params:
            params = {key: value for key, value in params.items() if value not in (None, "")}

        url = f"{self.base_url}{path}"
        try:
            response = self.http.request(
                method, url, params=params, json=json, headers=headers, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ApiError(f"Shop API unreachable: {e}", status_code=503) from e

        if response.status_code == 401 and path != LOGIN_PATH:
            # The remote side no longer accepts this token
            self.session.logout()
            raise ApiError("Session expired, please log in again", status_code=401)

        if not response.ok:
            message = _error_message(response)
            logger.warning(f"{method} {path} returned {response.status_code}: {message}")
            raise ApiError(message, status_code=response.status_code)

        if not response.content:
            return {}
        return response.json()


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"Request failed with status {response.status_code}"
    if isinstance(body, dict):
        return body.get("message") or body.get("detail") or f"Request failed with status {response.status_code}"
    return str(body)


class _ApiGroup:
    def __init__(self, api: RemoteApi):
        self.api = api


class AuthApi(_ApiGroup):
    def login(self, credentials: Dict[str, Any]) -> Dict[str, Any]:
        data = self.api.request("POST", LOGIN_PATH, json=credentials)
        token = data.get("token")
        if not token:
            raise ApiError("Login response did not include a token")
        self.api.session.login(token, data.get("user"))
        logger.info("Shop session started")
        return data

    def get_me(self) -> Dict[str, Any]:
        data = self.api.request("GET", "/api/auth/me")
        user = data.get("user", data)
        if self.api.session.token:
            self.api.session.login(self.api.session.token, user)
        return user


class LedgerApi(_ApiGroup):
    def get_all(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        return self.api.request("GET", "/api/ledger", params=params).get("ledgers", [])

    def get_one(self, ledger_id: str) -> Dict[str, Any]:
        data = self.api.request("GET", f"/api/ledger/{ledger_id}")
        return data.get("ledger", data)

    def get_transactions(
        self,
        ledger_id: str,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> Dict[str, Any]:
        return self.api.request(
            "GET",
            f"/api/ledger/{ledger_id}/transactions",
            params={"startDate": start_date, "endDate": end_date},
        )

    def delete_all_vouchers(self, ledger_id: str) -> Dict[str, Any]:
        return self.api.request("DELETE", f"/api/ledger/{ledger_id}/vouchers")

    def recalculate_balance(self, ledger_id: str) -> Dict[str, Any]:
        return self.api.request("POST", f"/api/ledger/{ledger_id}/recalculate-balance")


class VoucherApi(_ApiGroup):
    def get_all(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        return self.api.request("GET", "/api/voucher", params=params).get("vouchers", [])

    def get_one(self, voucher_id: str) -> Dict[str, Any]:
        data = self.api.request("GET", f"/api/voucher/{voucher_id}")
        return data.get("voucher", data)

    def delete(self, voucher_id: str) -> Dict[str, Any]:
        return self.api.request("DELETE", f"/api/voucher/{voucher_id}")


class SettlementApi(_ApiGroup):
    def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.api.request("POST", "/api/settlement", json=payload)

    def delete(self, settlement_id: str) -> Dict[str, Any]:
        return self.api.request("DELETE", f"/api/settlement/{settlement_id}")


class ExpenseApi(_ApiGroup):
    def get_all(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        return self.api.request("GET", "/api/expense", params=params).get("expenses", [])


class ReportApi(_ApiGroup):
    """Reports reuse the list endpoints with a date range."""

    def get_vouchers(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        return self.api.voucher.get_all(params)

    def get_expenses(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        return self.api.expense.get_all(params)

    def get_ledgers(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        return self.api.ledger.get_all(params)
