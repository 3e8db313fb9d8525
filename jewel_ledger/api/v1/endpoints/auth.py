from fastapi import APIRouter, Depends

from jewel_ledger.clients.remote_api import RemoteApi
from jewel_ledger.core.auth import get_session
from jewel_ledger.core.session import ShopSession
from jewel_ledger.schemas.auth import LoginRequest, TokenResponse

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
def login(credentials: LoginRequest):
    """Log in against the shop API and hand its token back"""
    session = ShopSession()
    api = RemoteApi(session)
    try:
        api.auth.login(credentials.model_dump(by_alias=True))
    finally:
        api.close()
    return TokenResponse(access_token=session.token, user=session.user)


@router.post("/logout")
def logout(session: ShopSession = Depends(get_session)):
    """Logout (client should delete token)"""
    session.logout()
    return {"message": "Logged out successfully"}
