from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from jewel_ledger.core.session import ShopSession
from jewel_ledger.clients.remote_api import RemoteApi

security = HTTPBearer()


def get_session(credentials: HTTPAuthorizationCredentials = Depends(security)) -> ShopSession:
    """Build the session for this request from the bearer token."""
    session = ShopSession(token=credentials.credentials)
    if session.is_expired():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired"
        )
    return session


def get_remote_api(session: ShopSession = Depends(get_session)):
    api = RemoteApi(session)
    try:
        yield api
    finally:
        api.close()
