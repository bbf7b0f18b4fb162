"""
Identity provider adapter: bearer JWT issued by the external auth service
(HS256 shared secret, claims "sub" and "email"). Accounts are created on the
first authenticated request.
"""
import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from streamgate.core.config import settings
from streamgate.core.errors import AdminRequiredError
from streamgate.db.session import get_db
from streamgate.models.account import Account
from streamgate.services.accounts.service import AccountService

logger = logging.getLogger("auth")

bearer_scheme = HTTPBearer(auto_error=False)


def verify_token(token: str) -> dict | None:
    """Decode and verify token. Returns claims or None if invalid/expired."""
    options = {"verify_aud": settings.identity_jwt_audience is not None}
    try:
        claims = jwt.decode(
            token,
            settings.identity_jwt_secret,
            algorithms=[settings.identity_jwt_algorithm],
            audience=settings.identity_jwt_audience,
            options=options,
        )
    except JWTError as e:
        logger.info("identity_token_rejected", extra={"error": str(e)})
        return None
    if not claims.get("sub"):
        return None
    return claims


def get_current_account(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Account | None:
    """Viewer for the request, or None (anonymous or bad token)."""
    if credentials is None:
        return None
    claims = verify_token(credentials.credentials)
    if claims is None:
        return None
    return AccountService(db).get_or_create(claims["sub"], claims.get("email"))


def require_account(account: Account | None = Depends(get_current_account)) -> Account:
    if account is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return account


def require_admin(account: Account = Depends(require_account)) -> Account:
    if not account.is_admin:
        raise AdminRequiredError(account.id)
    return account
