"""
Identity endpoints. Tokens are issued by the external identity provider;
sign-out is stateless (the client drops the bearer token).
"""
from fastapi import APIRouter, Depends

from streamgate.models.account import Account
from streamgate.schemas.accounts import AccountOut
from streamgate.services.auth.jwt import require_account

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/logout")
async def logout(account: Account = Depends(require_account)):
    """Logout (token invalidation handled on client side)."""
    return {"message": "Successfully logged out"}


@router.get("/me", response_model=AccountOut)
def get_me(account: Account = Depends(require_account)) -> AccountOut:
    return AccountOut(id=account.id, email=account.email, is_admin=account.is_admin)
