from pydantic import BaseModel


class AccountOut(BaseModel):
    id: str
    email: str | None = None
    is_admin: bool
