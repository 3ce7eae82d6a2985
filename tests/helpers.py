"""Constants and helpers shared by the test modules."""

from app.core.security import create_access_token

API = "/api/v1"
ADMIN_EMAIL = "a@x.com"
OTHER_EMAIL = "someone@else.com"


def auth_headers(email: str = ADMIN_EMAIL) -> dict:
    return {"Authorization": f"Bearer {create_access_token(email)}"}
