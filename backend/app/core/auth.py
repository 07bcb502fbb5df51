# app/core/auth.py
import logging
from typing import Optional

from fastapi import HTTPException, Request, status
from firebase_admin import auth as fb_auth

from app.config import get_firebase_app, settings
from app.schemas.principal import Principal

logger = logging.getLogger("shop.auth")

MOCK_TOKEN_PREFIX = "mock_jwt_token_"


def _extract_bearer_token(request: Request) -> Optional[str]:
    """
    Return the token from an `Authorization: Bearer <id_token>` header, or None.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    parts = auth_header.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def _decode_id_token(id_token: str) -> dict:
    """
    Verify a Firebase ID token.
    Mock tokens are accepted only when ALLOW_MOCK_TOKENS is on (development).
    Invalid, revoked or expired tokens give 401.
    """
    if settings.allow_mock_tokens and id_token.startswith(MOCK_TOKEN_PREFIX):
        return _decode_mock_token(id_token)

    get_firebase_app()
    try:
        return fb_auth.verify_id_token(id_token, check_revoked=True)
    except fb_auth.ExpiredIdTokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired")
    except fb_auth.RevokedIdTokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Session revoked")
    except Exception as exc:
        logger.warning("ID token rejected: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
        )


def _decode_mock_token(mock_token: str) -> dict:
    """
    Decode a mock token.
    Format: mock_jwt_token_<uid>, e.g. mock_jwt_token_anonymous_1234567890
    """
    uid = mock_token[len(MOCK_TOKEN_PREFIX):]
    if not uid:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid mock token format"
        )

    return {
        "uid": uid,
        "user_id": uid,
        "email": None,
        "name": None,
        "firebase": {
            "sign_in_provider": "anonymous" if "anonymous" in uid else "password"
        },
        "admin": False,
    }


def _token_to_principal(decoded: dict) -> Principal:
    """
    Build a Principal from a decoded token.
    - anonymous provider -> role='guest'
    - custom claim admin=True -> role='admin'
    - anything else -> role='user'
    """
    uid = decoded.get("uid") or decoded.get("user_id")
    if not uid:
        raise HTTPException(status_code=401, detail="Token missing uid.")

    firebase_info = decoded.get("firebase") or {}
    provider = firebase_info.get("sign_in_provider")
    is_admin = bool(decoded.get("admin") is True)

    if provider == "anonymous":
        role = "guest"
    elif is_admin:
        role = "admin"
    else:
        role = "user"

    return Principal(
        uid=uid,
        role=role,
        email=decoded.get("email"),
        display_name=decoded.get("name"),
    )

# --------- FastAPI Dependencies --------- #

async def get_principal(request: Request) -> Principal:
    """
    Token required: verify it and return the Principal (guest, user or admin).
    """
    token = _extract_bearer_token(request)
    if not token:
        raise HTTPException(
            status_code=401,
            detail="Missing Authorization header.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    decoded = _decode_id_token(token)
    return _token_to_principal(decoded)
