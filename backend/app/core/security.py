"""
app/core/security.py - Authenticated-user dependencies.

`get_current_user` resolves the verified Principal (see app/core/auth.py) into the
Firestore profile stored at `users/{uid}`. The first time a uid is seen, the profile is
created together with the user's empty cart (`carts/{uid}`) and empty sales ledger
(`orders/{uid}`); this is the account's sign-up.

Returned value example:
```json
{
  "id": "firebase_uid",
  "name": "Jane Doe",
  "email": "jane@example.com",
  "role": "customer",
  "is_guest": false
}
```
"""
import logging
from typing import Dict

from fastapi import Depends, HTTPException, status
from google.cloud.firestore_v1 import SERVER_TIMESTAMP

from app.config import CARTS, ORDERS, USERS, get_db
from app.core.auth import get_principal
from app.schemas.principal import Principal

logger = logging.getLogger("shop.security")


def _provision_account(db, principal: Principal) -> Dict:
    user_data = {
        "name": principal.display_name or "",
        "email": principal.email or "",
        "role": "admin" if principal.role == "admin" else "customer",
        "is_guest": principal.role == "guest",
        "created_at": SERVER_TIMESTAMP,
    }
    batch = db.batch()
    batch.set(db.collection(USERS).document(principal.uid), user_data)

    cart_ref = db.collection(CARTS).document(principal.uid)
    if not cart_ref.get().exists:
        batch.set(cart_ref, {"owner_id": principal.uid, "products": []})

    ledger_ref = db.collection(ORDERS).document(principal.uid)
    if not ledger_ref.get().exists:
        batch.set(ledger_ref, {"owner_id": principal.uid, "products": []})

    batch.commit()
    logger.info("Provisioned account %s", principal.uid)
    return {k: v for k, v in user_data.items() if k != "created_at"}


def get_current_user(
    principal: Principal = Depends(get_principal),
    db=Depends(get_db),
) -> Dict:
    """
    Return the caller's profile, creating it (with cart and ledger) when missing.
    """
    doc = db.collection(USERS).document(principal.uid).get()
    if not doc.exists:
        user = _provision_account(db, principal)
    else:
        user = doc.to_dict() or {}
    user["id"] = principal.uid
    return user


def require_non_guest(current_user: Dict = Depends(get_current_user)) -> Dict:
    """
    Reject guest (anonymous) users with 403.
    Used on endpoints that sell inventory.
    """
    if current_user.get("is_guest"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Guest users are not allowed for this action."
        )
    return current_user
