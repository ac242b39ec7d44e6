from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from autosales.db import get_db as _get_db
from autosales.models.auth import User
from autosales.models.enums import RoleName
from autosales.services.auth import decode_access_token
from autosales.services.common import coerce_uuid


def _extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    parts = authorization.split(" ", 1)
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1].strip()
    return None


def require_user_auth(
    authorization: str | None = Header(default=None),
    db: Session = Depends(_get_db),
):
    token = _extract_bearer_token(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Unauthorized")
    payload = decode_access_token(token)
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    try:
        user = db.get(User, coerce_uuid(user_id))
    except HTTPException as exc:
        raise HTTPException(status_code=401, detail="Unauthorized") from exc
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="Unauthorized")
    # Roles come from the database so revocations apply before the token expires.
    roles = user.roles
    return {
        "user_id": str(user.id),
        "username": user.username,
        "roles": roles,
    }


def require_any_role(*role_names: str):
    allowed = frozenset(role_names)

    def _require_any_role(auth=Depends(require_user_auth)):
        if allowed & set(auth.get("roles") or []):
            return auth
        raise HTTPException(status_code=403, detail="Forbidden")

    return _require_any_role


_ADMIN = RoleName.admin.value
_MANAGER = RoleName.gerente.value
_SELLER = RoleName.vendedor.value
_ASSISTANT = RoleName.asistente.value
_INVENTORY = RoleName.inventario.value

# Named authorization policies used by the routers.
authenticated = require_user_auth
admin_only = require_any_role(_ADMIN)
seller_or_admin = require_any_role(_SELLER, _ADMIN)
admin_or_manager = require_any_role(_ADMIN, _MANAGER)
sales_team = require_any_role(_ADMIN, _MANAGER, _SELLER)
inventory_or_admin = require_any_role(_INVENTORY, _ADMIN)
back_office = require_any_role(_ADMIN, _INVENTORY, _ASSISTANT)
