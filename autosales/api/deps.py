from fastapi import Depends

from autosales.db import get_db
from autosales.services.auth_dependencies import (
    admin_only,
    admin_or_manager,
    authenticated,
    back_office,
    inventory_or_admin,
    require_any_role,
    require_user_auth,
    sales_team,
    seller_or_admin,
)


def get_current_user(auth=Depends(require_user_auth)):
    """Get current authenticated user info.

    Returns a dict with user_id, username and roles.
    """
    return auth


__all__ = [
    "get_db",
    "get_current_user",
    "require_any_role",
    "require_user_auth",
    # Authorization policies
    "admin_only",
    "admin_or_manager",
    "authenticated",
    "back_office",
    "inventory_or_admin",
    "sales_team",
    "seller_or_admin",
]
