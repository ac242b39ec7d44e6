from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from autosales.api.deps import admin_only, get_current_user, get_db
from autosales.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
    UserRead,
)
from autosales.schemas.common import ListResponse
from autosales.services import auth as auth_service

router = APIRouter(prefix="/auth", tags=["auth"])
admin_router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    return auth_service.auth.login(db, payload)


@router.post(
    "/register",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(admin_only)],
)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    return auth_service.auth.register(db, payload)


@router.post("/change-password", status_code=status.HTTP_204_NO_CONTENT)
def change_password(
    payload: ChangePasswordRequest,
    current=Depends(get_current_user),
    db: Session = Depends(get_db),
):
    auth_service.auth.change_password(db, current["user_id"], payload)


@router.post(
    "/reset-password/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(admin_only)],
)
def reset_password(user_id: str, payload: ResetPasswordRequest, db: Session = Depends(get_db)):
    auth_service.auth.reset_password(db, user_id, payload)


@router.get("/me", response_model=UserRead)
def me(current=Depends(get_current_user), db: Session = Depends(get_db)):
    return auth_service.users.get(db, current["user_id"])


@admin_router.get(
    "/users",
    response_model=ListResponse[UserRead],
    dependencies=[Depends(admin_only)],
)
def list_users(
    is_active: bool | None = None,
    order_by: str = Query(default="created_at"),
    order_dir: str = Query(default="desc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return auth_service.users.list_response(db, is_active, order_by, order_dir, limit, offset)


@admin_router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def deactivate_user(
    user_id: str,
    current=Depends(admin_only),
    db: Session = Depends(get_db),
):
    auth_service.users.deactivate(db, user_id, current["user_id"])
