"""User accounts, password handling and access tokens."""

import re
from datetime import UTC, datetime, timedelta

from fastapi import HTTPException
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import func
from sqlalchemy.orm import Session

from autosales.config import settings
from autosales.logging import get_logger
from autosales.models.auth import Role, User, UserRole
from autosales.models.enums import RoleName
from autosales.services.common import apply_ordering, apply_pagination, coerce_uuid
from autosales.services.response import ListResponseMixin

logger = get_logger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

DEFAULT_ROLE = RoleName.vendedor.value

ROLE_DESCRIPTIONS = {
    RoleName.admin.value: "Full access to every resource",
    RoleName.gerente.value: "Sales manager",
    RoleName.vendedor.value: "Salesperson",
    RoleName.asistente.value: "Sales assistant",
    RoleName.inventario.value: "Inventory and catalogue staff",
}

PASSWORD_MIN_LENGTH = 6


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    return pwd_context.verify(password, password_hash)


def validate_password_policy(password: str) -> None:
    problems = []
    if len(password) < PASSWORD_MIN_LENGTH:
        problems.append(f"at least {PASSWORD_MIN_LENGTH} characters")
    if not re.search(r"\d", password):
        problems.append("a digit")
    if not re.search(r"[a-z]", password):
        problems.append("a lowercase letter")
    if not re.search(r"[A-Z]", password):
        problems.append("an uppercase letter")
    if problems:
        raise HTTPException(
            status_code=400,
            detail=f"Password must contain {', '.join(problems)}",
        )


def create_access_token(user: User) -> tuple[str, int]:
    now = datetime.now(UTC)
    expires_in = settings.access_token_minutes * 60
    payload = {
        "sub": str(user.id),
        "username": user.username,
        "roles": user.roles,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=expires_in)).timestamp()),
    }
    token = jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return token, expires_in


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )
    except JWTError as exc:
        raise HTTPException(status_code=401, detail="Unauthorized") from exc


def _get_or_create_role(db: Session, name: str) -> Role:
    role = db.query(Role).filter(Role.name == name).first()
    if role:
        return role
    role = Role(name=name, description=ROLE_DESCRIPTIONS.get(name))
    db.add(role)
    db.flush()
    return role


def _resolve_role_name(role: str | None) -> str:
    name = (role or DEFAULT_ROLE).strip().lower()
    if name not in ROLE_DESCRIPTIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid role. Allowed: {', '.join(ROLE_DESCRIPTIONS)}",
        )
    return name


def create_user(
    db: Session,
    username: str,
    password: str,
    first_name: str,
    last_name: str,
    email: str | None = None,
    role: str | None = None,
) -> User:
    """Create an active user holding a single role.

    Shared by registration, the startup bootstrap and the command line
    script so every path enforces the same uniqueness and password rules.
    """
    role_name = _resolve_role_name(role)
    username = username.strip()
    existing = db.query(User).filter(func.lower(User.username) == username.lower()).first()
    if existing:
        raise HTTPException(status_code=400, detail="Username already exists")
    if email:
        email = email.strip().lower()
        if db.query(User).filter(func.lower(User.email) == email).first():
            raise HTTPException(status_code=400, detail="Email already registered")
    validate_password_policy(password)
    user = User(
        username=username,
        email=email or None,
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        password_hash=hash_password(password),
    )
    db.add(user)
    db.flush()
    db.add(UserRole(user_id=user.id, role_id=_get_or_create_role(db, role_name).id))
    db.commit()
    db.refresh(user)
    logger.info("user_registered user_id=%s username=%s role=%s", user.id, user.username, role_name)
    return user


def seed_roles(db: Session) -> int:
    created = 0
    for name, description in ROLE_DESCRIPTIONS.items():
        if db.query(Role).filter(Role.name == name).first():
            continue
        db.add(Role(name=name, description=description))
        created += 1
    if created:
        db.commit()
        logger.info("roles_seeded created=%s", created)
    return created


def ensure_bootstrap_admin(db: Session) -> User | None:
    username = settings.bootstrap_admin_username
    password = settings.bootstrap_admin_password
    if not username or not password:
        return None
    existing = db.query(User).filter(func.lower(User.username) == username.lower()).first()
    if existing:
        return None
    user = create_user(
        db,
        username=username,
        password=password,
        first_name="System",
        last_name="Administrator",
        email=settings.bootstrap_admin_email,
        role=RoleName.admin.value,
    )
    logger.info("bootstrap_admin_created user_id=%s", user.id)
    return user


class Auth:
    @staticmethod
    def login(db: Session, payload):
        user = db.query(User).filter(func.lower(User.username) == payload.username.strip().lower()).first()
        if not user or not user.is_active or not verify_password(payload.password, user.password_hash):
            logger.warning("login_failed username=%s", payload.username)
            raise HTTPException(status_code=401, detail="Invalid username or password")
        user.last_login_at = datetime.now(UTC)
        db.commit()
        db.refresh(user)
        token, expires_in = create_access_token(user)
        return {
            "access_token": token,
            "token_type": "bearer",
            "expires_in": expires_in,
            "user": user,
        }

    @staticmethod
    def register(db: Session, payload):
        return create_user(
            db,
            username=payload.username,
            password=payload.password,
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=payload.email,
            role=payload.role,
        )

    @staticmethod
    def change_password(db: Session, user_id: str, payload) -> None:
        user = Users.get(db, user_id)
        if not verify_password(payload.current_password, user.password_hash):
            raise HTTPException(status_code=400, detail="Current password is incorrect")
        validate_password_policy(payload.new_password)
        user.password_hash = hash_password(payload.new_password)
        db.commit()
        logger.info("password_changed user_id=%s", user.id)

    @staticmethod
    def reset_password(db: Session, user_id: str, payload) -> None:
        user = Users.get(db, user_id)
        validate_password_policy(payload.new_password)
        user.password_hash = hash_password(payload.new_password)
        db.commit()
        logger.info("password_reset user_id=%s", user.id)


class Users(ListResponseMixin):
    @staticmethod
    def get(db: Session, user_id: str):
        user = db.get(User, coerce_uuid(user_id))
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    @staticmethod
    def list(
        db: Session,
        is_active: bool | None,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ):
        query = db.query(User)
        if is_active is not None:
            query = query.filter(User.is_active.is_(is_active))
        query = apply_ordering(
            query,
            order_by,
            order_dir,
            {
                "created_at": User.created_at,
                "username": User.username,
                "last_name": User.last_name,
            },
        )
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def deactivate(db: Session, user_id: str, acting_user_id: str) -> None:
        user = Users.get(db, user_id)
        if str(user.id) == str(acting_user_id):
            raise HTTPException(status_code=400, detail="You cannot deactivate your own account")
        user.is_active = False
        db.commit()
        logger.info("user_deactivated user_id=%s by=%s", user.id, acting_user_id)


auth = Auth()
users = Users()
