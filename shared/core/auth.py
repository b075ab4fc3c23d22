from datetime import datetime, timedelta, timezone
import secrets
from typing import Optional
from uuid import UUID
from fastapi import HTTPException, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from shared.models.refresh_token import RefreshToken
from shared.models.user_login_session import UserLoginSession
from shared.models.users import Users
from shared.utils.app_status_code import AppStatusCode
from shared.utils.enums import UserRole
from shared.core.config import settings
from shared.helpers.json_response_helper import error_response
from shared.core.schemas import UserToken
from shared.core.database import get_db

security = HTTPBearer()

ROLE_ADMIN = UserRole.ADMIN.value
ROLE_MANAGER = UserRole.MANAGER.value
ROLE_WORKER = UserRole.WORKER.value
ROLE_VIEWER = UserRole.VIEWER.value


def create_access_token(data: dict):
    payload = data.copy()
    expires = datetime.now(timezone.utc) + \
        timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload['exp'] = expires

    if 'name' not in payload and 'full_name' in payload:
        payload['name'] = payload['full_name']

    token = jwt.encode(payload, settings.JWT_SECRET,
                       algorithm=settings.JWT_ALGORITHM)
    return token


def build_token_payload(user: Users, session: UserLoginSession) -> dict:
    return {
        "user_id": str(user.id),
        "session_id": str(session.id),
        "name": user.full_name,
        "email": user.email,
        "role": user.role,
        "warehouse_id": str(user.warehouse_id) if user.warehouse_id else None,
    }


def create_refresh_token(db: Session, session_id):
    session = db.query(UserLoginSession).filter(
        UserLoginSession.id == session_id).first()

    if not session:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Login session not found."
        )

    token_str = secrets.token_urlsafe(64)
    expires = datetime.now(timezone.utc) + \
        timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS)

    refresh = RefreshToken(
        session_id=session.id,
        token=token_str,
        expires_at=expires
    )
    db.add(refresh)
    db.flush()

    return refresh


def verify_token(db: Session, token: str) -> Optional[UserToken]:
    """Verify and decode a JWT token."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET,
                             algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return error_response(
            message="Invalid or expired token",
            status_code=str(AppStatusCode.AUTHENTICATION_TOKEN_EXPIRED),
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    if not payload.get("user_id") or not payload.get("session_id") or not payload.get("role"):
        return error_response(
            message="Invalid token structure",
            status_code=str(AppStatusCode.AUTHENTICATION_TOKEN_INVALID),
            http_status=status.HTTP_401_UNAUTHORIZED
        )
    user = UserToken(**payload)

    session = db.query(UserLoginSession).filter(
        UserLoginSession.id == parse_uuid(user.session_id),
        UserLoginSession.user_id == parse_uuid(user.user_id)
    ).first()

    if not session or not session.is_active:
        return error_response(
            message="Session has been logged out or is inactive",
            status_code=str(AppStatusCode.AUTHENTICATION_SESSION_TIMEOUT),
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    return user


def parse_uuid(value: str):
    try:
        return UUID(str(value))
    except ValueError:
        return error_response(
            message="Invalid token structure",
            status_code=str(AppStatusCode.AUTHENTICATION_TOKEN_INVALID),
            http_status=status.HTTP_401_UNAUTHORIZED
        )


def validate_current_token(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
):
    token = credentials.credentials
    user_data = verify_token(db, token)

    user = db.query(Users).filter(
        Users.id == parse_uuid(user_data.user_id),
        Users.is_deleted == False).first()

    if not user:
        return error_response(
            message="User not found",
            status_code=str(AppStatusCode.AUTHENTICATION_USER_INVALID),
            http_status=404
        )

    if user.status.lower() != "active":
        return error_response(
            message="User is not active. Access denied",
            status_code=str(AppStatusCode.AUTHENTICATION_USER_INACTIVE),
            http_status=403
        )

    # role changes apply without waiting for a new token
    user_data.role = user.role
    user_data.status = user.status
    return user_data


def allow_roles(*roles: str):
    allowed = {r.lower() for r in roles}

    def checker(current_user: UserToken = Depends(validate_current_token)):
        if current_user.role.lower() not in allowed:
            return error_response(
                message=f"Access forbidden: requires {' or '.join(sorted(allowed))} role",
                status_code=str(
                    AppStatusCode.AUTHENTICATION_UNAUTHORIZED_ACCESS),
                http_status=403
            )
        return current_user

    return checker


def allow_admin(current_user: UserToken = Depends(validate_current_token)):
    if current_user.role.lower() != ROLE_ADMIN:
        return error_response(
            message="Access forbidden: Admins only",
            status_code=str(AppStatusCode.AUTHENTICATION_UNAUTHORIZED_ACCESS),
            http_status=403
        )

    return current_user


allow_manager = allow_roles(ROLE_ADMIN, ROLE_MANAGER)
allow_editor = allow_roles(ROLE_ADMIN, ROLE_MANAGER, ROLE_WORKER)
