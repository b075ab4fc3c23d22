from datetime import datetime, timezone
from fastapi import Request, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from shared.core import auth
from shared.core.schemas import UserToken
from shared.helpers.datetime_helper import as_utc
from shared.helpers.json_response_helper import error_response
from shared.models.refresh_token import RefreshToken
from shared.models.user_login_session import UserLoginSession
from shared.models.users import Users
from shared.utils.app_status_code import AppStatusCode
from shared.utils.logger import get_logger

from ..schemas import authschemas
from ..schemas.userschemas import ProfileUpdate, UserOut

logger = get_logger(__name__)


def _issue_tokens(db: Session, user: Users, session: UserLoginSession) -> dict:
    access_token = auth.create_access_token(
        auth.build_token_payload(user, session))
    refresh = auth.create_refresh_token(db, session.id)
    return {
        "access_token": access_token,
        "refresh_token": refresh.token,
        "token_type": "bearer",
    }


def login(request: Request, db: Session, req: authschemas.LoginRequest):
    user = db.query(Users).filter(
        func.lower(Users.email) == req.email.lower(),
        Users.is_deleted == False
    ).first()

    if not user or not user.verify_password(req.password):
        logger.warning("Failed login attempt for %s", req.email)
        return error_response(
            message="Invalid email or password",
            status_code=str(AppStatusCode.AUTHENTICATION_CREDENTIALS_INVALID),
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    if user.status.lower() != "active":
        return error_response(
            message="User is not active. Access denied",
            status_code=str(AppStatusCode.AUTHENTICATION_USER_INACTIVE),
            http_status=status.HTTP_403_FORBIDDEN
        )

    session = UserLoginSession(
        user_id=user.id,
        ip_address=request.client.host if request.client else None,
        user_agent=(request.headers.get("user-agent") or "")[:255] or None,
    )
    db.add(session)
    db.flush()

    tokens = _issue_tokens(db, user, session)
    user.last_login_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)

    return {**tokens, "user": UserOut.model_validate(user)}


def refresh_access_token(db: Session, refresh_token_str: str):
    token = (
        db.query(RefreshToken)
        .filter(RefreshToken.token == refresh_token_str, RefreshToken.revoked == False)
        .first()
    )

    if not token:
        return error_response(
            message="Invalid refresh token",
            status_code=str(AppStatusCode.AUTHENTICATION_TOKEN_INVALID),
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    if as_utc(token.expires_at) < datetime.now(timezone.utc):
        token.revoked = True
        db.commit()
        return error_response(
            message="Refresh token expired",
            status_code=str(AppStatusCode.AUTHENTICATION_TOKEN_EXPIRED),
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    session = token.session
    if not session or not session.is_active:
        return error_response(
            message="Session has been logged out or is inactive",
            status_code=str(AppStatusCode.AUTHENTICATION_SESSION_TIMEOUT),
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    user = db.query(Users).filter(Users.id == session.user_id,
                                  Users.is_deleted == False).first()
    if not user:
        return error_response(
            message="User not found",
            status_code=str(AppStatusCode.AUTHENTICATION_USER_INVALID),
            http_status=status.HTTP_404_NOT_FOUND
        )

    # Invalidate old refresh token
    token.revoked = True
    tokens = _issue_tokens(db, user, session)
    db.commit()

    return tokens


def logout_user(db: Session, user_id: str, refresh_token_str: str):
    token = (
        db.query(RefreshToken)
        .join(UserLoginSession)
        .filter(
            UserLoginSession.user_id == auth.parse_uuid(user_id),
            RefreshToken.token == refresh_token_str,
            RefreshToken.revoked == False
        )
        .first()
    )

    if not token:
        return error_response(
            message="Active session or refresh token not found.",
            status_code=str(AppStatusCode.AUTHENTICATION_TOKEN_INVALID),
            http_status=status.HTTP_404_NOT_FOUND
        )

    token.revoked = True
    token.session.is_active = False
    token.session.logged_out_at = datetime.now(timezone.utc)
    db.commit()

    return {"message": "Logged out successfully"}


def _get_user(db: Session, current_user: UserToken) -> Users:
    user = db.query(Users).filter(
        Users.id == auth.parse_uuid(current_user.user_id)).first()
    if not user:
        return error_response(
            message="User not found",
            status_code=str(AppStatusCode.AUTHENTICATION_USER_INVALID),
            http_status=status.HTTP_404_NOT_FOUND
        )
    return user


def get_me(db: Session, current_user: UserToken):
    return UserOut.model_validate(_get_user(db, current_user))


def update_me(db: Session, current_user: UserToken, data: ProfileUpdate):
    user = _get_user(db, current_user)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    return UserOut.model_validate(user)


def change_password(db: Session, current_user: UserToken, req: authschemas.ChangePasswordRequest):
    user = _get_user(db, current_user)
    if not user.verify_password(req.current_password):
        return error_response(
            message="Current password is incorrect",
            status_code=str(AppStatusCode.AUTHENTICATION_CREDENTIALS_INVALID),
            http_status=status.HTTP_400_BAD_REQUEST
        )
    user.set_password(req.new_password)
    db.commit()
    return {"message": "Password updated successfully"}
