from fastapi import status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from uuid import UUID

from shared.helpers.json_response_helper import error_response
from shared.models.users import Users
from shared.utils.app_status_code import AppStatusCode

from ..schemas.userschemas import PasswordReset, UserCreate, UserOut, UserRequest, UserUpdate


def build_user_filters(params: UserRequest):
    filters = [Users.is_deleted == False]

    if params.role and params.role.lower() != "all":
        filters.append(Users.role == params.role.lower())

    if params.status and params.status.lower() != "all":
        filters.append(Users.status == params.status.lower())

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(or_(Users.full_name.ilike(search_term),
                           Users.email.ilike(search_term)))

    return filters


def get_users(db: Session, params: UserRequest):
    query = db.query(Users).filter(*build_user_filters(params))
    total = query.count()
    users = (
        query.order_by(Users.created_at.desc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return {"users": [UserOut.model_validate(u) for u in users], "total": total}


def get_user_by_id(db: Session, user_id: UUID) -> Users:
    user = db.query(Users).filter(Users.id == user_id,
                                  Users.is_deleted == False).first()
    if not user:
        return error_response(
            message="User not found",
            status_code=str(AppStatusCode.NOT_FOUND_ERROR),
            http_status=status.HTTP_404_NOT_FOUND
        )
    return user


def create_user(db: Session, user: UserCreate):
    existing = db.query(Users).filter(
        func.lower(Users.email) == user.email.lower(),
        Users.is_deleted == False).first()
    if existing:
        return error_response(
            message=f"Email '{user.email}' is already registered.",
            status_code=str(AppStatusCode.USER_EMAIL_IS_UNIQUE),
            http_status=status.HTTP_400_BAD_REQUEST
        )

    user_instance = Users(
        full_name=user.full_name.strip(),
        email=user.email.lower(),
        phone=user.phone,
        role=user.role,
        warehouse_id=user.warehouse_id,
        status="active",
    )
    user_instance.set_password(user.password)
    db.add(user_instance)
    db.commit()
    db.refresh(user_instance)
    return UserOut.model_validate(user_instance)


def update_user(db: Session, user_id: UUID, data: UserUpdate):
    user = get_user_by_id(db, user_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    return UserOut.model_validate(user)


def delete_user(db: Session, user_id: UUID, current_user_id: str):
    user = get_user_by_id(db, user_id)
    if str(user.id) == str(current_user_id):
        return error_response(
            message="You cannot delete your own account",
            status_code=str(AppStatusCode.DELETE_RESTRICTED),
            http_status=status.HTTP_400_BAD_REQUEST
        )
    user.is_deleted = True
    user.status = "inactive"
    for session in user.login_sessions:
        session.is_active = False
    db.commit()
    return {"message": "User deleted successfully"}


def reset_password(db: Session, user_id: UUID, data: PasswordReset):
    user = get_user_by_id(db, user_id)
    user.set_password(data.new_password)
    db.commit()
    return {"message": "Password reset successfully"}
