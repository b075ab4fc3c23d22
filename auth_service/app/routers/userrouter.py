from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.auth import allow_admin
from shared.core.database import get_db
from shared.core.schemas import UserToken
from ..schemas.userschemas import PasswordReset, UserCreate, UserListResponse, UserOut, UserRequest, UserUpdate
from ..services import userservices

router = APIRouter(
    prefix="/api/users",
    tags=["RackTrack Users"],
    dependencies=[Depends(allow_admin)]
)


@router.get("/all", response_model=UserListResponse)
def get_users(
        params: UserRequest = Depends(),
        db: Session = Depends(get_db)):
    return userservices.get_users(db, params)


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: UUID, db: Session = Depends(get_db)):
    return UserOut.model_validate(userservices.get_user_by_id(db, user_id))


@router.post("/", response_model=UserOut)
def create_user(user: UserCreate, db: Session = Depends(get_db)):
    return userservices.create_user(db, user)


@router.put("/{user_id}", response_model=UserOut)
def update_user(user_id: UUID, data: UserUpdate, db: Session = Depends(get_db)):
    return userservices.update_user(db, user_id, data)


@router.delete("/{user_id}")
def delete_user(
        user_id: UUID,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_admin)):
    return userservices.delete_user(db, user_id, current_user.user_id)


@router.post("/{user_id}/reset-password")
def reset_password(user_id: UUID, data: PasswordReset, db: Session = Depends(get_db)):
    return userservices.reset_password(db, user_id, data)
