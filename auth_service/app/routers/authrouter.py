from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from shared.core import auth
from shared.core.database import get_db
from shared.core.schemas import UserToken
from ..schemas import authschemas
from ..schemas.userschemas import ProfileUpdate, UserOut
from ..services import authservices

router = APIRouter(prefix="/api/auth", tags=["RackTrack Auth"])


@router.post("/login", response_model=authschemas.AuthenticationResponse)
def login(
        req: authschemas.LoginRequest,
        request: Request,
        db: Session = Depends(get_db)):
    return authservices.login(request, db, req)


@router.post("/refresh", response_model=authschemas.TokenSuccessResponse)
def refresh_token(
        refresh_token: str,
        db: Session = Depends(get_db)):
    return authservices.refresh_access_token(db, refresh_token)


@router.post("/logout")
def logout(
        refresh_token_str: str,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(auth.validate_current_token)):
    return authservices.logout_user(db, current_user.user_id, refresh_token_str)


@router.get("/me", response_model=UserOut)
def me(
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(auth.validate_current_token)):
    return authservices.get_me(db, current_user)


@router.put("/me", response_model=UserOut)
def update_me(
        data: ProfileUpdate,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(auth.validate_current_token)):
    return authservices.update_me(db, current_user, data)


@router.post("/change-password")
def change_password(
        req: authschemas.ChangePasswordRequest,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(auth.validate_current_token)):
    return authservices.change_password(db, current_user, req)
