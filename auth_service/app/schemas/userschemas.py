from pydantic import BaseModel, EmailStr, Field
from typing import List, Literal, Optional
from uuid import UUID
from datetime import datetime

from shared.core.schemas import CommonQueryParams
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

RoleName = Literal["admin", "manager", "worker", "viewer"]
UserStatus = Literal["active", "inactive"]


class UserOut(EmptyStringModel):
    id: UUID
    full_name: str
    email: str
    phone: Optional[str] = None
    role: str
    warehouse_id: Optional[UUID] = None
    status: str
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserCreate(BaseModel):
    full_name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(min_length=8)
    phone: Optional[str] = None
    role: RoleName = "worker"
    warehouse_id: Optional[UUID] = None


class UserUpdate(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[RoleName] = None
    warehouse_id: Optional[UUID] = None
    status: Optional[UserStatus] = None


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None


class PasswordReset(BaseModel):
    new_password: str = Field(min_length=8)


class UserRequest(CommonQueryParams):
    role: Optional[str] = None
    status: Optional[str] = None


class UserListResponse(BaseModel):
    users: List[UserOut]
    total: int
