"""
Pydantic schemas for FastAPI endpoints
"""
from typing import Optional, List, Literal
import base64
from pydantic import BaseModel, EmailStr, Field, ConfigDict

from backend.core.database.models import User
from backend.core.users.service import format_created_at


Role = Literal["admin", "user"]
Status = Literal["active", "inactive"]


class CreateUserRequest(BaseModel):
    """Create user request"""
    email: EmailStr
    role: Role = "user"
    status: Status = "active"


class UpdateUserRequest(BaseModel):
    """Update user request (email and identity fields are not updatable)"""
    role: Optional[Role] = None
    status: Optional[Status] = None


class UserResponse(BaseModel):
    """User with its signed identity, byte fields base64-encoded"""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    role: str
    status: str
    created_at: str = Field(alias="createdAt")
    email_hash: str = Field(alias="emailHash")
    signature: str
    public_key: str = Field(alias="publicKey")

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            role=user.role,
            status=user.status,
            created_at=format_created_at(user.created_at),
            email_hash=base64.b64encode(user.email_hash).decode("ascii"),
            signature=base64.b64encode(user.signature).decode("ascii"),
            public_key=base64.b64encode(user.public_key).decode("ascii"),
        )


class UserEnvelope(BaseModel):
    success: bool = True
    data: UserResponse


class PaginationMeta(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int = Field(alias="totalPages")
    has_next: bool = Field(alias="hasNext")
    has_prev: bool = Field(alias="hasPrev")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        total_pages = (total + limit - 1) // limit
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


class UserListResponse(BaseModel):
    """Paginated user list"""
    success: bool = True
    data: List[UserResponse]
    pagination: PaginationMeta


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class VerificationData(BaseModel):
    id: str
    verified: bool


class VerificationResponse(BaseModel):
    success: bool = True
    data: VerificationData


class DailyCount(BaseModel):
    date: str  # YYYY-MM-DD
    count: int


class StatsPeriod(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start_date: str = Field(alias="startDate")
    end_date: str = Field(alias="endDate")


class StatsMeta(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    days: int
    total_users: int = Field(alias="totalUsers")
    period: StatsPeriod


class UsersPerDayResponse(BaseModel):
    """Users registered per day"""
    success: bool = True
    data: List[DailyCount]
    meta: StatsMeta
