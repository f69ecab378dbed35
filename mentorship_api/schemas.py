from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field
from .models import MentorshipStatus, Role
from .constants import BusinessRules

# --- Authentication Schemas ---
class UserBase(BaseModel):
    username: str = Field(..., min_length=BusinessRules.MIN_USERNAME_LENGTH, max_length=BusinessRules.MAX_USERNAME_LENGTH)

class UserCreate(UserBase):
    password: str = Field(..., min_length=BusinessRules.MIN_PASSWORD_LENGTH)
    email: Optional[str] = None
    # Self-registration may pick MENTEE and/or MENTOR; ADMIN is granted out of band
    roles: List[Role] = Field(default_factory=lambda: [Role.MENTEE])

class UserResponse(UserBase):
    id: int
    email: Optional[str] = None
    roles: List[Role]
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
        "arbitrary_types_allowed": True
    }

class Token(BaseModel):
    access_token: str
    token_type: str

# --- Input Models ---

class MentorshipApply(BaseModel):
    message: str = Field(..., min_length=1, max_length=BusinessRules.MAX_MESSAGE_LENGTH, description="Why the mentee wants this mentor.")
    background: Optional[str] = Field(None, max_length=BusinessRules.MAX_MESSAGE_LENGTH)
    expectation: Optional[str] = Field(None, max_length=BusinessRules.MAX_MESSAGE_LENGTH)

class MentorshipStatusUpdate(BaseModel):
    status: MentorshipStatus
    reason: Optional[str] = Field(None, description="Only relevant for REJECTED status.")

# --- Output Models ---

class MentorshipRequestResponse(BaseModel):
    id: int
    mentor_id: int
    mentor_name: Optional[str] = None # populated from relationships
    mentee_id: int
    mentee_name: Optional[str] = None # populated from relationships
    status: MentorshipStatus
    reason: Optional[str] = None
    message: Optional[str] = None
    background: Optional[str] = None
    expectation: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    is_mine: Optional[bool] = None

    model_config = {
        "from_attributes": True,
        "arbitrary_types_allowed": True
    }

class MentorshipUpdateResponse(BaseModel):
    success: bool = True
    mentorship: MentorshipRequestResponse
