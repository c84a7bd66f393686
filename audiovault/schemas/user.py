# ============================================================================
# FILE: audiovault/schemas/user.py
# ============================================================================
from pydantic import BaseModel, Field

class UserCreate(BaseModel):
    """Schema for admin-driven user creation"""
    username: str = Field(..., min_length=1, max_length=150)
    password: str = Field(..., min_length=1)
    is_admin: bool = False

class UserLogin(BaseModel):
    """Schema for user login"""
    username: str
    password: str

class UserResponse(BaseModel):
    """Schema for user response (credential hash is never exposed)"""
    id: str
    username: str
    is_admin: bool

    class Config:
        from_attributes = True

class Token(BaseModel):
    """Schema for JWT token response"""
    access_token: str
    token_type: str = "bearer"
