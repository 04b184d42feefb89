from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import Optional


class LoginRequest(BaseModel):
    """Schema for registering a login."""
    email: str = Field(..., alias="correo", min_length=1, description="User email")

    model_config = ConfigDict(populate_by_name=True)


class LoginEventResponse(BaseModel):
    id: int
    email: str = Field(..., alias="correo")
    logged_in_at: Optional[datetime] = Field(None, alias="fecha_login")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class LoginEventListResponse(BaseModel):
    success: bool = True
    total: int
    users: list[LoginEventResponse] = Field(..., alias="usuarios")

    model_config = ConfigDict(populate_by_name=True)
