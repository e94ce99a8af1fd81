"""Request bodies accepted by the JSON endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class SignupRequest(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""


class SigninRequest(BaseModel):
    email: str = ""
    password: str = ""


class ProfileUpdateRequest(BaseModel):
    name: str = ""


class PasswordChangeRequest(BaseModel):
    """Body of PUT /api/auth/password (camelCase on the wire)."""

    model_config = ConfigDict(populate_by_name=True)

    current_password: str = Field("", alias="currentPassword")
    new_password: str = Field("", alias="newPassword")


class NoteRequest(BaseModel):
    title: str = ""
    content: str = ""
