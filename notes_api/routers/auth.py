from __future__ import annotations

from fastapi import APIRouter, Depends, File, Request, UploadFile, status

from notes_api.core.errors import ValidationError
from notes_api.domain.entities import Identity
from notes_api.routers.deps import get_auth_service, get_profile_service
from notes_api.schemas import PasswordChangeRequest, ProfileUpdateRequest, SigninRequest, SignupRequest
from notes_api.services.auth_service import AuthResult, AuthService
from notes_api.services.profile_service import ProfileService
from notes_api.services.session_service import current_identity

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _rate_limit(request: Request, scope: str) -> None:
    settings = request.app.state.settings
    request.app.state.rate_limiter.check_request(
        request, scope, limit=settings.auth_rate_limit, window_seconds=settings.auth_rate_window_seconds
    )


def _auth_payload(result: AuthResult, message: str) -> dict:
    return {
        "success": True,
        "token": result.token,
        "accountId": result.account.id,
        "name": result.account.name,
        "message": message,
    }


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(body: SignupRequest, request: Request, auth: AuthService = Depends(get_auth_service)):
    _rate_limit(request, "auth:signup")
    result = auth.register(body.name, body.email, body.password)
    return _auth_payload(result, "Account created successfully")


@router.post("/signin")
def signin(body: SigninRequest, request: Request, auth: AuthService = Depends(get_auth_service)):
    _rate_limit(request, "auth:signin")
    result = auth.authenticate(body.email, body.password)
    return _auth_payload(result, "Signed in successfully")


@router.get("/verify")
def verify(identity: Identity = Depends(current_identity)):
    return {"success": True, "user": {"id": identity.account_id, "email": identity.email}}


@router.get("/profile")
def get_profile(identity: Identity = Depends(current_identity), profiles: ProfileService = Depends(get_profile_service)):
    summary = profiles.get_profile(identity.account_id)
    return {
        "success": True,
        "user": summary.account.to_public_dict(),
        "stats": {"totalNotes": summary.total_notes},
    }


@router.put("/profile")
def update_profile(
    body: ProfileUpdateRequest,
    identity: Identity = Depends(current_identity),
    profiles: ProfileService = Depends(get_profile_service),
):
    account = profiles.update_name(identity.account_id, body.name)
    return {"success": True, "message": "Profile updated successfully", "user": account.to_public_dict()}


@router.put("/password")
def change_password(
    body: PasswordChangeRequest,
    identity: Identity = Depends(current_identity),
    auth: AuthService = Depends(get_auth_service),
):
    auth.change_password(identity.account_id, body.current_password, body.new_password)
    return {"success": True, "message": "Password changed successfully"}


@router.post("/profile/image")
async def upload_profile_image(
    profileImage: UploadFile | None = File(None),
    identity: Identity = Depends(current_identity),
    profiles: ProfileService = Depends(get_profile_service),
):
    if profileImage is None or not profileImage.filename:
        raise ValidationError("No image file provided")
    # read at most limit + 1 bytes
    data = await profileImage.read(profiles.max_upload_bytes + 1)
    account = profiles.replace_avatar(identity.account_id, data, profileImage.content_type)
    return {
        "success": True,
        "message": "Profile image updated successfully",
        "profileImage": account.profile_image,
    }
