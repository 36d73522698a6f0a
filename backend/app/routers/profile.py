"""
Profile endpoints.

Private routes act on the authenticated caller's own profile; the listing,
lookup by user id and GitHub repos routes are public.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from core.api.github_api import GitHubProfileNotFound, GitHubReposClient
from core.logging import get_logger
from core.models import Profile, User

from ..dependencies import get_current_user, get_db, get_github_client
from ..schemas import (
    EducationCreateRequest,
    ExperienceCreateRequest,
    MessageResponse,
    ProfileResponse,
    ProfileUpsertRequest,
    RequestBody,
    parse_row_id,
)
from ..services import profile_service

logger = get_logger("profile")

router = APIRouter(prefix="/profile", tags=["profile"])

PROFILE_NOT_FOUND = "Profile not found"


def _profile_to_response(profile: Profile) -> ProfileResponse:
    """Serialize while the request session is still open."""
    return ProfileResponse.model_validate(profile)


def _body_or_empty(model: type[RequestBody], payload: RequestBody | None) -> RequestBody:
    """
    Treat a missing body as `{}` so the per-field rules still report.
    """
    if payload is not None:
        return payload
    try:
        return model.model_validate({})
    except ValidationError as exc:
        raise RequestValidationError(
            [{**error, "loc": ("body", *error["loc"])} for error in exc.errors()]
        ) from None


@router.get("/me", response_model=ProfileResponse)
def get_my_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get current user's profile."""
    profile = profile_service.get_profile_by_user_id(db, current_user.id)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="There is no profile for this user",
        )
    return _profile_to_response(profile)


@router.post("/", response_model=ProfileResponse)
def upsert_profile(
    payload: ProfileUpsertRequest | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create or update the current user's profile."""
    payload = _body_or_empty(ProfileUpsertRequest, payload)
    profile = profile_service.upsert_profile(db, current_user.id, payload)
    return _profile_to_response(profile)


@router.get("/", response_model=list[ProfileResponse])
def list_profiles(db: Session = Depends(get_db)):
    """Get all profiles."""
    return [_profile_to_response(profile) for profile in profile_service.list_profiles(db)]


@router.get("/user/{user_id}", response_model=ProfileResponse)
def get_profile_by_user_id(user_id: str, db: Session = Depends(get_db)):
    """Get a profile by its owner's user id."""
    owner_id = parse_row_id(user_id)
    if owner_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=PROFILE_NOT_FOUND)

    profile = profile_service.get_profile_by_user_id(db, owner_id)
    if not profile:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=PROFILE_NOT_FOUND)
    return _profile_to_response(profile)


@router.delete("/", response_model=MessageResponse)
def delete_account(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete the current user's profile and account."""
    profile_service.delete_account(db, current_user.id)
    return MessageResponse(msg="User deleted")


# =============================================================================
# Experience / education
# =============================================================================


@router.put("/experiences", response_model=ProfileResponse)
def add_experience(
    payload: ExperienceCreateRequest | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Add an experience entry at the top of the list."""
    payload = _body_or_empty(ExperienceCreateRequest, payload)
    profile = profile_service.add_experience(db, current_user.id, payload)
    return _profile_to_response(profile)


@router.delete("/experiences/{exp_id}", response_model=ProfileResponse)
def remove_experience(
    exp_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    profile = profile_service.remove_experience(db, current_user.id, exp_id)
    return _profile_to_response(profile)


@router.put("/education", response_model=ProfileResponse)
def add_education(
    payload: EducationCreateRequest | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Add an education entry at the top of the list."""
    payload = _body_or_empty(EducationCreateRequest, payload)
    profile = profile_service.add_education(db, current_user.id, payload)
    return _profile_to_response(profile)


@router.delete("/education/{edu_id}", response_model=ProfileResponse)
def remove_education(
    edu_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    profile = profile_service.remove_education(db, current_user.id, edu_id)
    return _profile_to_response(profile)


# =============================================================================
# GitHub
# =============================================================================


@router.get("/github/{username}")
async def get_github_repos(
    username: str,
    client: GitHubReposClient = Depends(get_github_client),
):
    """Relay the user's latest GitHub repositories."""
    try:
        repos = await client.fetch_user_repos(username)
    except GitHubProfileNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No Github profile found",
        ) from None
    return JSONResponse(content=repos)
