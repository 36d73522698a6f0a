"""
Profile management service functions.

Turns validated request bodies into profile writes. Handlers pass the
session in; functions that write commit before returning.
"""

from collections.abc import Sequence
from typing import Any, TypeVar

from sqlalchemy.orm import Session

from core.logging import get_logger
from core.models import SOCIAL_NETWORKS, Education, Experience, Profile
from core.repositories import ProfileRepository, UserRepository

from ..schemas import (
    EducationCreateRequest,
    ExperienceCreateRequest,
    ProfileUpsertRequest,
    parse_skills,
)

logger = get_logger("profile.service")

PROFILE_SCALAR_FIELDS = ("company", "website", "location", "bio", "status", "githubusername")

Entry = TypeVar("Entry", Experience, Education)


class ProfileNotFoundError(LookupError):
    """The caller has no profile to modify."""

    def __init__(self, user_id: int):
        super().__init__(f"No profile for user {user_id}")
        self.user_id = user_id


# =============================================================================
# Request shaping
# =============================================================================


def build_profile_fields(payload: ProfileUpsertRequest) -> dict[str, Any]:
    """Fields present (and non-empty) in the request, ready to write."""
    fields: dict[str, Any] = {}
    for name in PROFILE_SCALAR_FIELDS:
        value = getattr(payload, name)
        if value:
            fields[name] = value
    if payload.skills:
        fields["skills"] = parse_skills(payload.skills)
    return fields


def build_social(payload: ProfileUpsertRequest) -> dict[str, str]:
    return {network: getattr(payload, network) for network in SOCIAL_NETWORKS if getattr(payload, network)}


def find_entry_index(entries: Sequence[Entry], entry_id: str) -> int | None:
    """Index of the entry whose id matches `entry_id`, or None."""
    for index, entry in enumerate(entries):
        if str(entry.id) == entry_id:
            return index
    return None


# =============================================================================
# Profile CRUD
# =============================================================================


def get_profile_by_user_id(db: Session, user_id: int) -> Profile | None:
    """Fetch a profile with its owner, or None if the user has none."""
    return ProfileRepository(db).get_by_user_id(user_id)


def list_profiles(db: Session) -> list[Profile]:
    return ProfileRepository(db).list_all()


def upsert_profile(db: Session, user_id: int, payload: ProfileUpsertRequest) -> Profile:
    """
    Create the user's profile or update it in place.

    Only fields present in the payload are written; stored values of
    absent fields (social links included) are left untouched.
    """
    fields = build_profile_fields(payload)
    social = build_social(payload)

    profile, created = ProfileRepository(db).upsert(user_id, fields, social)
    db.commit()
    db.refresh(profile)

    logger.info(
        "profile_created" if created else "profile_updated",
        user_id=user_id,
        fields=sorted(fields),
        social=sorted(social),
    )
    return profile


def delete_account(db: Session, user_id: int) -> None:
    """
    Delete the user's profile, then the user.

    Both deletes share the session transaction, so a failure on the second
    rolls back the first.
    """
    # TODO: delete the user's posts once the posts module lands
    profile_deleted = ProfileRepository(db).delete_by_user_id(user_id)
    user_deleted = UserRepository(db).delete_account(user_id)
    db.commit()

    logger.info(
        "account_deleted",
        user_id=user_id,
        profile_deleted=profile_deleted,
        user_deleted=user_deleted,
    )


# =============================================================================
# Experience / education lists
# =============================================================================


def _require_profile(db: Session, user_id: int) -> Profile:
    profile = ProfileRepository(db).get_by_user_id(user_id)
    if profile is None:
        raise ProfileNotFoundError(user_id)
    return profile


def _insert_entry(db: Session, profile: Profile, entries: list[Entry], entry: Entry) -> Profile:
    # ordering_list renumbers positions, so the new entry becomes position 0
    entries.insert(0, entry)
    db.commit()
    db.refresh(profile)
    return profile


def _remove_entry(db: Session, profile: Profile, entries: list[Entry], entry_id: str) -> bool:
    index = find_entry_index(entries, entry_id)
    if index is None:
        return False
    del entries[index]
    db.commit()
    db.refresh(profile)
    return True


def add_experience(db: Session, user_id: int, payload: ExperienceCreateRequest) -> Profile:
    profile = _require_profile(db, user_id)
    experience = Experience(**payload.model_dump())
    profile = _insert_entry(db, profile, profile.experiences, experience)
    logger.info("experience_added", user_id=user_id, experience_id=experience.id)
    return profile


def remove_experience(db: Session, user_id: int, exp_id: str) -> Profile:
    """Remove an experience by id. An unknown id leaves the list unchanged."""
    profile = _require_profile(db, user_id)
    removed = _remove_entry(db, profile, profile.experiences, exp_id)
    logger.info("experience_removed", user_id=user_id, experience_id=exp_id, removed=removed)
    return profile


def add_education(db: Session, user_id: int, payload: EducationCreateRequest) -> Profile:
    profile = _require_profile(db, user_id)
    education = Education(**payload.model_dump())
    profile = _insert_entry(db, profile, profile.education, education)
    logger.info("education_added", user_id=user_id, education_id=education.id)
    return profile


def remove_education(db: Session, user_id: int, edu_id: str) -> Profile:
    """Remove an education entry by id. An unknown id leaves the list unchanged."""
    profile = _require_profile(db, user_id)
    removed = _remove_entry(db, profile, profile.education, edu_id)
    logger.info("education_removed", user_id=user_id, education_id=edu_id, removed=removed)
    return profile
