"""
Pydantic schemas for request and response validation.

Required request fields declare their rule with `required(message)`. The
rule runs before type coercion, and every failing rule on a body is reported
in one 400 response (see error_handlers).
"""

from collections.abc import Sequence
from datetime import date, datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic_core import PydanticCustomError

# Primary keys are signed 64-bit integers in every supported database
MAX_ROW_ID = 2**63 - 1

SKILLS_REQUIRED = "Skills are required"


def parse_row_id(raw: Any) -> int | None:
    """Parse a user supplied row id, or None if it cannot name a row."""
    try:
        row_id = int(raw)
    except (TypeError, ValueError):
        return None
    if not 0 < row_id <= MAX_ROW_ID:
        return None
    return row_id


def parse_skills(raw: str | Sequence[str]) -> list[str]:
    """
    Split a comma separated skills string into trimmed names.

    "HTML , CSS , Python" and "HTML, CSS,Python" both give
    ["HTML", "CSS", "Python"]. Empty items are dropped.
    """
    items = raw.split(",") if isinstance(raw, str) else raw
    return [skill.strip() for skill in items if skill and skill.strip()]


def required(message: str) -> BeforeValidator:
    """Presence and non-empty rule reported with `message`."""

    def check(value: Any) -> Any:
        if value is None or value == "" or value == []:
            raise PydanticCustomError("required", message)
        return value

    return BeforeValidator(check)


def _skill_list(value: str | list[str]) -> list[str]:
    # " , " passes the presence rule but names no skill
    skills = parse_skills(value)
    if not skills:
        raise PydanticCustomError("required", SKILLS_REQUIRED)
    return skills


def _blank_to_none(value: Any) -> Any:
    # HTML forms submit empty optional dates as ""
    return None if value == "" else value


def _blank_to_false(value: Any) -> Any:
    return False if value is None or value == "" else value


OptionalDate = Annotated[date | None, BeforeValidator(_blank_to_none)]
CurrentFlag = Annotated[bool, BeforeValidator(_blank_to_false)]


class RequestBody(BaseModel):
    # Defaults must pass through the `required` rules too
    model_config = ConfigDict(validate_default=True, extra="ignore", populate_by_name=True)


# =============================================================================
# Requests
# =============================================================================


class ProfileUpsertRequest(RequestBody):
    status: Annotated[str | None, required("Status is required")] = None
    skills: Annotated[
        str | list[str] | None, required(SKILLS_REQUIRED), AfterValidator(_skill_list)
    ] = None
    company: str | None = None
    website: str | None = None
    location: str | None = None
    bio: str | None = None
    githubusername: str | None = None

    # Social links
    youtube: str | None = None
    twitter: str | None = None
    facebook: str | None = None
    linkedin: str | None = None
    instagram: str | None = None


class ExperienceCreateRequest(RequestBody):
    title: Annotated[str | None, required("Title is required")] = None
    company: Annotated[str | None, required("Company is required")] = None
    location: str | None = None
    from_date: Annotated[date | None, required("From date is required")] = Field(
        default=None, validation_alias="from"
    )
    to_date: OptionalDate = Field(default=None, validation_alias="to")
    current: CurrentFlag = False
    description: str | None = None


class EducationCreateRequest(RequestBody):
    school: Annotated[str | None, required("School is required")] = None
    degree: Annotated[str | None, required("Degree is required")] = None
    fieldofstudy: Annotated[str | None, required("Field of study is required")] = None
    from_date: Annotated[date | None, required("From date is required")] = Field(
        default=None, validation_alias="from"
    )
    to_date: OptionalDate = Field(default=None, validation_alias="to")
    current: CurrentFlag = False
    description: str | None = None


# =============================================================================
# Responses
# =============================================================================


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    avatar: str | None = None


class ExperienceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    company: str
    location: str | None = None
    from_date: date = Field(serialization_alias="from")
    to_date: date | None = Field(default=None, serialization_alias="to")
    current: CurrentFlag = False
    description: str | None = None


class EducationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    school: str
    degree: str
    fieldofstudy: str
    from_date: date = Field(serialization_alias="from")
    to_date: date | None = Field(default=None, serialization_alias="to")
    current: CurrentFlag = False
    description: str | None = None


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user: UserSummary
    company: str | None = None
    website: str | None = None
    location: str | None = None
    bio: str | None = None
    status: str | None = None
    githubusername: str | None = None
    skills: list[str] = Field(default_factory=list)
    social: dict[str, str] = Field(default_factory=dict)
    experiences: list[ExperienceResponse] = Field(default_factory=list)
    education: list[EducationResponse] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class MessageResponse(BaseModel):
    msg: str
