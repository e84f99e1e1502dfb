from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class ExperienceEntry(BaseModel):
    company: str = ""
    title: str = ""
    start_date: str = ""
    end_date: str | None = None
    description: str | None = None
    location: str | None = None

    model_config = ConfigDict(extra="ignore")


class EducationEntry(BaseModel):
    school: str = ""
    degree: str | None = None
    field_of_study: str | None = None
    start_year: int | None = None
    end_year: int | None = None

    model_config = ConfigDict(extra="ignore")


class RawProfile(BaseModel):
    """Untrusted profile as delivered by a file or the fetch API.

    Only the structural shape is enforced here; business rules are the
    validator's job, so empty names or negative counts parse fine.
    """

    linkedin_id: str = ""
    full_name: str = ""
    headline: str | None = None
    location: str | None = None
    summary: str | None = None
    experience: list[ExperienceEntry] = []
    education: list[EducationEntry] = []
    skills: list[str] = []
    connections_count: int | None = None
    profile_url: str = ""
    profile_image_url: str | None = None
    banner_image_url: str | None = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("experience", "education", "skills", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value

    @field_validator("linkedin_id", mode="before")
    @classmethod
    def _strip_id(cls, value):
        # The id keys the store; surrounding whitespace must not split a profile in two
        return value.strip() if isinstance(value, str) else value
