from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from cvservice.schemas.cv import EducationEntry, ExperienceEntry, ProfileDTO, Skill


@dataclass
class ProfileRecord:
    user_id: str
    id: int | None = None
    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    about: str | None = None
    location: str | None = None
    company: str | None = None
    job_title: str | None = None
    keywords: list[str] = field(default_factory=list)
    skills: list[Skill] = field(default_factory=list)
    experiences: list[ExperienceEntry] = field(default_factory=list)
    educations: list[EducationEntry] = field(default_factory=list)
    created_at: datetime | None = None
    last_updated_at: datetime | None = None


class ProfileStore(Protocol):
    def load_profile(self, user_id: str) -> ProfileRecord | None:
        """Return the profile with its skills, experiences and educations."""

    def get_profile(self, user_id: str) -> ProfileDTO | None:
        """Return the canonical read model for ``user_id``."""

    def add_profile(self, record: ProfileRecord) -> None:
        """Stage a new profile for insertion."""

    def remove_collections(
        self,
        record: ProfileRecord,
        *,
        skills: bool = False,
        experiences: bool = False,
        educations: bool = False,
    ) -> None:
        """Stage deletion of the stored rows of the selected collections."""

    def save_changes(self) -> None:
        """Commit every staged change in one transaction."""

    def ping(self) -> int:
        """Return the number of stored profiles; raises when the store is unreachable."""


def merge_keywords(existing: list[str], incoming: list[str]) -> list[str]:
    """Case-insensitive union; the first spelling seen wins."""
    merged = list(existing)
    seen = {keyword.lower() for keyword in merged}
    for keyword in incoming:
        key = keyword.lower()
        if key not in seen:
            seen.add(key)
            merged.append(keyword)
    return merged
