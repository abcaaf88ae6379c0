from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

SkillProficiency = Literal["Beginner", "Intermediate", "Advanced", "Expert"]

DEFAULT_SKILL_PROFICIENCY: SkillProficiency = "Intermediate"


class ReadabilitySummary(BaseModel):
    total_chars: int = Field(default=0, ge=0)
    total_words: int = Field(default=0, ge=0)
    total_lines: int = Field(default=0, ge=0)
    has_email: bool = False
    has_phone: bool = False
    bullet_count: int = Field(default=0, ge=0)
    matched_sections: int = Field(default=0, ge=0)
    total_section_keywords: int = Field(default=0, ge=0)
    note: str | None = None


class Skill(BaseModel):
    name: str
    proficiency: SkillProficiency = DEFAULT_SKILL_PROFICIENCY


class ExperienceEntry(BaseModel):
    company: str = ""
    position_title: str = ""
    description: str = ""


class EducationEntry(BaseModel):
    institution: str = ""
    degree: str = ""
    description: str = ""


class ProfileExtraction(BaseModel):
    first_name: str = ""
    last_name: str = ""
    phone_number: str = ""
    about: str = ""
    location: str = ""
    company: str = ""
    job_title: str = ""
    skills: list[Skill] = Field(default_factory=list)
    experiences: list[ExperienceEntry] = Field(default_factory=list)
    educations: list[EducationEntry] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class CvReadabilityResult(BaseModel):
    text: str
    score: float = Field(ge=0.0, le=100.0)
    summary: ReadabilitySummary


class SkillDTO(Skill):
    id: int


class ExperienceDTO(ExperienceEntry):
    id: int


class EducationDTO(EducationEntry):
    id: int


class ProfileDTO(BaseModel):
    id: int
    user_id: str
    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    about: str | None = None
    location: str | None = None
    company: str | None = None
    job_title: str | None = None
    keywords: list[str] = Field(default_factory=list)
    skills: list[SkillDTO] = Field(default_factory=list)
    experiences: list[ExperienceDTO] = Field(default_factory=list)
    educations: list[EducationDTO] = Field(default_factory=list)
    created_at: datetime
    last_updated_at: datetime | None = None


class CvImportResult(BaseModel):
    profile: ProfileDTO
    summary: ReadabilitySummary
    extracted_text: str
    created_profile: bool
    warnings: list[str] = Field(default_factory=list)
