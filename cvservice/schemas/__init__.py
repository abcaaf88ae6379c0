from .cv import (
    DEFAULT_SKILL_PROFICIENCY,
    CvImportResult,
    CvReadabilityResult,
    EducationDTO,
    EducationEntry,
    ExperienceDTO,
    ExperienceEntry,
    ProfileDTO,
    ProfileExtraction,
    ReadabilitySummary,
    Skill,
    SkillDTO,
    SkillProficiency,
)

__all__ = [
    "DEFAULT_SKILL_PROFICIENCY",
    "CvImportResult",
    "CvReadabilityResult",
    "EducationDTO",
    "EducationEntry",
    "ExperienceDTO",
    "ExperienceEntry",
    "ProfileDTO",
    "ProfileExtraction",
    "ReadabilitySummary",
    "Skill",
    "SkillDTO",
    "SkillProficiency",
]
