from __future__ import annotations

import re

from cvservice.core.messages import msg
from cvservice.schemas.cv import (
    DEFAULT_SKILL_PROFICIENCY,
    EducationEntry,
    ExperienceEntry,
    ProfileExtraction,
    Skill,
)

# Any of these at the start of a line ends the section being collected.
SECTION_STOP_KEYWORDS: tuple[str, ...] = (
    "experience",
    "education",
    "skills",
    "projects",
    "summary",
    "profile",
    "erfaring",
    "uddannelse",
    "færdigheder",
    "projekter",
    "om",
    "om mig",
    "bio",
    "profil",
    "kontakt",
)

ABOUT_HEADERS = ("summary", "profile", "about", "om", "bio")
SKILLS_HEADERS = ("skills", "kompetencer")
EXPERIENCE_HEADERS = ("experience", "erfaring", "work experience")
EDUCATION_HEADERS = ("education", "uddannelse")
LOCATION_LABELS = ("location", "by", "sted")

MAX_SKILL_NAME_CHARS = 80

_NAME_LINE_RE = re.compile(r"^(?:[^\W\d_]|')(?:[^\W\d_]|['\s.-])+$")
PHONE_RE = re.compile(r"\s(\+?\d[\d\s().-]{6,}\d)")
_SKILL_SPLIT_RE = re.compile(r"[\n,;]")


def split_lines(text: str) -> list[str]:
    return [line.strip() for line in text.split("\n") if line.strip()]


def parse_name(lines: list[str]) -> tuple[str, str]:
    for line in lines:
        if not _NAME_LINE_RE.match(line):
            continue
        parts = line.split()
        if len(parts) >= 2:
            return parts[0], " ".join(parts[1:])
    return "", ""


def parse_phone(text: str) -> str:
    match = PHONE_RE.search(text)
    return match.group(1).strip() if match else ""


def parse_location(lines: list[str]) -> str:
    for line in lines:
        if not line.lower().startswith(LOCATION_LABELS):
            continue
        _label, sep, value = line.partition(":")
        if sep:
            return value.strip()
    return ""


def _starts_with_any(lowered: str, headers: tuple[str, ...]) -> bool:
    return any(lowered.startswith(header) for header in headers)


def extract_section_text(lines: list[str], headers: tuple[str, ...]) -> str:
    """Collect the lines under any of ``headers`` until another known heading starts.

    Content after a colon on the heading line itself belongs to the section.
    """
    content: list[str] = []
    in_section = False
    for line in lines:
        lowered = line.strip().lower()
        if _starts_with_any(lowered, headers):
            in_section = True
            _heading, sep, inline = line.partition(":")
            if sep and inline.strip():
                content.append(inline.strip())
            continue

        if in_section and _starts_with_any(lowered, SECTION_STOP_KEYWORDS):
            break

        if in_section:
            content.append(line)
    return "\n".join(content)


def parse_skills(section_text: str) -> list[Skill]:
    if not section_text.strip():
        return []
    tokens = [token.strip() for token in _SKILL_SPLIT_RE.split(section_text)]
    return [
        Skill(name=token, proficiency=DEFAULT_SKILL_PROFICIENCY)
        for token in tokens
        if token and len(token) <= MAX_SKILL_NAME_CHARS
    ]


def split_by_blank_lines(section_text: str) -> list[str]:
    chunks: list[str] = []
    current: list[str] = []
    for line in section_text.splitlines():
        if not line.strip():
            if current:
                chunks.append("\n".join(current))
                current = []
            continue
        current.append(line.strip())
    if current:
        chunks.append("\n".join(current))
    return chunks


def _split_heading(line: str) -> tuple[str, str]:
    head, sep, tail = line.partition("-")
    if not sep:
        return line.strip(), ""
    return head.strip(), tail.strip()


def _section_chunks(section_text: str) -> list[tuple[str, str]]:
    parsed: list[tuple[str, str]] = []
    for chunk in split_by_blank_lines(section_text):
        chunk_lines = split_lines(chunk)
        if chunk_lines:
            parsed.append((chunk_lines[0], "\n".join(chunk_lines[1:])))
    return parsed


def parse_experiences(section_text: str) -> list[ExperienceEntry]:
    entries: list[ExperienceEntry] = []
    for heading, description in _section_chunks(section_text):
        company, position = _split_heading(heading)
        entries.append(ExperienceEntry(company=company, position_title=position, description=description))
    return entries


def parse_educations(section_text: str) -> list[EducationEntry]:
    entries: list[EducationEntry] = []
    for heading, description in _section_chunks(section_text):
        institution, degree = _split_heading(heading)
        entries.append(EducationEntry(institution=institution, degree=degree, description=description))
    return entries


def distinct_keywords(skills: list[Skill]) -> list[str]:
    seen: set[str] = set()
    keywords: list[str] = []
    for skill in skills:
        key = skill.name.lower()
        if key in seen:
            continue
        seen.add(key)
        keywords.append(skill.name)
    return keywords


def extract_profile_fields(text: str, *, locale: str | None = None) -> ProfileExtraction:
    if not text or not text.strip():
        return ProfileExtraction(warnings=[msg(locale, "warning_no_text")])

    lines = split_lines(text)
    first_name, last_name = parse_name(lines)
    skills = parse_skills(extract_section_text(lines, SKILLS_HEADERS))
    experiences = parse_experiences(extract_section_text(lines, EXPERIENCE_HEADERS))
    educations = parse_educations(extract_section_text(lines, EDUCATION_HEADERS))

    warnings: list[str] = []
    if not first_name or not last_name:
        warnings.append(msg(locale, "warning_no_name"))
    if not skills:
        warnings.append(msg(locale, "warning_no_skills"))
    if not experiences:
        warnings.append(msg(locale, "warning_no_experience"))

    return ProfileExtraction(
        first_name=first_name,
        last_name=last_name,
        phone_number=parse_phone(text),
        about=extract_section_text(lines, ABOUT_HEADERS),
        location=parse_location(lines),
        skills=skills,
        experiences=experiences,
        educations=educations,
        keywords=distinct_keywords(skills),
        warnings=warnings,
    )
