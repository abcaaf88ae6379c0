from __future__ import annotations

import logging
from datetime import datetime, timezone

from cvservice.core.messages import msg
from cvservice.features.readability import build_readability_summary, compute_readability_score
from cvservice.normalize.profile_fields import extract_profile_fields
from cvservice.parsing.extract import extract_pdf_text
from cvservice.parsing.models import UploadedDocument
from cvservice.parsing.validation import CvValidationError, validate_pdf_upload
from cvservice.profiles.db import SqliteProfileStore
from cvservice.profiles.store import ProfileRecord, ProfileStore, merge_keywords
from cvservice.schemas.cv import CvImportResult, CvReadabilityResult, ProfileExtraction

logger = logging.getLogger(__name__)

_SCALAR_FIELDS = (
    "first_name",
    "last_name",
    "phone_number",
    "about",
    "location",
    "company",
    "job_title",
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def apply_extraction(
    store: ProfileStore,
    record: ProfileRecord,
    extracted: ProfileExtraction,
    *,
    created: bool,
) -> None:
    """Merge extracted fields into ``record``.

    Blank extracted scalars keep the stored value. A collection is replaced as a
    whole, and only when the extraction found at least one entry of that kind.
    """
    for field_name in _SCALAR_FIELDS:
        value = getattr(extracted, field_name)
        if value and value.strip():
            setattr(record, field_name, value)

    if extracted.keywords:
        record.keywords = merge_keywords(record.keywords, extracted.keywords)

    if not created:
        store.remove_collections(
            record,
            skills=bool(extracted.skills),
            experiences=bool(extracted.experiences),
            educations=bool(extracted.educations),
        )
    if extracted.experiences:
        record.experiences = [entry.model_copy() for entry in extracted.experiences]
    if extracted.educations:
        record.educations = [entry.model_copy() for entry in extracted.educations]
    if extracted.skills:
        record.skills = [skill.model_copy() for skill in extracted.skills]


class CvService:
    def __init__(self, store: ProfileStore | None = None) -> None:
        self._store = store

    @property
    def store(self) -> ProfileStore:
        if self._store is None:
            self._store = SqliteProfileStore()
        return self._store

    def _extract_text(self, document: UploadedDocument | None, locale: str | None) -> str:
        validate_pdf_upload(document, locale=locale)
        return extract_pdf_text(document.content)

    def analyze(self, document: UploadedDocument | None, *, locale: str | None = None) -> CvReadabilityResult:
        text = self._extract_text(document, locale)
        summary = build_readability_summary(text, locale=locale)
        score = compute_readability_score(text)
        logger.info("cv_analyze_completed chars=%s score=%s", len(text), score)
        return CvReadabilityResult(text=text, score=score, summary=summary)

    def import_to_profile(
        self,
        user_id: str | None,
        document: UploadedDocument | None,
        *,
        locale: str | None = None,
    ) -> CvImportResult:
        if not user_id or not user_id.strip():
            raise CvValidationError(msg(locale, "missing_user_id"), code="missing_user_id")

        text = self._extract_text(document, locale)
        summary = build_readability_summary(text, locale=locale)
        extracted = extract_profile_fields(text, locale=locale)

        store = self.store
        record = store.load_profile(user_id)
        created = record is None
        now = _utc_now()
        if record is None:
            record = ProfileRecord(user_id=user_id, created_at=now)
            store.add_profile(record)
        else:
            record.last_updated_at = now

        apply_extraction(store, record, extracted, created=created)
        store.save_changes()

        profile = store.get_profile(user_id)
        if profile is None:
            raise RuntimeError("Profile could not be loaded after import.")

        logger.info(
            "cv_import_completed created=%s skills=%s experiences=%s educations=%s warnings=%s",
            created,
            len(extracted.skills),
            len(extracted.experiences),
            len(extracted.educations),
            len(extracted.warnings),
        )
        return CvImportResult(
            profile=profile,
            summary=summary,
            extracted_text=text,
            created_profile=created,
            warnings=list(extracted.warnings),
        )
