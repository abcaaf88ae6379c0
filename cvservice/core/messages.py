from __future__ import annotations

from typing import Any

from cvservice.core.config import settings

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "missing_file": "PDF file is required.",
        "invalid_extension": "Unsupported file extension. Only .pdf is allowed.",
        "file_too_large": "File too large. Max allowed size is {max_mb} MB.",
        "invalid_content_type": "Invalid Content-Type. Expecting application/pdf.",
        "invalid_signature": "The uploaded file does not appear to be a valid PDF.",
        "missing_eof_marker": "The uploaded PDF is incomplete: no end-of-file marker was found.",
        "truncated_file": "The uploaded file is shorter than its declared length.",
        "encrypted_pdf": "Encrypted/password-protected PDFs are not supported.",
        "missing_user_id": "User id is required.",
        "warning_no_text": "No text could be extracted from the PDF.",
        "warning_no_name": "Name was not found in the CV.",
        "warning_no_skills": "Skills were not identified.",
        "warning_no_experience": "Experience was not identified.",
        "summary_no_text": "No text could be extracted. The PDF may be image-based or protected.",
    },
    "da": {
        "missing_file": "PDF-fil er påkrævet.",
        "invalid_extension": "Filtypen understøttes ikke. Kun .pdf er tilladt.",
        "file_too_large": "Filen er for stor. Maksimal størrelse er {max_mb} MB.",
        "invalid_content_type": "Ugyldig Content-Type. Forventede application/pdf.",
        "invalid_signature": "Den uploadede fil ser ikke ud til at være en gyldig PDF.",
        "missing_eof_marker": "Den uploadede PDF er ufuldstændig: der blev ikke fundet nogen filslut-markør.",
        "truncated_file": "Den uploadede fil er kortere end den angivne længde.",
        "encrypted_pdf": "Krypterede/adgangskodebeskyttede PDF'er understøttes ikke.",
        "missing_user_id": "Bruger-id er påkrævet.",
        "warning_no_text": "Ingen tekst kunne udtrækkes fra PDF.",
        "warning_no_name": "Navn blev ikke fundet i CV'et.",
        "warning_no_skills": "Færdigheder blev ikke identificeret.",
        "warning_no_experience": "Erfaring blev ikke identificeret.",
        "summary_no_text": "Ingen tekst kunne udtrækkes. PDF'en kan være billedbaseret eller beskyttet.",
    },
}


def normalize_locale(locale: str | None) -> str:
    if not locale:
        return settings.cv_message_locale
    key = locale.split(",")[0].split(";")[0].strip().lower()
    key = key.split("-")[0]
    return key if key in MESSAGES else settings.cv_message_locale


def msg(locale: str | None, key: str, **kwargs: Any) -> str:
    messages = MESSAGES[normalize_locale(locale)]
    template = messages.get(key) or MESSAGES["en"][key]
    return template.format(**kwargs) if kwargs else template
