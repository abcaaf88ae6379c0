from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from cvservice.parsing.models import UploadedDocument  # noqa: E402
from cvservice.parsing.validation import CvValidationError  # noqa: E402
from cvservice.profiles.db import SqliteProfileStore  # noqa: E402
from cvservice.services.cv_service import CvService  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description="Analyze a CV PDF and optionally import it into a profile.")
    parser.add_argument("--file", required=True, help="Path to the CV PDF")
    parser.add_argument("--user-id", default=None, help="Import into this user's profile instead of analyzing")
    parser.add_argument("--db", default=None, help="Profiles sqlite path (defaults to PROFILES_DB_PATH)")
    parser.add_argument("--locale", default=None, help="Message locale (en or da)")
    args = parser.parse_args()

    path = Path(args.file)
    content = path.read_bytes()
    document = UploadedDocument(
        content=content,
        filename=path.name,
        content_type="application/pdf",
        length=len(content),
    )

    try:
        if args.user_id:
            service = CvService(store=SqliteProfileStore(args.db))
            result = service.import_to_profile(args.user_id, document, locale=args.locale)
        else:
            result = CvService().analyze(document, locale=args.locale)
    except CvValidationError as exc:
        print(f"{exc.code}: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    print(result.model_dump_json(indent=2))


if __name__ == "__main__":
    main()
