import unittest
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from cvservice.parsing.models import UploadedDocument  # noqa: E402
from cvservice.parsing.validation import (  # noqa: E402
    MAX_FILE_SIZE_BYTES,
    CvValidationError,
    validate_pdf_upload,
)

VALID_PDF = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\n%%EOF\n"


def _doc(content=VALID_PDF, filename="cv.pdf", content_type="application/pdf", length=None):
    return UploadedDocument(content=content, filename=filename, content_type=content_type, length=length)


class PdfUploadValidationTests(unittest.TestCase):
    def assertRejected(self, document, code, locale=None):
        with self.assertRaises(CvValidationError) as ctx:
            validate_pdf_upload(document, locale=locale)
        self.assertEqual(ctx.exception.code, code)
        return ctx.exception

    def test_accepts_minimal_pdf(self):
        validate_pdf_upload(_doc())
        validate_pdf_upload(_doc(filename="CV.PDF", content_type="application/octet-stream"))

    def test_missing_file(self):
        self.assertRejected(None, "missing_file")
        self.assertRejected(_doc(content=b""), "missing_file")

    def test_extension_checked_before_content(self):
        self.assertRejected(_doc(content=b"not a pdf", filename="cv.docx"), "invalid_extension")

    def test_declared_size_over_ceiling(self):
        self.assertRejected(_doc(length=MAX_FILE_SIZE_BYTES + 1), "file_too_large")

    def test_content_type(self):
        self.assertRejected(_doc(content_type="text/plain"), "invalid_content_type")

    def test_signature(self):
        self.assertRejected(_doc(content=b"PK\x03\x04 zip data %%EOF"), "invalid_signature")
        self.assertRejected(_doc(content=b"%PD"), "invalid_signature")

    def test_missing_eof_marker(self):
        self.assertRejected(_doc(content=b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\n"), "missing_eof_marker")

    def test_eof_marker_must_be_in_tail(self):
        content = b"%PDF-1.4\n%%EOF\n" + b"0" * 2048
        self.assertRejected(_doc(content=content), "missing_eof_marker")

    def test_encrypted_pdf(self):
        content = b"%PDF-1.4\ntrailer << /Root 1 0 R /Encrypt 5 0 R >>\n%%EOF\n"
        self.assertRejected(_doc(content=content), "encrypted_pdf")

    def test_declared_length_longer_than_content(self):
        self.assertRejected(_doc(length=len(VALID_PDF) + 100), "truncated_file")

    def test_localized_message(self):
        error = self.assertRejected(_doc(content_type="text/plain"), "invalid_content_type", locale="da-DK")
        self.assertIn("Ugyldig Content-Type", str(error))


if __name__ == "__main__":
    unittest.main()
