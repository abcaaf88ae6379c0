import unittest
import os
import sys
import tempfile
from pathlib import Path

# Keep API tests deterministic and fast by default.
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fastapi.testclient import TestClient  # noqa: E402

from cvservice.api.v1.cv import get_cv_service  # noqa: E402
from cvservice.main import app  # noqa: E402
from cvservice.profiles.db import SqliteProfileStore  # noqa: E402
from cvservice.services.cv_service import CvService  # noqa: E402
from tests.pdf_samples import build_pdf  # noqa: E402

CV_LINES = [
    "Jane Doe",
    "Location: Copenhagen",
    "Skills",
    "Python, SQL",
    "Experience",
    "Acme - Backend Developer",
]


class CvApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls._tmp = tempfile.TemporaryDirectory()
        db_path = Path(cls._tmp.name) / "profiles.db"
        app.dependency_overrides[get_cv_service] = lambda: CvService(store=SqliteProfileStore(db_path))
        cls.client = TestClient(app)
        cls.pdf = build_pdf(CV_LINES)

    @classmethod
    def tearDownClass(cls):
        app.dependency_overrides.pop(get_cv_service, None)
        cls._tmp.cleanup()

    def _files(self, content=None, filename="cv.pdf", content_type="application/pdf"):
        return {"file": (filename, self.pdf if content is None else content, content_type)}

    def test_health(self):
        response = self.client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "healthy"})

    def test_readiness(self):
        response = self.client.get("/v1/health/ready")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ready")
        self.assertIsInstance(response.json()["profiles"], int)

    def test_readiness_reports_unusable_store(self):
        blocker = Path(self._tmp.name) / "not-a-directory"
        blocker.write_text("occupied", encoding="utf-8")
        bad_path = blocker / "profiles.db"
        previous = app.dependency_overrides[get_cv_service]
        app.dependency_overrides[get_cv_service] = lambda: CvService(store=SqliteProfileStore(bad_path))
        try:
            response = self.client.get("/v1/health/ready")
        finally:
            app.dependency_overrides[get_cv_service] = previous
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["detail"], "Profile store is unavailable.")

    def test_analyze_contract_shape(self):
        response = self.client.post("/v1/cv/analyze", files=self._files())
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertIn("Jane Doe", body["text"])
        self.assertIsInstance(body["score"], float)
        self.assertEqual(body["summary"]["total_section_keywords"], 15)

    def test_analyze_rejects_bad_signature(self):
        response = self.client.post("/v1/cv/analyze", files=self._files(content=b"GIF89a...%%EOF"))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "The uploaded file does not appear to be a valid PDF.")

    def test_analyze_localized_error(self):
        response = self.client.post(
            "/v1/cv/analyze",
            files=self._files(filename="cv.txt"),
            headers={"Accept-Language": "da-DK,da;q=0.9"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("Kun .pdf", response.json()["detail"])

    def test_missing_file(self):
        response = self.client.post("/v1/cv/analyze")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "No file uploaded.")

    def test_import_requires_user(self):
        response = self.client.post("/v1/cv/import", files=self._files())
        self.assertEqual(response.status_code, 401)

    def test_import_creates_then_updates_profile(self):
        headers = {"X-User-Id": "api-user"}
        first = self.client.post("/v1/cv/import", files=self._files(), headers=headers)
        self.assertEqual(first.status_code, 200)
        body = first.json()
        self.assertTrue(body["created_profile"])
        self.assertEqual(body["profile"]["user_id"], "api-user")
        self.assertEqual([skill["name"] for skill in body["profile"]["skills"]], ["Python", "SQL"])

        second = self.client.post("/v1/cv/import", files=self._files(), headers=headers)
        self.assertEqual(second.status_code, 200)
        self.assertFalse(second.json()["created_profile"])
        self.assertEqual(second.json()["profile"]["id"], body["profile"]["id"])


if __name__ == "__main__":
    unittest.main()
