import unittest
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from cvservice.core.messages import msg, normalize_locale  # noqa: E402
from cvservice.normalize.profile_fields import (  # noqa: E402
    SKILLS_HEADERS,
    extract_profile_fields,
    extract_section_text,
    parse_location,
    parse_name,
    parse_phone,
    parse_skills,
    split_lines,
)

SAMPLE_CV = (
    "Jane Doe\n"
    "Location: Copenhagen\n"
    "Phone +45 12 34 56 78\n"
    "Summary: Backend developer who likes clean APIs.\n"
    "Skills\n"
    "Python, C#; SQL\n"
    "Experience\n"
    "Acme - Backend Developer\n"
    "Built billing APIs\n"
    "Education\n"
    "DTU - MSc Computer Science"
)


class ProfileFieldParsingTests(unittest.TestCase):
    def test_name_takes_first_letters_only_line(self):
        lines = split_lines("john@example.com\n+45 12 34 56 78\nAnne-Marie O'Neil Hansen\nSkills")
        self.assertEqual(parse_name(lines), ("Anne-Marie", "O'Neil Hansen"))
        self.assertEqual(parse_name(["Skills", "jane@example.com"]), ("", ""))

    def test_phone_requires_leading_whitespace(self):
        self.assertEqual(parse_phone("Phone +45 12 34 56 78\n"), "+45 12 34 56 78")
        self.assertEqual(parse_phone("+4512345678"), "")

    def test_location_label(self):
        self.assertEqual(parse_location(["Jane Doe", "By: Aarhus"]), "Aarhus")
        self.assertEqual(parse_location(["Location Copenhagen"]), "")

    def test_skills_split_on_separators(self):
        skills = parse_skills(extract_section_text(split_lines("Skills\nPython, Go; SQL\nC++"), SKILLS_HEADERS))
        self.assertEqual([skill.name for skill in skills], ["Python", "Go", "SQL", "C++"])
        self.assertTrue(all(skill.proficiency == "Intermediate" for skill in skills))

    def test_skill_names_over_limit_are_dropped(self):
        skills = parse_skills("Python, " + "x" * 81)
        self.assertEqual([skill.name for skill in skills], ["Python"])

    def test_section_stops_at_next_heading(self):
        lines = split_lines("Skills: Python\nDocker\nEducation\nDTU")
        self.assertEqual(extract_section_text(lines, SKILLS_HEADERS), "Python\nDocker")

    def test_full_extraction(self):
        extracted = extract_profile_fields(SAMPLE_CV)
        self.assertEqual(extracted.first_name, "Jane")
        self.assertEqual(extracted.last_name, "Doe")
        self.assertEqual(extracted.location, "Copenhagen")
        self.assertEqual(extracted.phone_number, "+45 12 34 56 78")
        self.assertEqual(extracted.about, "Backend developer who likes clean APIs.")
        self.assertEqual(extracted.keywords, ["Python", "C#", "SQL"])
        self.assertEqual(len(extracted.experiences), 1)
        self.assertEqual(extracted.experiences[0].company, "Acme")
        self.assertEqual(extracted.experiences[0].position_title, "Backend Developer")
        self.assertEqual(extracted.experiences[0].description, "Built billing APIs")
        self.assertEqual(extracted.educations[0].institution, "DTU")
        self.assertEqual(extracted.educations[0].degree, "MSc Computer Science")
        self.assertEqual(extracted.company, "")
        self.assertEqual(extracted.job_title, "")
        self.assertEqual(extracted.warnings, [])

    def test_keywords_are_case_insensitively_distinct(self):
        extracted = extract_profile_fields("Jane Doe\nSkills\nPython, python, SQL")
        self.assertEqual(extracted.keywords, ["Python", "SQL"])
        self.assertEqual(len(extracted.skills), 3)

    def test_warnings(self):
        self.assertEqual(extract_profile_fields("").warnings, [msg("en", "warning_no_text")])
        self.assertEqual(
            extract_profile_fields("Jane Doe").warnings,
            [msg("en", "warning_no_skills"), msg("en", "warning_no_experience")],
        )
        extracted = extract_profile_fields("jane@example.com", locale="da")
        self.assertEqual(
            extracted.warnings,
            [
                msg("da", "warning_no_name"),
                msg("da", "warning_no_skills"),
                msg("da", "warning_no_experience"),
            ],
        )


class MessageLocaleTests(unittest.TestCase):
    def test_accept_language_parsing(self):
        self.assertEqual(normalize_locale("da-DK,da;q=0.9,en;q=0.8"), "da")
        self.assertEqual(normalize_locale("en-US"), "en")
        self.assertEqual(normalize_locale("xx"), "en")

    def test_formatting(self):
        self.assertIn("10 MB", msg("en", "file_too_large", max_mb=10))


if __name__ == "__main__":
    unittest.main()
