from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import closing, contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator

from cvservice.core.config import settings
from cvservice.profiles.store import ProfileRecord, ProfileStore, merge_keywords
from cvservice.schemas.cv import (
    EducationDTO,
    EducationEntry,
    ExperienceDTO,
    ExperienceEntry,
    ProfileDTO,
    Skill,
    SkillDTO,
)

logger = logging.getLogger(__name__)

_SCALAR_COLUMNS = (
    "first_name",
    "last_name",
    "phone_number",
    "about",
    "location",
    "company",
    "job_title",
)

COLLECTION_SKILLS = "skills"
COLLECTION_EXPERIENCES = "experiences"
COLLECTION_EDUCATIONS = "educations"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_ts(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def init_db(db_path: str | Path | None = None) -> None:
    path = Path(db_path or settings.profiles_db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with closing(sqlite3.connect(path)) as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS profiles (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL UNIQUE,
                first_name TEXT,
                last_name TEXT,
                phone_number TEXT,
                about TEXT,
                location TEXT,
                company TEXT,
                job_title TEXT,
                keywords_json TEXT NOT NULL DEFAULT '[]',
                created_at TEXT NOT NULL,
                last_updated_at TEXT
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS profile_skills (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                profile_id INTEGER NOT NULL REFERENCES profiles (id) ON DELETE CASCADE,
                name TEXT NOT NULL,
                proficiency TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS profile_experiences (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                profile_id INTEGER NOT NULL REFERENCES profiles (id) ON DELETE CASCADE,
                company TEXT,
                position_title TEXT,
                description TEXT
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS profile_educations (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                profile_id INTEGER NOT NULL REFERENCES profiles (id) ON DELETE CASCADE,
                institution TEXT,
                degree TEXT,
                description TEXT
            )
            """
        )
        for table in ("profile_skills", "profile_experiences", "profile_educations"):
            conn.execute(f"CREATE INDEX IF NOT EXISTS idx_{table}_profile ON {table} (profile_id)")
        conn.commit()


class SqliteProfileStore(ProfileStore):
    """Profile persistence with unit-of-work semantics.

    ``add_profile``/``remove_collections`` and in-place edits of loaded records
    are staged; ``save_changes`` writes everything in a single transaction.
    """

    def __init__(self, db_path: str | Path | None = None) -> None:
        self._db_path = Path(db_path or settings.profiles_db_path)
        self._tracked: dict[str, ProfileRecord] = {}
        self._replaced: dict[str, set[str]] = {}
        self._schema_ready = False

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        if not self._schema_ready:
            init_db(self._db_path)
            self._schema_ready = True
        conn = sqlite3.connect(self._db_path)
        try:
            conn.execute("PRAGMA foreign_keys=ON;")
            with conn:
                yield conn
        finally:
            conn.close()

    def _fetch_profile_row(self, conn: sqlite3.Connection, user_id: str) -> tuple | None:
        cur = conn.execute(
            f"""
            SELECT id, user_id, {", ".join(_SCALAR_COLUMNS)}, keywords_json, created_at, last_updated_at
            FROM profiles
            WHERE user_id = ?
            """,
            (user_id,),
        )
        return cur.fetchone()

    @staticmethod
    def _fetch_rows(conn: sqlite3.Connection, sql: str, profile_id: int) -> list[tuple]:
        return conn.execute(sql, (profile_id,)).fetchall()

    def _load_rows(self, user_id: str) -> dict[str, Any] | None:
        with self._connect() as conn:
            row = self._fetch_profile_row(conn, user_id)
            if not row:
                return None
            profile_id = int(row[0])
            return {
                "profile": row,
                "skills": self._fetch_rows(
                    conn,
                    "SELECT id, name, proficiency FROM profile_skills WHERE profile_id = ? ORDER BY id",
                    profile_id,
                ),
                "experiences": self._fetch_rows(
                    conn,
                    "SELECT id, company, position_title, description FROM profile_experiences "
                    "WHERE profile_id = ? ORDER BY id",
                    profile_id,
                ),
                "educations": self._fetch_rows(
                    conn,
                    "SELECT id, institution, degree, description FROM profile_educations "
                    "WHERE profile_id = ? ORDER BY id",
                    profile_id,
                ),
            }

    def load_profile(self, user_id: str) -> ProfileRecord | None:
        tracked = self._tracked.get(user_id)
        if tracked is not None:
            return tracked
        rows = self._load_rows(user_id)
        if rows is None:
            return None
        row = rows["profile"]
        scalars = dict(zip(_SCALAR_COLUMNS, row[2 : 2 + len(_SCALAR_COLUMNS)]))
        keywords_json, created_at, last_updated_at = row[2 + len(_SCALAR_COLUMNS) :]
        record = ProfileRecord(
            user_id=row[1],
            id=int(row[0]),
            keywords=json.loads(keywords_json or "[]"),
            skills=[Skill(name=name, proficiency=proficiency) for _id, name, proficiency in rows["skills"]],
            experiences=[
                ExperienceEntry(company=company or "", position_title=title or "", description=desc or "")
                for _id, company, title, desc in rows["experiences"]
            ],
            educations=[
                EducationEntry(institution=inst or "", degree=degree or "", description=desc or "")
                for _id, inst, degree, desc in rows["educations"]
            ],
            created_at=_parse_ts(created_at),
            last_updated_at=_parse_ts(last_updated_at),
            **scalars,
        )
        self._tracked[user_id] = record
        return record

    def get_profile(self, user_id: str) -> ProfileDTO | None:
        rows = self._load_rows(user_id)
        if rows is None:
            return None
        row = rows["profile"]
        scalars = dict(zip(_SCALAR_COLUMNS, row[2 : 2 + len(_SCALAR_COLUMNS)]))
        keywords_json, created_at, last_updated_at = row[2 + len(_SCALAR_COLUMNS) :]
        return ProfileDTO(
            id=int(row[0]),
            user_id=row[1],
            keywords=json.loads(keywords_json or "[]"),
            skills=[SkillDTO(id=sid, name=name, proficiency=proficiency) for sid, name, proficiency in rows["skills"]],
            experiences=[
                ExperienceDTO(id=eid, company=company or "", position_title=title or "", description=desc or "")
                for eid, company, title, desc in rows["experiences"]
            ],
            educations=[
                EducationDTO(id=eid, institution=inst or "", degree=degree or "", description=desc or "")
                for eid, inst, degree, desc in rows["educations"]
            ],
            created_at=_parse_ts(created_at),
            last_updated_at=_parse_ts(last_updated_at),
            **scalars,
        )

    def add_profile(self, record: ProfileRecord) -> None:
        self._tracked[record.user_id] = record

    def remove_collections(
        self,
        record: ProfileRecord,
        *,
        skills: bool = False,
        experiences: bool = False,
        educations: bool = False,
    ) -> None:
        kinds = self._replaced.setdefault(record.user_id, set())
        if skills:
            kinds.add(COLLECTION_SKILLS)
        if experiences:
            kinds.add(COLLECTION_EXPERIENCES)
        if educations:
            kinds.add(COLLECTION_EDUCATIONS)

    def _update_profile(self, conn: sqlite3.Connection, record: ProfileRecord) -> None:
        assignments = ", ".join(f"{column} = ?" for column in _SCALAR_COLUMNS)
        conn.execute(
            f"UPDATE profiles SET {assignments}, keywords_json = ?, last_updated_at = ? WHERE id = ?",
            (
                *(getattr(record, column) for column in _SCALAR_COLUMNS),
                json.dumps(record.keywords, ensure_ascii=False),
                _iso(record.last_updated_at),
                record.id,
            ),
        )

    def _merge_into_existing(self, conn: sqlite3.Connection, record: ProfileRecord) -> int:
        """Fold ``record`` into the row a concurrent import created for the same user."""
        row = self._fetch_profile_row(conn, record.user_id)
        stored = dict(zip(_SCALAR_COLUMNS, row[2 : 2 + len(_SCALAR_COLUMNS)]))
        keywords_json, created_at, _last_updated_at = row[2 + len(_SCALAR_COLUMNS) :]
        for column in _SCALAR_COLUMNS:
            value = getattr(record, column)
            if not value or not value.strip():
                setattr(record, column, stored[column])
        record.keywords = merge_keywords(json.loads(keywords_json or "[]"), record.keywords)
        record.id = int(row[0])
        record.created_at = _parse_ts(created_at)
        record.last_updated_at = _utc_now()
        self._update_profile(conn, record)
        logger.info("profile_store_insert_conflict profile_id=%s", record.id)
        return record.id

    def _upsert_profile(self, conn: sqlite3.Connection, record: ProfileRecord) -> int:
        if record.id is not None:
            self._update_profile(conn, record)
            return record.id

        cur = conn.execute(
            f"""
            INSERT INTO profiles (user_id, {", ".join(_SCALAR_COLUMNS)}, keywords_json, created_at, last_updated_at)
            VALUES ({", ".join("?" for _ in range(len(_SCALAR_COLUMNS) + 4))})
            ON CONFLICT (user_id) DO NOTHING
            """,
            (
                record.user_id,
                *(getattr(record, column) for column in _SCALAR_COLUMNS),
                json.dumps(record.keywords, ensure_ascii=False),
                _iso(record.created_at or _utc_now()),
                _iso(record.last_updated_at),
            ),
        )
        if cur.rowcount == 0:
            return self._merge_into_existing(conn, record)
        return int(cur.lastrowid)

    @staticmethod
    def _write_collection(conn: sqlite3.Connection, kind: str, profile_id: int, record: ProfileRecord) -> None:
        if kind == COLLECTION_SKILLS:
            conn.execute("DELETE FROM profile_skills WHERE profile_id = ?", (profile_id,))
            conn.executemany(
                "INSERT INTO profile_skills (profile_id, name, proficiency) VALUES (?, ?, ?)",
                [(profile_id, skill.name, skill.proficiency) for skill in record.skills],
            )
        elif kind == COLLECTION_EXPERIENCES:
            conn.execute("DELETE FROM profile_experiences WHERE profile_id = ?", (profile_id,))
            conn.executemany(
                "INSERT INTO profile_experiences (profile_id, company, position_title, description) "
                "VALUES (?, ?, ?, ?)",
                [(profile_id, exp.company, exp.position_title, exp.description) for exp in record.experiences],
            )
        elif kind == COLLECTION_EDUCATIONS:
            conn.execute("DELETE FROM profile_educations WHERE profile_id = ?", (profile_id,))
            conn.executemany(
                "INSERT INTO profile_educations (profile_id, institution, degree, description) VALUES (?, ?, ?, ?)",
                [(profile_id, edu.institution, edu.degree, edu.description) for edu in record.educations],
            )

    def save_changes(self) -> None:
        if not self._tracked:
            return
        with self._connect() as conn:
            for user_id, record in self._tracked.items():
                is_new = record.id is None
                profile_id = self._upsert_profile(conn, record)
                kinds = set(self._replaced.get(user_id, set()))
                if is_new:
                    if record.skills:
                        kinds.add(COLLECTION_SKILLS)
                    if record.experiences:
                        kinds.add(COLLECTION_EXPERIENCES)
                    if record.educations:
                        kinds.add(COLLECTION_EDUCATIONS)
                for kind in sorted(kinds):
                    self._write_collection(conn, kind, profile_id, record)
                record.id = profile_id
            conn.commit()
        logger.info("profile_store_saved profiles=%s", len(self._tracked))
        self._replaced.clear()

    def ping(self) -> int:
        with self._connect() as conn:
            row = conn.execute("SELECT COUNT(*) FROM profiles").fetchone()
        return int(row[0])


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None
