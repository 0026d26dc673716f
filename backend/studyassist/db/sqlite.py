import json
import uuid
from collections.abc import Sequence
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, AsyncIterator

import aiosqlite

from studyassist.config import settings
from studyassist.models.card import Card, CardCreate, CardUpdate
from studyassist.models.material import Material, MaterialCreate, MaterialUpdate
from studyassist.models.preferences import PreferencesUpdate, UserPreferences
from studyassist.models.project import (
    Project,
    ProjectCreate,
    ProjectDetail,
    ProjectUpdate,
)
from studyassist.services.kanban import compute_progress, status_change
from studyassist.services.scheduler import SPACED_INTERVALS_DAYS, ReviewSchedule

_db_path: Path | None = None

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;
PRAGMA foreign_keys=ON;

CREATE TABLE IF NOT EXISTS projects (
    id          TEXT PRIMARY KEY,
    user_id     TEXT NOT NULL,
    title       TEXT NOT NULL,
    emoji       TEXT NOT NULL DEFAULT '📚',
    tags        TEXT NOT NULL DEFAULT '[]',
    progress    INTEGER NOT NULL DEFAULT 0,
    created_at  TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at  TEXT NOT NULL DEFAULT (datetime('now'))
);
CREATE INDEX IF NOT EXISTS idx_projects_user ON projects(user_id, updated_at);

CREATE TABLE IF NOT EXISTS materials (
    id               TEXT PRIMARY KEY,
    project_id       TEXT NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
    position         INTEGER NOT NULL DEFAULT 0,
    name             TEXT NOT NULL,
    summary          TEXT NOT NULL DEFAULT '',
    summary_brief    TEXT,
    summary_medium   TEXT,
    summary_full     TEXT,
    status           TEXT NOT NULL DEFAULT 'pending',
    interval_level   INTEGER,
    next_review_at   TEXT,
    last_reviewed_at TEXT,
    created_at       TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at       TEXT NOT NULL DEFAULT (datetime('now'))
);
CREATE INDEX IF NOT EXISTS idx_materials_project ON materials(project_id, position);

CREATE TABLE IF NOT EXISTS cards (
    id             TEXT PRIMARY KEY,
    material_id    TEXT NOT NULL REFERENCES materials(id) ON DELETE CASCADE,
    position       INTEGER NOT NULL DEFAULT 0,
    title          TEXT NOT NULL,
    content        TEXT NOT NULL DEFAULT '',
    interval_level INTEGER,
    next_review_at TEXT,
    created_at     TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at     TEXT NOT NULL DEFAULT (datetime('now'))
);
CREATE INDEX IF NOT EXISTS idx_cards_material ON cards(material_id, position);

CREATE TABLE IF NOT EXISTS user_preferences (
    user_id    TEXT NOT NULL,
    key        TEXT NOT NULL,
    value      TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now')),
    PRIMARY KEY (user_id, key)
);

CREATE TABLE IF NOT EXISTS schema_version (
    version    INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
);
INSERT OR IGNORE INTO schema_version(version) VALUES (1);
INSERT OR IGNORE INTO schema_version(version) VALUES (2);
"""

# Columns a status change or review may write on a material row.
_MATERIAL_SCHEDULE_FIELDS = ("status", "interval_level", "next_review_at", "last_reviewed_at")
_MATERIAL_REQUIRED_FIELDS = ("name", "summary")


async def init_sqlite(data_dir: Path) -> None:
    global _db_path
    _db_path = data_dir / settings.sqlite_filename
    async with aiosqlite.connect(_db_path) as db:
        await db.executescript(SCHEMA_SQL)
        await db.commit()


async def get_db() -> AsyncIterator[aiosqlite.Connection]:
    assert _db_path is not None, "SQLite not initialized"
    async with aiosqlite.connect(_db_path) as db:
        db.row_factory = aiosqlite.Row
        await db.execute("PRAGMA foreign_keys=ON")
        yield db


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


# --- Projects ---

_PROJECT_SELECT = """
SELECT p.*,
       (SELECT COUNT(*) FROM materials m WHERE m.project_id = p.id) AS material_count
FROM projects p
"""


def _row_to_project(row: aiosqlite.Row) -> Project:
    d = dict(row)
    d["tags"] = json.loads(d["tags"] or "[]")
    return Project(**d)


async def create_project(db: aiosqlite.Connection, body: ProjectCreate) -> Project:
    project_id = str(uuid.uuid4())
    now = _now()
    await db.execute(
        """INSERT INTO projects
           (id, user_id, title, emoji, tags, progress, created_at, updated_at)
           VALUES (?, ?, ?, ?, ?, 0, ?, ?)""",
        (
            project_id,
            body.user_id,
            body.title,
            body.emoji,
            json.dumps(body.tags, ensure_ascii=False),
            now,
            now,
        ),
    )
    await db.commit()
    return await get_project(db, project_id)  # type: ignore[return-value]


async def get_project(db: aiosqlite.Connection, project_id: str) -> Project | None:
    cursor = await db.execute(_PROJECT_SELECT + " WHERE p.id = ?", (project_id,))
    row = await cursor.fetchone()
    if row is None:
        return None
    return _row_to_project(row)


async def list_projects(
    db: aiosqlite.Connection, user_id: str, offset: int = 0, limit: int = 50
) -> tuple[list[Project], int]:
    cursor = await db.execute(
        "SELECT COUNT(*) FROM projects WHERE user_id = ?", (user_id,)
    )
    total = (await cursor.fetchone())[0]

    cursor = await db.execute(
        _PROJECT_SELECT
        + " WHERE p.user_id = ? ORDER BY p.updated_at DESC, p.created_at DESC LIMIT ? OFFSET ?",
        (user_id, limit, offset),
    )
    rows = await cursor.fetchall()
    return [_row_to_project(r) for r in rows], total


async def get_project_detail(
    db: aiosqlite.Connection, project_id: str
) -> ProjectDetail | None:
    project = await get_project(db, project_id)
    if project is None:
        return None
    materials = await _list_materials(db, [project_id])
    return ProjectDetail(**project.model_dump(), materials=materials.get(project_id, []))


async def list_project_details(
    db: aiosqlite.Connection, user_id: str
) -> list[ProjectDetail]:
    """Every project of a user with materials and cards, for queue building."""
    cursor = await db.execute(
        _PROJECT_SELECT + " WHERE p.user_id = ? ORDER BY p.updated_at DESC, p.created_at DESC",
        (user_id,),
    )
    projects = [_row_to_project(r) for r in await cursor.fetchall()]
    materials = await _list_materials(db, [p.id for p in projects])
    return [
        ProjectDetail(**p.model_dump(), materials=materials.get(p.id, []))
        for p in projects
    ]


async def update_project(
    db: aiosqlite.Connection, project_id: str, updates: ProjectUpdate
) -> Project | None:
    fields = updates.model_dump(exclude_none=True)
    if not fields:
        return await get_project(db, project_id)

    if "tags" in fields:
        fields["tags"] = json.dumps(fields["tags"], ensure_ascii=False)

    fields["updated_at"] = _now()
    set_clause = ", ".join(f"{k} = ?" for k in fields)
    values = list(fields.values()) + [project_id]

    await db.execute(
        f"UPDATE projects SET {set_clause} WHERE id = ?",  # noqa: S608
        values,
    )
    await db.commit()
    return await get_project(db, project_id)


async def delete_project(db: aiosqlite.Connection, project_id: str) -> bool:
    cursor = await db.execute("DELETE FROM projects WHERE id = ?", (project_id,))
    await db.commit()
    return cursor.rowcount > 0


async def _refresh_project(db: aiosqlite.Connection, project_id: str) -> None:
    """Recompute progress and bump updated_at. Caller commits."""
    cursor = await db.execute(
        "SELECT status FROM materials WHERE project_id = ?", (project_id,)
    )
    statuses = [row[0] for row in await cursor.fetchall()]
    await db.execute(
        "UPDATE projects SET progress = ?, updated_at = ? WHERE id = ?",
        (compute_progress(statuses), _now(), project_id),
    )


# --- Materials ---


def _row_to_material(row: aiosqlite.Row, cards: list[Card]) -> Material:
    return Material(**dict(row), cards=cards)


async def _list_materials(
    db: aiosqlite.Connection, project_ids: list[str]
) -> dict[str, list[Material]]:
    if not project_ids:
        return {}
    placeholders = ", ".join("?" for _ in project_ids)
    cursor = await db.execute(
        f"SELECT * FROM materials WHERE project_id IN ({placeholders}) "  # noqa: S608
        "ORDER BY position ASC, created_at ASC",
        project_ids,
    )
    material_rows = await cursor.fetchall()

    cards = await _list_cards(db, [r["id"] for r in material_rows])
    by_project: dict[str, list[Material]] = {}
    for row in material_rows:
        by_project.setdefault(row["project_id"], []).append(
            _row_to_material(row, cards.get(row["id"], []))
        )
    return by_project


async def _next_position(db: aiosqlite.Connection, table: str, column: str, owner_id: str) -> int:
    cursor = await db.execute(
        f"SELECT COALESCE(MAX(position), -1) + 1 FROM {table} WHERE {column} = ?",  # noqa: S608
        (owner_id,),
    )
    return (await cursor.fetchone())[0]


async def _insert_card(
    db: aiosqlite.Connection, material_id: str, position: int, body: CardCreate, now: str
) -> str:
    card_id = str(uuid.uuid4())
    await db.execute(
        """INSERT INTO cards
           (id, material_id, position, title, content, created_at, updated_at)
           VALUES (?, ?, ?, ?, ?, ?, ?)""",
        (card_id, material_id, position, body.title, body.content, now, now),
    )
    return card_id


async def create_material(
    db: aiosqlite.Connection,
    project_id: str,
    body: MaterialCreate,
    today: date | None = None,
    intervals: Sequence[int] = SPACED_INTERVALS_DAYS,
) -> Material | None:
    """Insert a material (and any pre-generated cards). None if the project is missing.

    A material created straight into the completed column gets its first review
    scheduled, as a kanban move to completed would.
    """
    if await get_project(db, project_id) is None:
        return None

    schedule = status_change(None, body.status, today, intervals)

    material_id = str(uuid.uuid4())
    now = _now()
    position = await _next_position(db, "materials", "project_id", project_id)
    await db.execute(
        """INSERT INTO materials
           (id, project_id, position, name, summary, summary_brief, summary_medium,
            summary_full, status, interval_level, next_review_at, created_at, updated_at)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        (
            material_id,
            project_id,
            position,
            body.name,
            body.summary,
            body.summary_brief,
            body.summary_medium,
            body.summary_full,
            body.status.value,
            schedule.get("interval_level"),
            schedule.get("next_review_at"),
            now,
            now,
        ),
    )
    for i, card in enumerate(body.cards):
        await _insert_card(db, material_id, i, card, now)
    await _refresh_project(db, project_id)
    await db.commit()
    return await get_material(db, material_id)


async def get_material(db: aiosqlite.Connection, material_id: str) -> Material | None:
    cursor = await db.execute("SELECT * FROM materials WHERE id = ?", (material_id,))
    row = await cursor.fetchone()
    if row is None:
        return None
    cards = await _list_cards(db, [material_id])
    return _row_to_material(row, cards.get(material_id, []))


async def update_material_content(
    db: aiosqlite.Connection, material_id: str, updates: MaterialUpdate
) -> Material | None:
    material = await get_material(db, material_id)
    if material is None:
        return None
    # summary variants may be cleared with an explicit null; name and summary may not
    fields = updates.model_dump(exclude_unset=True)
    for key in _MATERIAL_REQUIRED_FIELDS:
        if fields.get(key, "") is None:
            fields.pop(key)
    if not fields:
        return material

    fields["updated_at"] = _now()
    set_clause = ", ".join(f"{k} = ?" for k in fields)
    await db.execute(
        f"UPDATE materials SET {set_clause} WHERE id = ?",  # noqa: S608
        list(fields.values()) + [material_id],
    )
    await _refresh_project(db, material.project_id)
    await db.commit()
    return await get_material(db, material_id)


async def update_material_schedule(
    db: aiosqlite.Connection, material_id: str, fields: dict[str, Any]
) -> Material | None:
    """Write status / review fields in a single UPDATE and refresh project progress."""
    material = await get_material(db, material_id)
    if material is None:
        return None
    unknown = set(fields) - set(_MATERIAL_SCHEDULE_FIELDS)
    if unknown:
        raise ValueError(f"Not a schedule field: {sorted(unknown)}")

    fields = dict(fields, updated_at=_now())
    set_clause = ", ".join(f"{k} = ?" for k in fields)
    await db.execute(
        f"UPDATE materials SET {set_clause} WHERE id = ?",  # noqa: S608
        list(fields.values()) + [material_id],
    )
    await _refresh_project(db, material.project_id)
    await db.commit()
    return await get_material(db, material_id)


async def record_material_review(
    db: aiosqlite.Connection, material_id: str, schedule: ReviewSchedule
) -> Material | None:
    return await update_material_schedule(
        db,
        material_id,
        {
            "interval_level": schedule.interval_level,
            "next_review_at": schedule.next_review_at,
            "last_reviewed_at": schedule.last_reviewed_at,
        },
    )


async def delete_material(db: aiosqlite.Connection, material_id: str) -> bool:
    material = await get_material(db, material_id)
    if material is None:
        return False
    await db.execute("DELETE FROM materials WHERE id = ?", (material_id,))
    await _refresh_project(db, material.project_id)
    await db.commit()
    return True


# --- Cards ---


def _row_to_card(row: aiosqlite.Row) -> Card:
    return Card(**dict(row))


async def _list_cards(
    db: aiosqlite.Connection, material_ids: list[str]
) -> dict[str, list[Card]]:
    if not material_ids:
        return {}
    placeholders = ", ".join("?" for _ in material_ids)
    cursor = await db.execute(
        f"SELECT * FROM cards WHERE material_id IN ({placeholders}) "  # noqa: S608
        "ORDER BY position ASC, created_at ASC",
        material_ids,
    )
    by_material: dict[str, list[Card]] = {}
    for row in await cursor.fetchall():
        by_material.setdefault(row["material_id"], []).append(_row_to_card(row))
    return by_material


async def _project_id_for_material(db: aiosqlite.Connection, material_id: str) -> str | None:
    cursor = await db.execute(
        "SELECT project_id FROM materials WHERE id = ?", (material_id,)
    )
    row = await cursor.fetchone()
    return row[0] if row else None


async def create_card(
    db: aiosqlite.Connection, material_id: str, body: CardCreate
) -> Card | None:
    project_id = await _project_id_for_material(db, material_id)
    if project_id is None:
        return None
    position = await _next_position(db, "cards", "material_id", material_id)
    card_id = await _insert_card(db, material_id, position, body, _now())
    await _refresh_project(db, project_id)
    await db.commit()
    return await get_card(db, card_id)


async def get_card(db: aiosqlite.Connection, card_id: str) -> Card | None:
    cursor = await db.execute("SELECT * FROM cards WHERE id = ?", (card_id,))
    row = await cursor.fetchone()
    return _row_to_card(row) if row else None


async def update_card_content(
    db: aiosqlite.Connection, card_id: str, update: CardUpdate
) -> Card | None:
    card = await get_card(db, card_id)
    if not card:
        return None
    new_title = update.title if update.title is not None else card.title
    new_content = update.content if update.content is not None else card.content
    await db.execute(
        "UPDATE cards SET title = ?, content = ?, updated_at = ? WHERE id = ?",
        (new_title, new_content, _now(), card_id),
    )
    await db.commit()
    return await get_card(db, card_id)


async def update_card_schedule(
    db: aiosqlite.Connection, card_id: str, schedule: ReviewSchedule
) -> Card | None:
    """Persist a rating: interval_level and next_review_at always move together."""
    card = await get_card(db, card_id)
    if not card:
        return None
    await db.execute(
        """UPDATE cards
           SET interval_level = ?, next_review_at = ?, updated_at = ?
           WHERE id = ?""",
        (schedule.interval_level, schedule.next_review_at, _now(), card_id),
    )
    project_id = await _project_id_for_material(db, card.material_id)
    if project_id is not None:
        await _refresh_project(db, project_id)
    await db.commit()
    return await get_card(db, card_id)


async def delete_card(db: aiosqlite.Connection, card_id: str) -> bool:
    card = await get_card(db, card_id)
    if not card:
        return False
    await db.execute("DELETE FROM cards WHERE id = ?", (card_id,))
    project_id = await _project_id_for_material(db, card.material_id)
    if project_id is not None:
        await _refresh_project(db, project_id)
    await db.commit()
    return True


# --- User preferences key-value store ---


async def get_preferences(db: aiosqlite.Connection, user_id: str) -> UserPreferences:
    """Stored preferences over the defaults; keys no longer in the model are ignored."""
    cursor = await db.execute(
        "SELECT key, value FROM user_preferences WHERE user_id = ?", (user_id,)
    )
    rows = await cursor.fetchall()
    stored = {row[0]: json.loads(row[1]) for row in rows}
    known = {k: v for k, v in stored.items() if k in UserPreferences.model_fields}
    return UserPreferences(**known)


async def set_preferences(
    db: aiosqlite.Connection, user_id: str, updates: PreferencesUpdate
) -> UserPreferences:
    fields = updates.model_dump(mode="json", exclude_none=True)
    now = _now()
    for key, value in fields.items():
        await db.execute(
            "INSERT INTO user_preferences(user_id, key, value, updated_at) VALUES (?, ?, ?, ?) "
            "ON CONFLICT(user_id, key) DO UPDATE SET value = excluded.value, "
            "updated_at = excluded.updated_at",
            (user_id, key, json.dumps(value), now),
        )
    await db.commit()
    return await get_preferences(db, user_id)
