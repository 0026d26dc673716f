import asyncio
from datetime import date

from studyassist.db import init_all_databases
from studyassist.db.sqlite import (
    create_card,
    create_material,
    create_project,
    delete_card,
    delete_material,
    delete_project,
    get_card,
    get_db,
    get_material,
    get_preferences,
    get_project,
    list_project_details,
    record_material_review,
    set_preferences,
    update_card_content,
    update_card_schedule,
    update_material_content,
    update_material_schedule,
)
from studyassist.models.card import CardCreate, CardUpdate
from studyassist.models.material import MaterialCreate, MaterialUpdate
from studyassist.models.preferences import PreferencesUpdate
from studyassist.models.project import ProjectCreate
from studyassist.services.scheduler import ReviewSchedule


def run_db(tmp_path, fn):
    async def _go():
        await init_all_databases(tmp_path)
        result = None
        async for db in get_db():
            result = await fn(db)
        return result

    return asyncio.run(_go())


async def _seed(db):
    project = await create_project(db, ProjectCreate(user_id="u1", title="Física"))
    material = await create_material(
        db,
        project.id,
        MaterialCreate(
            name="Cinemática",
            summary="Movimento",
            cards=[CardCreate(title="v = ?", content="ds/dt"), CardCreate(title="a = ?", content="dv/dt")],
        ),
    )
    return project, material


def test_material_created_with_ordered_cards(tmp_path):
    async def scenario(db):
        project, material = await _seed(db)
        assert [c.title for c in material.cards] == ["v = ?", "a = ?"]
        assert [c.position for c in material.cards] == [0, 1]
        assert all(c.next_review_at is None and c.interval_level is None for c in material.cards)
        refreshed = await get_project(db, project.id)
        assert refreshed.material_count == 1
        assert refreshed.progress == 0

    run_db(tmp_path, scenario)


def test_card_schedule_written_as_pair(tmp_path):
    async def scenario(db):
        _, material = await _seed(db)
        card = material.cards[0]
        updated = await update_card_schedule(db, card.id, ReviewSchedule(2, "2024-06-17"))
        assert (updated.interval_level, updated.next_review_at) == (2, "2024-06-17")

        # a later rating overwrites, never accumulates
        updated = await update_card_schedule(db, card.id, ReviewSchedule(0, "2024-06-11"))
        assert (updated.interval_level, updated.next_review_at) == (0, "2024-06-11")

        assert await update_card_schedule(db, "missing", ReviewSchedule(0, "2024-06-11")) is None

    run_db(tmp_path, scenario)


def test_editing_card_keeps_schedule(tmp_path):
    async def scenario(db):
        _, material = await _seed(db)
        card = material.cards[0]
        await update_card_schedule(db, card.id, ReviewSchedule(1, "2024-06-13"))
        edited = await update_card_content(db, card.id, CardUpdate(content="derivada de s"))
        assert edited.title == "v = ?"
        assert edited.content == "derivada de s"
        assert edited.next_review_at == "2024-06-13"

    run_db(tmp_path, scenario)


def test_status_change_refreshes_progress(tmp_path):
    async def scenario(db):
        project, material = await _seed(db)
        await create_material(db, project.id, MaterialCreate(name="Dinâmica"))

        await update_material_schedule(
            db,
            material.id,
            {"status": "completed", "interval_level": 0, "next_review_at": "2024-06-11"},
        )
        assert (await get_project(db, project.id)).progress == 50

        reviewed = await record_material_review(db, material.id, ReviewSchedule(1, "2024-06-13", "2024-06-10"))
        assert reviewed.last_reviewed_at == "2024-06-10"
        assert reviewed.status.value == "completed"

        assert await delete_material(db, material.id) is True
        assert (await get_project(db, project.id)).progress == 0

    run_db(tmp_path, scenario)


def test_deleting_project_cascades(tmp_path):
    async def scenario(db):
        project, material = await _seed(db)
        card_id = material.cards[0].id
        assert await delete_project(db, project.id) is True
        assert await get_material(db, material.id) is None
        assert await get_card(db, card_id) is None
        assert await list_project_details(db, "u1") == []
        assert await create_card(db, material.id, CardCreate(title="x")) is None

    run_db(tmp_path, scenario)


def test_material_created_completed_gets_first_review(tmp_path):
    async def scenario(db):
        project = await create_project(db, ProjectCreate(user_id="u1", title="Química"))
        material = await create_material(
            db,
            project.id,
            MaterialCreate(name="Estequiometria", status="completed"),
            today=date(2024, 6, 10),
        )
        assert material.status.value == "completed"
        assert (material.interval_level, material.next_review_at) == (0, "2024-06-11")
        assert material.last_reviewed_at is None
        assert (await get_project(db, project.id)).progress == 100

        pending = await create_material(
            db, project.id, MaterialCreate(name="Soluções"), today=date(2024, 6, 10)
        )
        assert (pending.interval_level, pending.next_review_at) == (None, None)

    run_db(tmp_path, scenario)


def test_deleting_card_touches_project(tmp_path):
    async def scenario(db):
        project, material = await _seed(db)
        await db.execute(
            "UPDATE projects SET updated_at = '2000-01-01 00:00:00' WHERE id = ?", (project.id,)
        )
        await db.commit()

        assert await delete_card(db, material.cards[0].id) is True
        assert (await get_project(db, project.id)).updated_at != "2000-01-01 00:00:00"
        assert [c.title for c in (await get_material(db, material.id)).cards] == ["a = ?"]
        assert await delete_card(db, material.cards[0].id) is False

    run_db(tmp_path, scenario)


def test_summary_variants_can_be_cleared(tmp_path):
    async def scenario(db):
        project = await create_project(db, ProjectCreate(user_id="u1", title="História"))
        material = await create_material(
            db,
            project.id,
            MaterialCreate(name="Era Vargas", summary="1930-1945", summary_brief="Estado Novo"),
        )
        edited = await update_material_content(
            db, material.id, MaterialUpdate(summary_brief=None, name=None, summary=None)
        )
        assert edited.summary_brief is None
        assert edited.name == "Era Vargas"
        assert edited.summary == "1930-1945"

        # fields left out of the update are untouched
        edited = await update_material_content(db, material.id, MaterialUpdate(summary_full="Longo"))
        assert edited.summary_full == "Longo"
        assert edited.name == "Era Vargas"

    run_db(tmp_path, scenario)


def test_preferences_stored_per_user(tmp_path):
    async def scenario(db):
        defaults = await get_preferences(db, "u1")
        assert defaults.preferred_format.value == "flashcards"
        assert defaults.session_length.value == "medium"
        assert defaults.time_alerts is True

        saved = await set_preferences(
            db, "u1", PreferencesUpdate(session_length="short", focus_mode=True)
        )
        assert saved.session_length.value == "short"
        assert saved.focus_mode is True
        assert saved.summary_level.value == "medium"

        saved = await set_preferences(db, "u1", PreferencesUpdate(session_length="long"))
        assert saved.session_length.value == "long"
        assert saved.focus_mode is True
        assert (await get_preferences(db, "u2")).session_length.value == "medium"

    run_db(tmp_path, scenario)
