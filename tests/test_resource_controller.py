"""Tests for the generic list/create/edit/delete workflow."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from portfolio_admin.api.gateway import SESSION_EXPIRED_MESSAGE
from portfolio_admin.constants.messages import FILE_UNREADABLE, UNREACHABLE
from portfolio_admin.constants.resource_schemas import (
    BLOGS,
    EDITABLE_SCHEMAS,
    EDUCATION,
    EXPERIENCE,
    MESSAGES,
    PROJECTS,
    SKILLS,
)
from portfolio_admin.services.bootstrap import build_services
from portfolio_admin.services.resource_controller import ResourceController, as_records


@pytest.fixture
def make_controller(make_region):
    """Factory for a controller drawing into its own recording region."""

    def _build(harness, schema=SKILLS):
        region = make_region()
        return ResourceController(schema, harness.context, region), region

    return _build


def test_as_records_treats_non_arrays_as_empty() -> None:
    assert as_records({"error": "boom"}) == []
    assert as_records(None) == []
    assert as_records([{"id": 1}, "junk"]) == [{"id": 1}]


class TestList:
    @pytest.mark.anyio
    async def test_renders_one_card_per_record(self, harness, backend, make_controller) -> None:
        backend.seed("skills", {"id": "1", "name": "Python", "category": "Lang", "level": 90})
        controller, region = make_controller(harness)

        records = await controller.list()

        assert records == backend.collections["skills"]
        [card] = region.renders[-1]
        assert card.record_id == "1"
        assert card.content.title == "Python"
        assert [a.action for a in card.actions] == ["edit", "delete"]

    @pytest.mark.anyio
    async def test_error_json_on_http_500_renders_empty_state(
        self, harness, backend, make_controller
    ) -> None:
        # The body parses, it just is not an array.
        backend.seed("skills", {"id": "1", "name": "Go"})
        controller, region = make_controller(harness)
        await controller.list()
        backend.broken.add("skills")

        assert await controller.list() == []
        assert region.renders[-1] == []
        assert harness.notifications.shown == []

    @pytest.mark.anyio
    @pytest.mark.parametrize("schema", [*EDITABLE_SCHEMAS, MESSAGES], ids=lambda s: s.kind)
    @pytest.mark.parametrize("payload", [{"error": "boom"}, "text", 42, {}])
    async def test_every_kind_tolerates_non_array(
        self, make_harness, schema, payload, make_controller
    ) -> None:
        h = make_harness(httpx.MockTransport(lambda request: httpx.Response(200, json=payload)))
        controller, region = make_controller(h, schema)

        assert await controller.list() == []
        assert region.renders == [[]]
        assert h.notifications.shown == []

    @pytest.mark.anyio
    async def test_transport_failure_keeps_previous_rendering(
        self, make_harness, make_controller
    ) -> None:
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            if calls == 1:
                return httpx.Response(200, json=[{"id": "1", "name": "Go"}])
            raise httpx.ConnectError("refused", request=request)

        h = make_harness(httpx.MockTransport(handler))
        controller, region = make_controller(h)

        await controller.list()
        assert await controller.list() is None

        assert len(region.renders) == 1
        assert h.last_notification == ("Couldn't load skills. Please try again.", "error")

    @pytest.mark.anyio
    @pytest.mark.parametrize(
        ("status", "text"),
        [(502, "<html>Bad Gateway</html>"), (503, ""), (200, "not json")],
        ids=["html-502", "empty-503", "garbage-200"],
    )
    async def test_unparseable_body_keeps_previous_rendering(
        self, make_harness, make_controller, status, text
    ) -> None:
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            if calls == 1:
                return httpx.Response(200, json=[{"id": "1", "name": "Go"}])
            return httpx.Response(status, text=text)

        h = make_harness(httpx.MockTransport(handler))
        controller, region = make_controller(h)

        await controller.list()
        assert await controller.list() is None

        assert len(region.renders) == 1
        assert [card.record_id for card in region.renders[0]] == ["1"]
        assert h.last_notification == ("Couldn't load skills. Please try again.", "error")

    @pytest.mark.anyio
    async def test_load_failure_after_session_expiry_keeps_expiry_notice(
        self, make_harness, make_controller
    ) -> None:
        h = make_harness(httpx.MockTransport(lambda request: httpx.Response(401, text="")))
        controller, region = make_controller(h)

        assert await controller.list() is None

        assert region.renders == []
        assert h.context.gateway.session_expired
        assert h.notifications.shown == [(SESSION_EXPIRED_MESSAGE, "error")]


class TestForms:
    @pytest.mark.anyio
    async def test_create_form_is_blank(self, harness, make_controller) -> None:
        controller, _ = make_controller(harness)
        controller.open_create_form()

        title, body = harness.modal_view.shown[-1]
        assert title == "Add New Skill"
        assert body.values == {"name": "", "category": "", "level": ""}
        assert [a.label for a in body.actions] == ["Add Skill"]

    @pytest.mark.anyio
    async def test_education_labels(self, harness, make_controller) -> None:
        controller, _ = make_controller(harness, EDUCATION)
        controller.open_create_form()
        title, body = harness.modal_view.shown[-1]
        assert title == "Add Education"
        assert body.actions[0].label == "Add"

    @pytest.mark.anyio
    async def test_edit_form_reads_fresh_record(self, harness, backend, make_controller) -> None:
        backend.seed(
            "projects",
            {"id": "7", "title": "Site", "description": "D", "techStack": ["React", "Node"]},
        )
        controller, _ = make_controller(harness, PROJECTS)

        await controller.open_edit_form("7")

        title, body = harness.modal_view.shown[-1]
        assert title == "Edit Project"
        assert body.values["techStack"] == "React, Node"
        assert body.actions[0].label == "Update Project"
        assert backend.calls("GET", "/api/projects")

    @pytest.mark.anyio
    async def test_edit_of_missing_record_is_noop(self, harness, backend, make_controller) -> None:
        controller, _ = make_controller(harness)

        assert await controller.open_edit_form("404") is None
        assert harness.modal_view.shown == []
        assert harness.notifications.shown == []

    @pytest.mark.anyio
    async def test_edit_with_unparseable_collection_opens_nothing(
        self, make_harness, make_controller
    ) -> None:
        bad_gateway = httpx.Response(502, text="<html>Bad Gateway</html>")
        h = make_harness(httpx.MockTransport(lambda request: bad_gateway))
        controller, _ = make_controller(h)

        assert await controller.open_edit_form("1") is None
        assert h.modal_view.shown == []
        assert h.last_notification == (UNREACHABLE, "error")


class TestSave:
    @pytest.mark.anyio
    async def test_add_skill_end_to_end(
        self, harness, backend, make_region, counts_view
    ) -> None:
        backend.seed("messages", {"id": "m1", "read": False})
        region = make_region()
        services = build_services(
            harness.context, regions={"skills": region}, counts_view=counts_view
        )
        await services.dispatcher.dispatch("skills", "add")
        assert harness.context.modal.is_open

        await harness.context.modal.submit(
            0, {"name": "Python", "category": "Language", "level": "80"}
        )

        [(_, _, body)] = backend.calls("POST", "/api/skills")
        assert body == {"name": "Python", "category": "Language", "level": 80}
        assert harness.last_notification == ("Skill added.", "success")
        assert not harness.context.modal.is_open
        assert [c.content.title for c in region.renders[-1]] == ["Python"]
        assert counts_view.rendered[-1]["skills"] == 1
        assert counts_view.rendered[-1]["messages"] == 1

    @pytest.mark.anyio
    async def test_update_uses_put(self, harness, backend, make_controller) -> None:
        backend.seed("skills", {"id": "3", "name": "Go", "category": "Lang", "level": 50})
        controller, _ = make_controller(harness)

        await controller.open_edit_form("3")
        await harness.context.modal.submit(0, {"name": "Go", "category": "Lang", "level": "75"})

        [(_, _, body)] = backend.calls("PUT", "/api/skills/3")
        assert body["level"] == 75
        assert harness.last_notification == ("Skill updated.", "success")

    @pytest.mark.anyio
    async def test_failure_keeps_modal_open(self, make_harness, make_controller) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "POST":
                return httpx.Response(400, json={"success": False, "error": "Name taken"})
            return httpx.Response(200, json=[])

        h = make_harness(httpx.MockTransport(handler))
        controller, region = make_controller(h)
        controller.open_create_form()

        assert not await h.context.modal.submit(0, {"name": "Py", "category": "L", "level": "1"})
        assert h.context.modal.is_open
        assert h.last_notification == ("Name taken", "error")
        assert region.renders == []

    @pytest.mark.anyio
    async def test_failure_without_error_text_uses_generic_message(
        self, make_harness, make_controller
    ) -> None:
        h = make_harness(httpx.MockTransport(lambda request: httpx.Response(500, text="down")))
        controller, _ = make_controller(h, PROJECTS)

        await controller.save(None, {"title": "T"})

        assert h.last_notification == (
            "Couldn't save that project. Please try again. (HTTP 500)",
            "error",
        )

    @pytest.mark.anyio
    async def test_late_success_does_not_close_replacement_form(
        self, harness, backend, make_controller
    ) -> None:
        controller, _ = make_controller(harness)
        stale = controller.open_create_form()
        controller.open_create_form()

        await controller.save(None, {"name": "A", "category": "B", "level": "1"}, modal_token=stale)

        assert harness.context.modal.is_open

    @pytest.mark.anyio
    async def test_project_is_multipart(self, harness, backend, make_controller) -> None:
        controller, _ = make_controller(harness, PROJECTS)
        await controller.save(
            None,
            {"title": "Site", "description": "D", "techStack": "React, Node", "date": "2024-06"},
        )
        [(_, _, body)] = backend.calls("POST", "/api/projects")
        assert body["title"] == "Site"
        assert json.loads(body["techStack"]) == ["React", "Node"]

    @pytest.mark.anyio
    async def test_blog_with_image(self, harness, backend, tmp_path: Path, make_controller) -> None:
        cover = tmp_path / "cover.png"
        cover.write_bytes(b"\x89PNG")
        controller, _ = make_controller(harness, BLOGS)

        await controller.save(None, {"title": "Hello", "content": "Body", "image": str(cover)})

        [(_, _, body)] = backend.calls("POST", "/api/blogs")
        assert body["image"] == "file:cover.png"
        assert harness.last_notification == ("Blog added.", "success")

    @pytest.mark.anyio
    async def test_unreadable_image_is_reported(
        self, harness, backend, tmp_path: Path, make_controller
    ) -> None:
        controller, _ = make_controller(harness, BLOGS)
        ok = await controller.save(None, {"title": "Hi", "image": str(tmp_path / "nope.png")})

        assert not ok
        assert backend.calls("POST") == []
        assert harness.last_notification == (FILE_UNREADABLE, "error")

    @pytest.mark.anyio
    async def test_current_experience_sends_blank_end_date(
        self, harness, backend, make_controller
    ) -> None:
        controller, _ = make_controller(harness, EXPERIENCE)
        await controller.save(
            None,
            {
                "title": "Engineer",
                "company": "Acme",
                "location": "Remote",
                "startDate": "2023-01",
                "endDate": "2024-01",
                "current": True,
                "achievements": "Led, Shipped",
            },
        )
        [(_, _, body)] = backend.calls("POST", "/api/experience")
        assert body["endDate"] == ""
        assert json.loads(body["achievements"]) == ["Led", "Shipped"]


class TestRemove:
    @pytest.mark.anyio
    async def test_declined_confirmation_sends_nothing(self, make_harness, make_controller) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"success": True})

        h = make_harness(httpx.MockTransport(handler), confirm_answer=False)
        controller, _ = make_controller(h)

        assert not await controller.remove("1")
        assert h.confirm.prompts == ["Delete this skill? This can't be undone."]
        assert seen == []

    @pytest.mark.anyio
    async def test_confirmed_delete(self, harness, backend, make_controller) -> None:
        backend.seed("education", {"id": "1", "degree": "BSc"}, {"id": "2", "degree": "MSc"})
        controller, region = make_controller(harness, EDUCATION)

        assert await controller.remove("1")

        assert backend.calls("DELETE", "/api/education/1")
        assert harness.last_notification == ("Education entry deleted.", "success")
        assert [card.record_id for card in region.renders[-1]] == ["2"]

    @pytest.mark.anyio
    async def test_failed_delete_reports_error(self, harness, backend, make_controller) -> None:
        controller, _ = make_controller(harness)
        assert not await controller.remove("missing")
        assert harness.last_notification == ("Not found", "error")
