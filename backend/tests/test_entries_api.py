"""
Mood Journal — Entry API Tests (FastAPI app + in-memory SQLite)
=================================================================

What:  Exercises the five /api/journal endpoints end to end.
How:   HTTPX AsyncClient over ASGITransport; real SQLAlchemy against an
       in-memory SQLite database; real JWT session tokens.

What we test:
    ✅ Owner is always the caller, whatever the body says
    ✅ Other users get 404 (never 200/403) for get, update, delete
    ✅ Partial update leaves unspecified fields alone and bumps updatedAt
    ✅ List is newest first, stable, and tie-broken by id
    ✅ Checklist round trip
    ✅ Delete twice → 200 then 404
    ✅ Validation failures → 400 with {"error": ...}
    ✅ Missing / invalid tokens → 401 with {"error": ...}
"""

import json
import uuid
from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from httpx import ASGITransport, AsyncClient

from moodjournal.auth.session import JWTSessionProvider
from moodjournal.main import create_app

ENTRIES = "/api/journal/entries"


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


async def _create(client, headers, **body):
    payload = {"title": "Day 1", "content": "Good day"}
    payload.update(body)
    response = await client.post(ENTRIES, json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateEntry:

    @pytest.mark.asyncio
    async def test_create_note_scenario(self, test_client, auth_headers):
        """POST {title, content, mood} → 201, generated id, type note, createdAt == updatedAt."""
        response = await test_client.post(
            ENTRIES,
            json={"title": "Day 1", "content": "Good day", "mood": "happy"},
            headers=auth_headers("user-1"),
        )

        assert response.status_code == 201
        body = response.json()
        uuid.UUID(body["id"])
        assert body["title"] == "Day 1"
        assert body["content"] == "Good day"
        assert body["mood"] == "happy"
        assert body["type"] == "note"
        assert body["userId"] == "user-1"
        assert _ts(body["createdAt"]) == _ts(body["updatedAt"])

    @pytest.mark.asyncio
    async def test_owner_comes_from_session_not_body(self, test_client, auth_headers):
        body = await _create(
            test_client,
            auth_headers("alice"),
            userId="mallory",
            ownerId="mallory",
            user_id="mallory",
            id=str(uuid.uuid4()),
        )
        assert body["userId"] == "alice"

        fetched = await test_client.get(f"{ENTRIES}/{body['id']}", headers=auth_headers("alice"))
        assert fetched.status_code == 200
        assert fetched.json()["userId"] == "alice"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("title", ["", "   ", "\n\t"])
    async def test_blank_title_rejected(self, test_client, auth_headers, title):
        response = await test_client.post(
            ENTRIES, json={"title": title, "content": "x"}, headers=auth_headers()
        )
        assert response.status_code == 400
        assert isinstance(response.json()["error"], str)

    @pytest.mark.asyncio
    async def test_missing_content_rejected(self, test_client, auth_headers):
        response = await test_client.post(ENTRIES, json={"title": "Day 1"}, headers=auth_headers())
        assert response.status_code == 400
        assert response.json() == {"error": "Title and content are required"}

    @pytest.mark.asyncio
    async def test_invalid_type_rejected(self, test_client, auth_headers):
        response = await test_client.post(
            ENTRIES,
            json={"title": "Groceries", "content": "milk", "type": "list"},
            headers=auth_headers(),
        )
        assert response.status_code == 400
        assert response.json() == {"error": 'Type must be "note" or "checklist"'}

    @pytest.mark.asyncio
    async def test_unknown_mood_rejected(self, test_client, auth_headers):
        response = await test_client.post(
            ENTRIES,
            json={"title": "Day 1", "content": "x", "mood": "furious"},
            headers=auth_headers(),
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "content",
        ["milk, eggs", '[{"text": "milk"}]', "[" * 100000],
    )
    async def test_checklist_content_must_decode(self, test_client, auth_headers, content):
        response = await test_client.post(
            ENTRIES,
            json={"title": "Groceries", "content": content, "type": "checklist"},
            headers=auth_headers(),
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_wrongly_typed_field_is_400(self, test_client, auth_headers):
        response = await test_client.post(
            ENTRIES,
            json={"title": ["not", "a", "string"], "content": "x"},
            headers=auth_headers(),
        )
        assert response.status_code == 400
        assert "error" in response.json()

    @pytest.mark.asyncio
    async def test_unknown_fields_ignored(self, test_client, auth_headers):
        body = await _create(test_client, auth_headers(), weather="sunny")
        assert "weather" not in body


class TestChecklistRoundTrip:

    @pytest.mark.asyncio
    async def test_checklist_round_trip(self, test_client, auth_headers):
        items = [{"text": "buy milk", "completed": False}]
        created = await _create(
            test_client,
            auth_headers(),
            title="Groceries",
            content=json.dumps(items),
            type="checklist",
        )

        response = await test_client.get(f"{ENTRIES}/{created['id']}", headers=auth_headers())
        assert response.status_code == 200
        assert response.json()["type"] == "checklist"
        assert json.loads(response.json()["content"]) == items

    @pytest.mark.asyncio
    async def test_toggle_by_replacing_content(self, test_client, auth_headers):
        items = [{"text": "buy milk", "completed": False}, {"text": "call mum", "completed": False}]
        created = await _create(
            test_client, auth_headers(), title="Todo", content=json.dumps(items), type="checklist"
        )

        items[1]["completed"] = True
        response = await test_client.put(
            f"{ENTRIES}/{created['id']}",
            json={"content": json.dumps(items)},
            headers=auth_headers(),
        )
        assert response.status_code == 200
        assert json.loads(response.json()["content"]) == items

    @pytest.mark.asyncio
    async def test_switching_note_to_checklist_requires_checklist_content(self, test_client, auth_headers):
        created = await _create(test_client, auth_headers(), content="plain text")
        response = await test_client.put(
            f"{ENTRIES}/{created['id']}", json={"type": "checklist"}, headers=auth_headers()
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_deeply_nested_content_on_update_is_400(self, test_client, auth_headers):
        created = await _create(
            test_client, auth_headers(), title="Todo", content="[]", type="checklist"
        )
        response = await test_client.put(
            f"{ENTRIES}/{created['id']}", json={"content": "[" * 100000}, headers=auth_headers()
        )
        assert response.status_code == 400
        assert "error" in response.json()


class TestOwnership:

    @pytest.mark.asyncio
    async def test_other_user_gets_404(self, test_client, auth_headers):
        created = await _create(test_client, auth_headers("alice"))
        url = f"{ENTRIES}/{created['id']}"

        assert (await test_client.get(url, headers=auth_headers("bob"))).status_code == 404
        assert (await test_client.put(url, json={"mood": "sad"}, headers=auth_headers("bob"))).status_code == 404
        assert (await test_client.request("DELETE", url, json={}, headers=auth_headers("bob"))).status_code == 404

        # Alice's entry is untouched.
        response = await test_client.get(url, headers=auth_headers("alice"))
        assert response.status_code == 200
        assert response.json()["mood"] is None

    @pytest.mark.asyncio
    async def test_foreign_and_missing_look_identical(self, test_client, auth_headers):
        created = await _create(test_client, auth_headers("alice"))
        foreign = await test_client.get(f"{ENTRIES}/{created['id']}", headers=auth_headers("bob"))
        missing = await test_client.get(f"{ENTRIES}/{uuid.uuid4()}", headers=auth_headers("bob"))
        assert foreign.status_code == missing.status_code == 404
        assert foreign.json() == missing.json() == {"error": "Journal entry not found"}

    @pytest.mark.asyncio
    async def test_invalid_patch_on_foreign_entry_is_404(self, test_client, auth_headers):
        created = await _create(test_client, auth_headers("alice"))
        response = await test_client.put(
            f"{ENTRIES}/{created['id']}", json={"type": "list"}, headers=auth_headers("bob")
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_list_only_returns_own_entries(self, test_client, auth_headers):
        await _create(test_client, auth_headers("alice"), title="A")
        await _create(test_client, auth_headers("bob"), title="B")

        response = await test_client.get(ENTRIES, headers=auth_headers("alice"))
        assert [e["title"] for e in response.json()] == ["A"]

    @pytest.mark.asyncio
    async def test_malformed_id_is_404(self, test_client, auth_headers):
        response = await test_client.get(f"{ENTRIES}/not-a-uuid", headers=auth_headers())
        assert response.status_code == 404


class TestPartialUpdate:

    @pytest.mark.asyncio
    async def test_mood_only_update_keeps_other_fields(self, test_client, auth_headers):
        created = await _create(test_client, auth_headers(), title="Day 1", content="Good day")

        response = await test_client.put(
            f"{ENTRIES}/{created['id']}", json={"mood": "happy"}, headers=auth_headers()
        )
        assert response.status_code == 200
        updated = response.json()
        assert updated["mood"] == "happy"
        assert updated["title"] == created["title"]
        assert updated["content"] == created["content"]
        assert updated["type"] == created["type"]
        assert updated["createdAt"] == created["createdAt"]
        assert _ts(updated["updatedAt"]) > _ts(created["updatedAt"])

    @pytest.mark.asyncio
    async def test_empty_patch_still_bumps_updated_at(self, test_client, auth_headers):
        created = await _create(test_client, auth_headers())
        later = datetime(2099, 1, 1, tzinfo=timezone.utc)

        with patch("moodjournal.database.utcnow", return_value=later):
            response = await test_client.put(f"{ENTRIES}/{created['id']}", json={}, headers=auth_headers())

        assert response.status_code == 200
        assert _ts(response.json()["updatedAt"]) == later
        assert response.json()["title"] == created["title"]

    @pytest.mark.asyncio
    async def test_explicit_null_mood_clears_it(self, test_client, auth_headers):
        created = await _create(test_client, auth_headers(), mood="sad")
        response = await test_client.put(
            f"{ENTRIES}/{created['id']}", json={"mood": None}, headers=auth_headers()
        )
        assert response.status_code == 200
        assert response.json()["mood"] is None

    @pytest.mark.asyncio
    async def test_update_rejects_bad_type_and_blank_title(self, test_client, auth_headers):
        created = await _create(test_client, auth_headers())
        url = f"{ENTRIES}/{created['id']}"

        assert (await test_client.put(url, json={"type": "list"}, headers=auth_headers())).status_code == 400
        assert (await test_client.put(url, json={"type": None}, headers=auth_headers())).status_code == 400
        assert (await test_client.put(url, json={"title": "  "}, headers=auth_headers())).status_code == 400

        unchanged = await test_client.get(url, headers=auth_headers())
        assert unchanged.json()["updatedAt"] == created["updatedAt"]

    @pytest.mark.asyncio
    async def test_update_missing_entry_is_404(self, test_client, auth_headers):
        response = await test_client.put(
            f"{ENTRIES}/{uuid.uuid4()}", json={"title": "x"}, headers=auth_headers()
        )
        assert response.status_code == 404


class TestListEntries:

    @pytest.mark.asyncio
    async def test_newest_first(self, test_client, auth_headers):
        stamps = [
            datetime(2026, 1, 1, tzinfo=timezone.utc),
            datetime(2026, 1, 3, tzinfo=timezone.utc),
            datetime(2026, 1, 2, tzinfo=timezone.utc),
        ]
        for index, stamp in enumerate(stamps):
            with patch("moodjournal.database.utcnow", return_value=stamp):
                await _create(test_client, auth_headers(), title=f"entry {index}")

        response = await test_client.get(ENTRIES, headers=auth_headers())
        assert response.status_code == 200
        assert [e["title"] for e in response.json()] == ["entry 1", "entry 2", "entry 0"]

    @pytest.mark.asyncio
    async def test_ties_broken_by_id_and_stable(self, test_client, auth_headers):
        same = datetime(2026, 1, 20, 8, 0, tzinfo=timezone.utc)
        with patch("moodjournal.database.utcnow", return_value=same):
            ids = [(await _create(test_client, auth_headers(), title=f"t{i}"))["id"] for i in range(5)]

        first = await test_client.get(ENTRIES, headers=auth_headers())
        second = await test_client.get(ENTRIES, headers=auth_headers())

        expected = sorted(ids, key=lambda value: uuid.UUID(value).hex, reverse=True)
        assert [e["id"] for e in first.json()] == expected
        assert first.json() == second.json()

    @pytest.mark.asyncio
    async def test_empty_list(self, test_client, auth_headers):
        response = await test_client.get(ENTRIES, headers=auth_headers("nobody"))
        assert response.status_code == 200
        assert response.json() == []


class TestDeleteEntry:

    @pytest.mark.asyncio
    async def test_delete_twice(self, test_client, auth_headers):
        created = await _create(test_client, auth_headers())
        url = f"{ENTRIES}/{created['id']}"

        first = await test_client.request("DELETE", url, json={}, headers=auth_headers())
        second = await test_client.request("DELETE", url, json={}, headers=auth_headers())

        assert first.status_code == 200
        assert first.json() == {"success": True}
        assert second.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_nonexistent(self, test_client, auth_headers):
        response = await test_client.request(
            "DELETE", f"{ENTRIES}/{uuid.uuid4()}", json={}, headers=auth_headers()
        )
        assert response.status_code == 404
        assert response.json() == {"error": "Journal entry not found"}

    @pytest.mark.asyncio
    async def test_deleted_entry_gone_from_list(self, test_client, auth_headers):
        keep = await _create(test_client, auth_headers(), title="keep")
        drop = await _create(test_client, auth_headers(), title="drop")
        await test_client.request("DELETE", f"{ENTRIES}/{drop['id']}", json={}, headers=auth_headers())

        response = await test_client.get(ENTRIES, headers=auth_headers())
        assert [e["id"] for e in response.json()] == [keep["id"]]


class TestAuthentication:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", ENTRIES),
            ("POST", ENTRIES),
            ("GET", f"{ENTRIES}/{uuid.uuid4()}"),
            ("PUT", f"{ENTRIES}/{uuid.uuid4()}"),
            ("DELETE", f"{ENTRIES}/{uuid.uuid4()}"),
        ],
    )
    async def test_missing_token_is_401(self, test_client, method, path):
        response = await test_client.request(method, path, json={"title": "x", "content": "y"})
        assert response.status_code == 401
        assert isinstance(response.json()["error"], str)
        assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_invalid_token_is_401(self, test_client):
        response = await test_client.get(ENTRIES, headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_non_bearer_scheme_is_401(self, test_client):
        response = await test_client.get(ENTRIES, headers={"Authorization": "Basic dXNlcjpwYXNz"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_unauthenticated_create_writes_nothing(self, test_client, auth_headers):
        await test_client.post(ENTRIES, json={"title": "x", "content": "y"})
        response = await test_client.get(ENTRIES, headers=auth_headers())
        assert response.json() == []


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_reports_database(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["auth"] == "configured"

    @pytest.mark.asyncio
    async def test_health_degraded_without_auth_secret(self):
        app = create_app(session_provider=JWTSessionProvider(secret=""))
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["auth"] == "not configured"

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client, auth_headers):
        response = await test_client.get(ENTRIES, headers={**auth_headers(), "X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"
