"""
Account/note operations against a temporary JSON document.
"""
from __future__ import annotations

import json
import sys
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Make notes_api importable when running the tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from notes_api.repositories import DocumentRepository, JsonStorage  # noqa: E402


class FakeClock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture()
def clock():
    return FakeClock(datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture()
def repo(tmp_path, clock):
    return DocumentRepository(JsonStorage(tmp_path / "database.json"), clock=clock)


def test_create_and_find_account(repo):
    alice = repo.create_account("Alice", "a@x.com", "hash-a")
    bob = repo.create_account("Bob", "b@x.com", "hash-b")

    assert (alice.id, bob.id) == (1, 2)
    assert repo.find_account_by_email("a@x.com") == alice
    assert repo.find_account_by_id(2) == bob
    assert repo.find_account_by_email("A@x.com") is None
    assert repo.find_account_by_id(99) is None
    assert alice.profile_image is None


def test_repository_does_not_enforce_email_uniqueness(repo):
    first = repo.create_account("One", "dup@x.com", "h1")
    repo.create_account("Two", "dup@x.com", "h2")

    assert repo.find_account_by_email("dup@x.com").id == first.id


def test_account_updates(repo, clock):
    account = repo.create_account("Alice", "a@x.com", "hash")
    clock.advance(minutes=5)

    renamed = repo.update_account_name(account.id, "Alice B.")
    rehashed = repo.update_account_password_hash(account.id, "new-hash")
    imaged = repo.update_account_profile_image(account.id, "/uploads/avatar_1_x.jpg")

    assert renamed.name == "Alice B."
    assert rehashed.password_hash == "new-hash"
    assert imaged.profile_image == "/uploads/avatar_1_x.jpg"
    stored = repo.find_account_by_id(account.id)
    assert stored.name == "Alice B."
    assert stored.created_at == account.created_at


def test_account_updates_report_missing_account(repo):
    assert repo.update_account_name(42, "x") is None
    assert repo.update_account_password_hash(42, "x") is None
    assert repo.update_account_profile_image(42, "x") is None


def test_create_note_then_find_round_trip(repo):
    note = repo.create_note(1, "Groceries", "<p>milk &amp; eggs</p>")

    found = repo.find_note(note.id, 1)

    assert found.title == "Groceries"
    assert found.content == "<p>milk &amp; eggs</p>"
    assert found.created_at == found.updated_at
    assert found.user_id == 1


def test_note_ids_are_global_across_accounts(repo):
    a = repo.create_note(1, "a", "a")
    b = repo.create_note(2, "b", "b")
    c = repo.create_note(1, "c", "c")

    assert [a.id, b.id, c.id] == [1, 2, 3]


def test_find_note_is_scoped_by_owner(repo):
    note = repo.create_note(1, "private", "secret")

    assert repo.find_note(note.id, 2) is None
    assert repo.find_note(note.id, 1) is not None


def test_update_note_refreshes_updated_at(repo, clock):
    note = repo.create_note(1, "t", "c")
    clock.advance(hours=1)

    updated = repo.update_note(note.id, 1, "t2", "c2")

    assert updated.title == "t2" and updated.content == "c2"
    assert updated.created_at == note.created_at
    assert updated.updated_at > note.updated_at


def test_update_note_of_other_owner_is_not_found_and_untouched(repo, clock):
    note = repo.create_note(1, "mine", "original")
    clock.advance(minutes=1)

    assert repo.update_note(note.id, 2, "hijacked", "x") is None

    stored = repo.find_note(note.id, 1)
    assert stored.title == "mine"
    assert stored.content == "original"
    assert stored.updated_at == note.updated_at


def test_list_notes_orders_by_updated_at_desc(repo, clock):
    n1 = repo.create_note(1, "one", "1")  # T1
    clock.advance(minutes=1)
    n2 = repo.create_note(1, "two", "2")  # T2
    clock.advance(minutes=1)
    n3 = repo.create_note(1, "three", "3")  # T3
    repo.create_note(2, "other", "x")

    clock.advance(minutes=1)
    repo.update_note(n1.id, 1, "one", "1")
    clock.advance(minutes=1)
    repo.update_note(n3.id, 1, "three", "3")
    clock.advance(minutes=1)
    repo.update_note(n2.id, 1, "two", "2")

    ids = [n.id for n in repo.list_notes_for_account(1)]
    assert ids == [n2.id, n3.id, n1.id]


def test_list_notes_sorted_without_updates(repo, clock):
    first = repo.create_note(1, "a", "a")
    clock.advance(seconds=1)
    second = repo.create_note(1, "b", "b")

    assert [n.id for n in repo.list_notes_for_account(1)] == [second.id, first.id]
    assert repo.list_notes_for_account(3) == []


def test_delete_note_twice_reports_false(repo):
    note = repo.create_note(1, "t", "c")

    assert repo.delete_note(note.id, 2) is False
    assert repo.delete_note(note.id, 1) is True
    assert repo.delete_note(note.id, 1) is False
    assert repo.find_note(note.id, 1) is None


def test_count_notes_for_account(repo):
    repo.create_note(1, "a", "a")
    repo.create_note(1, "b", "b")
    repo.create_note(2, "c", "c")

    assert repo.count_notes_for_account(1) == 2
    assert repo.count_notes_for_account(2) == 1
    assert repo.count_notes_for_account(3) == 0


def test_persisted_layout(repo, tmp_path):
    account = repo.create_account("Alice", "a@x.com", "hash")
    repo.create_note(account.id, "t", "c")

    db = repo.storage.load()

    assert set(db) == {"users", "notes", "nextUserId", "nextNoteId"}
    assert db["nextUserId"] == 2 and db["nextNoteId"] == 2
    assert db["notes"][0]["user_id"] == account.id
    assert "profile_image" not in db["users"][0]


def test_concurrent_creates_do_not_lose_updates(tmp_path):
    repo = DocumentRepository(JsonStorage(tmp_path / "database.json"))
    errors: list[BaseException] = []

    def worker(owner: int) -> None:
        try:
            for i in range(5):
                repo.create_note(owner, f"note {i}", "body")
        except BaseException as exc:  # pragma: no cover - surfaced by the assert below
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(owner,)) for owner in range(1, 9)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    notes = repo.storage.load()["notes"]
    assert len(notes) == 40
    assert sorted(n["id"] for n in notes) == list(range(1, 41))


def _count_saves(storage: JsonStorage, monkeypatch) -> list:
    saves = []
    original_save = storage.save

    def counting_save(db):
        saves.append(db)
        original_save(db)

    monkeypatch.setattr(storage, "save", counting_save)
    return saves


def test_missing_targets_do_not_rewrite_document(repo, monkeypatch):
    account = repo.create_account("A", "a@x.com", "h")
    note = repo.create_note(account.id, "t", "c")
    saves = _count_saves(repo.storage, monkeypatch)

    assert repo.update_note(note.id, owner_id=99, title="x", content="y") is None
    assert repo.delete_note(999, owner_id=account.id) is False
    assert repo.update_account_name(42, "Ghost") is None

    assert saves == []


def test_create_account_if_email_free(repo):
    first = repo.create_account_if_email_free("A", "a@x.com", "h1")
    taken = repo.create_account_if_email_free("B", "a@x.com", "h2")

    assert first is not None and first.id == 1
    assert taken is None
    assert len(repo.storage.load()["users"]) == 1


def test_swap_profile_image_returns_previous_reference(repo):
    account = repo.create_account("A", "a@x.com", "h")

    updated, previous = repo.swap_account_profile_image(account.id, "/uploads/one.jpg")
    assert previous is None
    assert updated.profile_image == "/uploads/one.jpg"

    updated, previous = repo.swap_account_profile_image(account.id, "/uploads/two.jpg")
    assert previous == "/uploads/one.jpg"
    assert repo.find_account_by_id(account.id).profile_image == "/uploads/two.jpg"

    assert repo.swap_account_profile_image(99, "/uploads/x.jpg") is None


def test_list_notes_accepts_zulu_timestamps(tmp_path):
    db_path = tmp_path / "database.json"
    notes = [
        {"id": 1, "user_id": 1, "title": "old", "content": "c",
         "created_at": "2024-01-01T10:00:00.000Z", "updated_at": "2024-01-01T10:00:00.000Z"},
        {"id": 2, "user_id": 1, "title": "new", "content": "c",
         "created_at": "2024-01-01T09:00:00.000Z", "updated_at": "2024-01-02T08:30:00.000Z"},
        {"id": 3, "user_id": 1, "title": "mid", "content": "c",
         "created_at": "2024-01-01T11:00:00+00:00", "updated_at": "2024-01-01T11:00:00+00:00"},
    ]
    db_path.write_text(json.dumps({"users": [], "notes": notes, "nextUserId": 2, "nextNoteId": 4}), encoding="utf-8")
    repo = DocumentRepository(JsonStorage(db_path))

    assert [n.title for n in repo.list_notes_for_account(1)] == ["new", "mid", "old"]
