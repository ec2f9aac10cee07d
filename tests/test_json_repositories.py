"""Tests for the JSON file backed stores."""

import json
from datetime import UTC, date, datetime

import pytest

from portrait_studio.adapters.json_file_store import JsonFileStore
from portrait_studio.adapters.json_usage_repository import JsonUsageRepository
from portrait_studio.adapters.json_user_repository import JsonUserRepository
from portrait_studio.domain.errors import StorageUnreadableError
from portrait_studio.domain.models import UserRecord, UserStatus


def test_ensure_initializes_missing_file(tmp_path) -> None:
    store = JsonFileStore(tmp_path / "nested" / "users.json")

    store.ensure()

    assert json.loads(store.path.read_text()) == {}


def test_ensure_resets_malformed_file(tmp_path) -> None:
    path = tmp_path / "usage.json"
    path.write_text("{not json")
    store = JsonFileStore(path)

    store.ensure()

    assert store.read() == {}
    assert json.loads(path.read_text()) == {}


def test_ensure_resets_non_mapping_document(tmp_path) -> None:
    path = tmp_path / "users.json"
    path.write_text("[1, 2, 3]")
    store = JsonFileStore(path)

    store.ensure()

    assert store.read() == {}


def test_ensure_keeps_existing_document(tmp_path) -> None:
    path = tmp_path / "users.json"
    path.write_text(json.dumps({"1": {"status": "approved"}}))
    store = JsonFileStore(path)

    store.ensure()

    assert store.read() == {"1": {"status": "approved"}}


def test_user_repository_writes_camel_case_file_format(tmp_path) -> None:
    store = JsonFileStore(tmp_path / "users.json")
    repository = JsonUserRepository(store)
    requested_at = datetime(2026, 10, 18, 12, 0, tzinfo=UTC)

    repository.save_user(
        UserRecord(
            user_id="42",
            status=UserStatus.PENDING,
            display_name="aria",
            requested_at=requested_at,
        )
    )

    raw = json.loads(store.path.read_text())
    assert raw == {
        "42": {
            "status": "pending",
            "username": "aria",
            "requestedAt": requested_at.isoformat(),
        }
    }
    assert repository.get_user("42") == UserRecord(
        user_id="42",
        status=UserStatus.PENDING,
        display_name="aria",
        requested_at=requested_at,
    )


def test_user_repository_reads_legacy_rows(tmp_path) -> None:
    path = tmp_path / "users.json"
    path.write_text(
        json.dumps(
            {
                "1": {
                    "status": "approved",
                    "username": "one",
                    "requestedAt": "2025-01-02T03:04:05.000Z",
                },
                "2": {"status": "denied"},
            }
        )
    )
    repository = JsonUserRepository(JsonFileStore(path))

    users = repository.list_users()

    assert [user.user_id for user in users] == ["1", "2"]
    assert users[0].status == UserStatus.APPROVED
    assert users[0].requested_at.year == 2025
    assert users[1].status == UserStatus.DENIED
    assert users[1].display_name is None
    assert repository.get_user("3") is None


def test_usage_repository_nests_counts_by_day(tmp_path) -> None:
    store = JsonFileStore(tmp_path / "usage.json")
    repository = JsonUsageRepository(store)
    day = date(2026, 10, 18)

    repository.add_count(day, "42", 4)
    total = repository.add_count(day, "42", 2)
    repository.add_count(date(2026, 10, 19), "42", 1)

    assert total == 6
    assert repository.get_count(day, "42") == 6
    assert repository.get_count(day, "7") == 0
    assert json.loads(store.path.read_text()) == {
        "2026-10-18": {"42": 6},
        "2026-10-19": {"42": 1},
    }


def test_usage_repository_survives_reopen(tmp_path) -> None:
    path = tmp_path / "usage.json"
    JsonUsageRepository(JsonFileStore(path)).add_count(date(2026, 1, 1), "1", 3)

    reopened = JsonUsageRepository(JsonFileStore(path))

    assert reopened.get_count(date(2026, 1, 1), "1") == 3


def test_usage_repository_refuses_to_overwrite_corrupt_file(tmp_path) -> None:
    path = tmp_path / "usage.json"
    original = json.dumps({"2026-10-17": {"1": 5}, "2026-10-18": {"2": 9}})
    path.write_text(original[:-1])
    repository = JsonUsageRepository(JsonFileStore(path))

    with pytest.raises(StorageUnreadableError):
        repository.add_count(date(2026, 10, 18), "3", 1)
    with pytest.raises(StorageUnreadableError):
        repository.get_count(date(2026, 10, 18), "2")

    assert path.read_text() == original[:-1]


def test_user_repository_refuses_to_overwrite_corrupt_file(tmp_path) -> None:
    path = tmp_path / "users.json"
    path.write_text('{"1": {"status": "approved"')
    repository = JsonUserRepository(JsonFileStore(path))

    with pytest.raises(StorageUnreadableError):
        repository.save_user(
            UserRecord(
                user_id="2",
                status=UserStatus.PENDING,
                display_name="mira",
                requested_at=datetime(2026, 10, 18, tzinfo=UTC),
            )
        )

    assert path.read_text() == '{"1": {"status": "approved"'


def test_store_rejects_non_mapping_after_startup(tmp_path) -> None:
    path = tmp_path / "users.json"
    path.write_text("[1, 2, 3]")

    with pytest.raises(StorageUnreadableError, match="JSON object"):
        JsonFileStore(path).read()


def test_store_reads_absent_file_as_empty(tmp_path) -> None:
    assert JsonFileStore(tmp_path / "usage.json").read() == {}
