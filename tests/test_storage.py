import asyncio
import json

import pytest

from core.constants import LEGACY_AUTOROLE_KEY, RecordSet, Status
from core.storage import LogChannelStore, MessageStore, StateStore


@pytest.mark.asyncio
async def test_missing_files_load_as_empty(tmp_path):
    store = StateStore(tmp_path)

    await store.load_all()

    for name in store.names:
        assert len(store[name]) == 0


@pytest.mark.asyncio
async def test_invalid_json_loads_as_empty(tmp_path):
    (tmp_path / "autoroles.json").write_text("{not json", encoding="utf-8")
    (tmp_path / "serverstatus.json").write_text('["a list"]', encoding="utf-8")
    store = StateStore(tmp_path)

    await store.load_all()

    assert len(store.autoroles) == 0
    assert len(store.statuses) == 0


@pytest.mark.asyncio
async def test_invites_file_is_created_on_load(tmp_path):
    store = StateStore(tmp_path)

    await store.invites.load()

    path = tmp_path / "invites.json"
    assert json.loads(path.read_text(encoding="utf-8")) == {"invites": {}}


@pytest.mark.asyncio
async def test_saved_records_survive_reload(tmp_path):
    store = StateStore(tmp_path)
    store.autoroles.set(1, "99")
    store.statuses.set(1, Status.IDLE)
    store.messages.set(MessageStore.key_for(1, "Rules"), "Be nice")
    store.prefixes.set(1, "?")
    await store.flush_all()

    reloaded = StateStore(tmp_path)
    await reloaded.load_all()

    assert reloaded.autoroles.role_for(1) == 99
    assert reloaded.statuses.status_for(1) == Status.IDLE
    assert reloaded.messages.get("1:rules") == "Be nice"
    assert reloaded.prefixes.prefix_for(1, "!") == "?"


@pytest.mark.asyncio
async def test_empty_map_round_trips(tmp_path):
    store = StateStore(tmp_path)
    assert await store.flush(RecordSet.STATUSES)

    raw = json.loads((tmp_path / "serverstatus.json").read_text(encoding="utf-8"))
    assert raw == {"servers": {}}

    reloaded = StateStore(tmp_path)
    await reloaded.statuses.load()
    assert len(reloaded.statuses) == 0


@pytest.mark.asyncio
async def test_flush_unknown_record_set_returns_false(tmp_path):
    store = StateStore(tmp_path)
    assert await store.flush("nope") is False


@pytest.mark.asyncio
async def test_log_channels_accept_flat_and_wrapped_files(tmp_path):
    path = tmp_path / "logs.json"

    path.write_text(json.dumps({"1": "10"}), encoding="utf-8")
    flat = LogChannelStore(tmp_path)
    await flat.load()
    assert flat.channel_for(1) == 10

    path.write_text(json.dumps({"channels": {"2": "20"}}), encoding="utf-8")
    wrapped = LogChannelStore(tmp_path)
    await wrapped.load()
    assert wrapped.channel_for(2) == 20
    assert wrapped.channel_for(1) is None


@pytest.mark.asyncio
async def test_log_channels_are_written_wrapped(tmp_path):
    store = LogChannelStore(tmp_path)
    store.set(5, "50")
    await store.save()

    raw = json.loads((tmp_path / "logs.json").read_text(encoding="utf-8"))
    assert raw == {"channels": {"5": "50"}}


def test_autorole_falls_back_to_legacy_key(tmp_path):
    store = StateStore(tmp_path)
    store.autoroles.set(LEGACY_AUTOROLE_KEY, "77")
    store.autoroles.set(2, "88")

    assert store.autoroles.role_for(1) == 77
    assert store.autoroles.role_for(2) == 88


def test_status_defaults_and_seeding(tmp_path):
    store = StateStore(tmp_path)
    assert store.statuses.status_for(1) == Status.ONLINE

    assert store.statuses.ensure_default(1) is True
    store.statuses.set(1, Status.DND)
    assert store.statuses.ensure_default(1) is False
    assert store.statuses.status_for(1) == Status.DND


def test_message_keys_are_scoped_per_guild(tmp_path):
    store = StateStore(tmp_path).messages
    store.set(MessageStore.key_for(1, "b"), "x")
    store.set(MessageStore.key_for(1, "a"), "y")
    store.set(MessageStore.key_for(2, "c"), "z")

    assert store.keys_for(1) == ["a", "b"]
    assert store.keys_for(2) == ["c"]


def test_prefix_without_guild_is_default(tmp_path):
    store = StateStore(tmp_path).prefixes
    store.set(1, "?")
    assert store.prefix_for(None, "!") == "!"
    assert store.prefix_for(2, "!") == "!"


@pytest.mark.asyncio
async def test_concurrent_saves_leave_the_last_snapshot(tmp_path):
    store = StateStore(tmp_path).statuses

    async def change_and_save(index):
        store.set(index, Status.ALL[index % len(Status.ALL)])
        return await store.save()

    results = await asyncio.gather(*(change_and_save(i) for i in range(8)))

    assert all(results)
    raw = json.loads((tmp_path / "serverstatus.json").read_text(encoding="utf-8"))
    assert raw == store.encode()
    assert len(raw["servers"]) == 8
    assert not list(tmp_path.glob("*.tmp"))


@pytest.mark.asyncio
async def test_failed_save_keeps_memory_and_returns_false(tmp_path, caplog):
    not_a_dir = tmp_path / "data"
    not_a_dir.write_text("", encoding="utf-8")
    store = StateStore(not_a_dir)
    store.autoroles.set(1, "99")

    assert await store.autoroles.save() is False

    assert store.autoroles.data == {"1": "99"}
    assert "Error saving autoroles" in caplog.text


def test_autorole_disable_shadows_legacy_key(tmp_path):
    store = StateStore(tmp_path).autoroles
    store.set(LEGACY_AUTOROLE_KEY, "77")

    assert store.disable(1) is True
    assert store.role_for(1) is None
    assert store.role_for(2) == 77
    assert store.disable(1) is False


def test_autorole_disable_without_legacy_key_removes_entry(tmp_path):
    store = StateStore(tmp_path).autoroles
    store.set(1, "88")

    assert store.disable(1) is True
    assert 1 not in store
