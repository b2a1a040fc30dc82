"""
DumbPad Backend — Notepad Registry Unit Tests
===============================================

What:  Self-healing, id generation and the create/rename/delete invariants.
How:   Real files in a temporary data directory; fault injection via
       unittest.mock where a failure has to be forced.
"""

import asyncio
import json
from unittest.mock import AsyncMock, patch

import pytest

from dumbpad.exceptions import InvalidOperationError, NotFoundError, StorageError
from dumbpad.services.registry import NotepadRegistry


def _read_registry_file(data_dir):
    return json.loads((data_dir / "notepads.json").read_text())


class TestSelfHeal:

    @pytest.mark.asyncio
    async def test_missing_file_creates_default(self, registry, data_dir):
        result = await registry.list()

        assert [n.id for n in result.notepads] == ["default"]
        assert result.notepads[0].name == "Default Notepad"
        assert _read_registry_file(data_dir) == {
            "notepads": [{"id": "default", "name": "Default Notepad"}]
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "content",
        [
            "not json at all {",
            "[]",
            "{}",
            '{"notepads": "nope"}',
            '{"notepads": {"id": "default"}}',
            '{"notepads": [{"id": "x"}]}',
            '{"notepads": [42]}',
            "",
        ],
    )
    async def test_invalid_structure_yields_single_default(self, registry, data_dir, content):
        (data_dir / "notepads.json").write_text(content)

        result = await registry.list()

        assert len(result.notepads) == 1
        assert result.notepads[0].id == "default"
        assert _read_registry_file(data_dir)["notepads"][0]["id"] == "default"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", [b"\xff\xfe garbage", b'{"notepads": [\xc3\x28]}'])
    async def test_undecodable_bytes_yield_single_default(self, registry, data_dir, raw):
        (data_dir / "notepads.json").write_bytes(raw)

        result = await registry.list()

        assert [n.id for n in result.notepads] == ["default"]
        assert _read_registry_file(data_dir)["notepads"][0]["id"] == "default"

    @pytest.mark.asyncio
    async def test_valid_file_left_alone(self, registry, data_dir):
        envelope = {"notepads": [{"id": "default", "name": "Mine"}, {"id": "5", "name": "Five"}]}
        (data_dir / "notepads.json").write_text(json.dumps(envelope))

        result = await registry.list()

        assert result.model_dump() == envelope

    @pytest.mark.asyncio
    async def test_initialize_creates_directory_and_default_note(self, tmp_path):
        from dumbpad.services.file_service import FileService
        from dumbpad.services.note_store import NoteStore

        files = FileService(str(tmp_path / "fresh"))
        notes = NoteStore(files)
        reg = NotepadRegistry(files, notes)

        await reg.initialize()

        assert (tmp_path / "fresh" / "notepads.json").exists()
        assert (tmp_path / "fresh" / "default.txt").read_text() == ""

    @pytest.mark.asyncio
    async def test_initialize_keeps_existing_default_content(self, registry, note_store):
        await note_store.write("default", "keep me")
        await registry.initialize()
        assert await note_store.read("default") == "keep me"


class TestCreate:

    @pytest.mark.asyncio
    async def test_create_appends_with_default_name(self, registry, note_store, data_dir):
        notepad = await registry.create()

        assert notepad.name == "Notepad 2"
        assert notepad.id.isdigit()
        assert [n.id for n in (await registry.list()).notepads] == ["default", notepad.id]
        assert (data_dir / f"{notepad.id}.txt").exists()
        assert await note_store.read(notepad.id) == ""

    @pytest.mark.asyncio
    async def test_create_with_name(self, registry):
        notepad = await registry.create("Groceries")
        assert notepad.name == "Groceries"

    @pytest.mark.asyncio
    async def test_immediate_creates_get_distinct_ids_and_names(self, file_service, note_store):
        reg = NotepadRegistry(file_service, note_store, clock=lambda: 1718031234567)

        first = await reg.create()
        second = await reg.create()

        assert first.id != second.id
        assert (first.name, second.name) == ("Notepad 2", "Notepad 3")
        assert second.id == "1718031234568"

    @pytest.mark.asyncio
    async def test_concurrent_creates_all_persisted(self, registry):
        created = await asyncio.gather(*(registry.create() for _ in range(10)))

        ids = [n.id for n in created]
        assert len(set(ids)) == 10
        listed = [n.id for n in (await registry.list()).notepads]
        assert listed[0] == "default"
        assert set(listed[1:]) == set(ids)
        assert len(listed) == 11
        assert sorted(n.name for n in created) == sorted(f"Notepad {i}" for i in range(2, 12))


class TestRename:

    @pytest.mark.asyncio
    async def test_rename(self, registry, data_dir):
        notepad = await registry.create()

        renamed = await registry.rename(notepad.id, "Work")

        assert renamed.id == notepad.id
        assert renamed.name == "Work"
        stored = _read_registry_file(data_dir)["notepads"]
        assert {"id": notepad.id, "name": "Work"} in stored

    @pytest.mark.asyncio
    async def test_rename_default_allowed(self, registry):
        renamed = await registry.rename("default", "Inbox")
        assert renamed.name == "Inbox"

    @pytest.mark.asyncio
    async def test_rename_missing_raises_not_found(self, registry):
        with pytest.raises(NotFoundError):
            await registry.rename("does-not-exist", "x")


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_default_always_rejected(self, registry, data_dir):
        with pytest.raises(InvalidOperationError):
            await registry.delete("default")

        # Rejected before any I/O, even with no registry file at all
        assert not (data_dir / "notepads.json").exists()

    @pytest.mark.asyncio
    async def test_delete_default_rejected_with_corrupt_registry(self, registry, data_dir):
        (data_dir / "notepads.json").write_text("garbage")
        with pytest.raises(InvalidOperationError):
            await registry.delete("default")

    @pytest.mark.asyncio
    async def test_delete_missing_raises_not_found(self, registry):
        with pytest.raises(NotFoundError):
            await registry.delete("does-not-exist")

    @pytest.mark.asyncio
    async def test_delete_removes_entry_and_content(self, registry, note_store):
        notepad = await registry.create()
        await note_store.write(notepad.id, "to be removed")

        await registry.delete(notepad.id)

        assert [n.id for n in (await registry.list()).notepads] == ["default"]
        assert await note_store.read(notepad.id) == ""

    @pytest.mark.asyncio
    async def test_content_removal_failure_does_not_fail_delete(self, registry, note_store):
        notepad = await registry.create()

        with patch.object(note_store.files, "remove", new=AsyncMock(return_value=False)):
            await registry.delete(notepad.id)

        assert notepad.id not in [n.id for n in (await registry.list()).notepads]

    @pytest.mark.asyncio
    async def test_unremovable_content_id_does_not_fail_delete(self, registry, data_dir):
        """An entry whose id cannot map to a file is still deleted from the registry."""
        envelope = {"notepads": [{"id": "default", "name": "Default"}, {"id": "a/b", "name": "Odd"}]}
        (data_dir / "notepads.json").write_text(json.dumps(envelope))

        await registry.delete("a/b")

        assert [n.id for n in (await registry.list()).notepads] == ["default"]

    @pytest.mark.asyncio
    async def test_registry_write_failure_surfaces(self, registry, file_service):
        notepad = await registry.create()

        with patch.object(
            file_service, "write_text", new=AsyncMock(side_effect=StorageError())
        ):
            with pytest.raises(StorageError):
                await registry.delete(notepad.id)

        assert notepad.id in [n.id for n in (await registry.list()).notepads]
