"""
DumbPad Backend — Note Store Unit Tests
=========================================

What:  Read/write semantics of per-notepad content.
"""

import pytest

from dumbpad.exceptions import ValidationError


class TestNoteStore:

    @pytest.mark.asyncio
    async def test_read_never_written_is_empty(self, note_store):
        assert await note_store.read("1718031234567") == ""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "text",
        ["", "hello", "line 1\nline 2\n\nline 4", "crlf\r\nkept\r\n", "ünïcödé ✓ 日本語", " \t trailing  "],
    )
    async def test_write_then_read_returns_exact_text(self, note_store, text):
        await note_store.write("n1", text)
        assert await note_store.read("n1") == text

    @pytest.mark.asyncio
    async def test_write_replaces_wholesale(self, note_store):
        await note_store.write("n1", "a much longer first version")
        await note_store.write("n1", "short")
        assert await note_store.read("n1") == "short"

    @pytest.mark.asyncio
    async def test_write_does_not_require_registry_entry(self, note_store, data_dir):
        await note_store.write("not-in-registry", "x")
        assert (data_dir / "not-in-registry.txt").exists()
        assert not (data_dir / "notepads.json").exists()

    @pytest.mark.asyncio
    async def test_delete(self, note_store):
        await note_store.write("n1", "x")
        assert await note_store.delete("n1") is True
        assert await note_store.read("n1") == ""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("notepad_id", ["../escape", "a/b", "..\\win"])
    async def test_path_escaping_id_rejected(self, note_store, notepad_id):
        with pytest.raises(ValidationError):
            await note_store.write(notepad_id, "x")
        with pytest.raises(ValidationError):
            await note_store.read(notepad_id)
