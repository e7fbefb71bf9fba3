"""Tests for JSON export/import."""

from __future__ import annotations

import json

import pytest

from quotegen.codec import (
    EXPORT_FILENAME,
    Err,
    Ok,
    export_json,
    import_file,
    import_json,
    parse_document,
    write_export,
)
from quotegen.errors import FormatError
from quotegen.models import Quote
from quotegen.quote_store import QuoteStore
from quotegen.storage import MemoryStore


class TestExport:
    def test_two_space_indented_array(self, seeded_store):
        text = export_json(seeded_store.quotes)
        assert text.startswith('[\n  {\n    "text"')
        assert json.loads(text) == [q.to_dict() for q in seeded_store.quotes]

    def test_keeps_unicode(self):
        text = export_json([Quote(text="Ça va — très bien", category="Français")])
        assert "Ça va — très bien" in text

    def test_empty_collection(self):
        assert json.loads(export_json([])) == []

    def test_write_export(self, seeded_store, tmp_path):
        path = write_export(seeded_store.quotes, tmp_path)
        assert path.name == EXPORT_FILENAME == "quotes.json"
        assert json.loads(path.read_text(encoding="utf-8")) == [q.to_dict() for q in seeded_store.quotes]


class TestParseDocument:
    def test_array_is_ok(self):
        assert parse_document("[1, 2]") == Ok([1, 2])

    def test_object_is_err(self):
        result = parse_document('{"not":"an array"}')
        assert isinstance(result, Err)
        assert isinstance(result.error, FormatError)

    def test_invalid_json_is_err(self):
        assert isinstance(parse_document("{nope"), Err)


class TestImport:
    def test_non_array_raises_and_leaves_store(self, seeded_store):
        before = seeded_store.count()
        with pytest.raises(FormatError):
            import_json(seeded_store, '{"not":"an array"}')
        assert seeded_store.count() == before

    def test_invalid_json_raises(self, seeded_store):
        with pytest.raises(FormatError):
            import_json(seeded_store, "not json at all")
        assert seeded_store.count() == 3

    def test_skips_invalid_and_duplicates(self, seeded_store):
        raw = json.dumps([
            {"text": "Fresh idea", "category": "New"},
            {"text": "", "category": "New"},
            {"text": 5, "category": "New"},
            {"text": "LIFE IS WHAT HAPPENS WHEN YOU'RE BUSY MAKING OTHER PLANS.", "category": "life"},
            {"text": "fresh IDEA", "category": "new"},
        ])
        summary = import_json(seeded_store, raw)
        assert summary.imported == 1
        assert summary.skipped == 4
        assert seeded_store.list_quotes()[-1] == Quote(text="Fresh idea", category="New")
        assert seeded_store.count() == 4

    def test_appends_after_existing(self, empty_store):
        empty_store.add("first", "A")
        import_json(empty_store, json.dumps([{"text": "second", "category": "B"}]))
        assert [q.text for q in empty_store.list_quotes()] == ["first", "second"]

    def test_nothing_new_does_not_write(self):
        storage = MemoryStore()
        store = QuoteStore(storage)
        summary = import_json(store, "[]")
        assert summary.imported == 0
        assert storage.get("dqg_quotes_v1") is None

    def test_round_trip(self, seeded_store):
        seeded_store.add("Ünïcode survives", "Misc")
        target = QuoteStore(MemoryStore(), seed=[])
        import_json(target, export_json(seeded_store.quotes))
        assert target.list_quotes() == seeded_store.list_quotes()

    def test_import_goes_through_one_update(self, empty_store, monkeypatch):
        calls = []
        real_update = empty_store.update

        def counting_update(fn):
            calls.append(fn)
            return real_update(fn)

        monkeypatch.setattr(empty_store, "update", counting_update)
        import_json(empty_store, json.dumps([{"text": "a", "category": "A"}, {"text": "b", "category": "B"}]))
        assert len(calls) == 1
        assert empty_store.count() == 2

    def test_import_file(self, empty_store, tmp_path):
        path = tmp_path / "upload.json"
        path.write_text(json.dumps([{"text": "from file", "category": "F"}]), encoding="utf-8")
        assert import_file(empty_store, path).imported == 1

    def test_import_file_not_utf8(self, empty_store, tmp_path):
        path = tmp_path / "upload.json"
        path.write_bytes(b"\xff\xfe\x00garbage")
        with pytest.raises(FormatError):
            import_file(empty_store, path)
