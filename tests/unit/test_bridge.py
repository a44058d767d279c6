"""
Unit tests for src/bridge/

Coverage plan
─────────────
models.py       → score rounding, ContentPage derived fields
extraction.py   → fail-open combinator
normalizers.py  → JSON parsing, \\r / ||| record parsing, search filter,
                  chunk not-found, batch text map
structured.py   → JXARecordSource against a fake invoker
navigation.py   → AppleScriptGroupNavigator against a fake invoker
"""

import json
from unittest.mock import MagicMock

import pytest

from src.bridge.models import ContentPage, GroupChild, SearchResult
from src.config import BridgeConfig
from src.exceptions import OutputParseError, PartialExtractionError, RecordNotFoundError


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def _fake_invoker(structured=None, navigation=None):
    inv = MagicMock()
    inv.config = BridgeConfig()
    inv.run_structured.return_value = structured
    inv.run_navigation.return_value = navigation
    return inv


def _result(uuid, database="Active_Work", score=0.5, excerpt="text", **kw):
    item = {
        "name": kw.get("name", f"Doc {uuid}"),
        "uuid": uuid,
        "location": kw.get("location", "/Inbox/"),
        "database": database,
        "score": score,
        "kind": kw.get("kind", "markdown"),
        "excerpt": excerpt,
    }
    return item


# ─────────────────────────────────────────────────────────────────────────────
# 1. Models
# ─────────────────────────────────────────────────────────────────────────────

class TestModels:

    def test_search_result_score_rounded(self):
        r = SearchResult(name="n", uuid="u", score=0.91234)
        assert r.score == 0.91

    def test_content_page_derived_fields(self):
        page = ContentPage(name="n", uuid="u", kind="PDF", content="abcd", offset=10, total_chars=20)
        assert page.chunk_length == 4
        assert page.next_offset == 14
        assert page.has_more is True

    def test_content_page_at_end(self):
        page = ContentPage(name="n", uuid="u", kind="PDF", content="abcd", offset=16, total_chars=20)
        assert page.next_offset == 20
        assert page.has_more is False

    def test_group_child_is_hashable(self):
        assert len({GroupChild("U1", "a"), GroupChild("U1", "a")}) == 1


# ─────────────────────────────────────────────────────────────────────────────
# 2. extract_or_empty
# ─────────────────────────────────────────────────────────────────────────────

class TestExtractOrEmpty:

    def test_maps_successful_extractions(self):
        from src.bridge.extraction import extract_or_empty
        assert extract_or_empty(["a", "b"], str.upper) == ["A", "B"]

    def test_partial_failure_becomes_default(self):
        from src.bridge.extraction import extract_or_empty

        def _extract(item):
            if item == "bad":
                raise PartialExtractionError("cannot read")
            return item

        assert extract_or_empty(["ok", "bad", "fine"], _extract) == ["ok", "", "fine"]

    def test_other_errors_propagate(self):
        from src.bridge.extraction import extract_or_empty

        def _extract(item):
            raise KeyError(item)

        with pytest.raises(KeyError):
            extract_or_empty(["x"], _extract)

    def test_empty_input(self):
        from src.bridge.extraction import extract_or_empty
        assert extract_or_empty([], str.upper) == []


# ─────────────────────────────────────────────────────────────────────────────
# 3. Normalizers
# ─────────────────────────────────────────────────────────────────────────────

class TestParseJsonOutput:

    def test_parses_object(self):
        from src.bridge.normalizers import parse_json_output
        assert parse_json_output('{"a": 1}') == {"a": 1}

    def test_empty_output_raises(self):
        from src.bridge.normalizers import parse_json_output
        with pytest.raises(OutputParseError):
            parse_json_output("")

    def test_malformed_output_raises_without_echoing_it(self):
        from src.bridge.normalizers import parse_json_output
        with pytest.raises(OutputParseError) as excinfo:
            parse_json_output("not json at all SECRET")
        assert "SECRET" not in str(excinfo.value)


class TestParseNavigationOutput:

    def test_two_records_with_comma_preserved(self):
        from src.bridge.normalizers import parse_navigation_output
        raw = "U1|||Doc One|||markdown\rU2|||Doc,Two|||PDF document\r"
        assert parse_navigation_output(raw) == [
            GroupChild(uuid="U1", name="Doc One", kind="markdown"),
            GroupChild(uuid="U2", name="Doc,Two", kind="PDF document"),
        ]

    def test_splitting_is_on_carriage_return_only(self):
        from src.bridge.normalizers import parse_navigation_output
        # a line feed is not a record terminator in this dialect
        children = parse_navigation_output("U1|||Doc|||markdown\nU2|||Other|||txt")
        assert len(children) == 1
        assert children[0].uuid == "U1"

    def test_single_pipe_in_name_preserved(self):
        from src.bridge.normalizers import parse_navigation_output
        children = parse_navigation_output("U1|||A | B|||txt\r")
        assert children[0].name == "A | B"

    def test_fields_are_trimmed(self):
        from src.bridge.normalizers import parse_navigation_output
        children = parse_navigation_output("  U1 |||  Spaced  ||| markdown \r")
        assert children == [GroupChild("U1", "Spaced", "markdown")]

    def test_records_missing_uuid_or_name_dropped(self):
        from src.bridge.normalizers import parse_navigation_output
        raw = "|||No uuid|||txt\rU2||| |||txt\rU3|||Kept|||txt\r"
        assert [c.uuid for c in parse_navigation_output(raw)] == ["U3"]

    def test_empty_fragments_dropped(self):
        from src.bridge.normalizers import parse_navigation_output
        assert parse_navigation_output("\r\r  \r") == []

    def test_missing_kind_tolerated(self):
        from src.bridge.normalizers import parse_navigation_output
        assert parse_navigation_output("U1|||Name\r") == [GroupChild("U1", "Name", "")]

    def test_delimiter_inside_name_rejoined(self):
        from src.bridge.normalizers import parse_navigation_output
        children = parse_navigation_output("U1|||a|||b|||markdown\r")
        assert children == [GroupChild("U1", "a|||b", "markdown")]


class TestParseSearchReport:

    def test_builds_results_in_order(self):
        from src.bridge.normalizers import parse_search_report
        payload = {"total": 2, "returned": 2, "results": [_result("U1", score=0.91), _result("U2", score=0.77)]}
        report = parse_search_report(payload)
        assert [r.uuid for r in report.results] == ["U1", "U2"]
        assert report.total == 2
        assert report.returned == 2

    def test_database_filter_excludes_other_databases(self):
        from src.bridge.normalizers import parse_search_report
        payload = {
            "total": 3,
            "results": [
                _result("U1", database="Active_Work"),
                _result("U2", database="Archive"),
                _result("U3", database="Active_Work"),
            ],
        }
        report = parse_search_report(payload, database="Active_Work")
        assert [r.uuid for r in report.results] == ["U1", "U3"]
        assert all(r.database == "Active_Work" for r in report.results)
        assert report.total == 3

    def test_database_filter_is_exact_equality(self):
        from src.bridge.normalizers import parse_search_report
        payload = {"total": 1, "results": [_result("U1", database="active_work")]}
        assert parse_search_report(payload, database="Active_Work").results == []

    def test_non_text_excerpt_becomes_empty(self):
        from src.bridge.normalizers import parse_search_report
        payload = {"total": 2, "results": [_result("U1", excerpt={"bad": 1}), _result("U2")]}
        report = parse_search_report(payload)
        assert report.results[0].excerpt == ""
        assert report.results[1].excerpt == "text"

    def test_missing_score_defaults_to_zero(self):
        from src.bridge.normalizers import parse_search_report
        item = _result("U1")
        item["score"] = None
        assert parse_search_report({"total": 1, "results": [item]}).results[0].score == 0.0

    def test_entries_without_uuid_skipped(self):
        from src.bridge.normalizers import parse_search_report
        payload = {"total": 2, "results": [{"name": "ghost"}, _result("U2")]}
        assert [r.uuid for r in parse_search_report(payload).results] == ["U2"]

    def test_non_object_payload_raises(self):
        from src.bridge.normalizers import parse_search_report
        with pytest.raises(OutputParseError):
            parse_search_report([1, 2])


class TestParseContentPage:

    def _payload(self, **kw):
        data = {"name": "Spec", "uuid": "U1", "kind": "PDF document",
                "content": "hello", "offset": 0, "total_chars": 12}
        data.update(kw)
        return data

    def test_builds_page(self):
        from src.bridge.normalizers import parse_content_page
        page = parse_content_page(self._payload())
        assert page.content == "hello"
        assert page.next_offset == 5
        assert page.has_more is True

    def test_not_found_marker_raises(self):
        from src.bridge.normalizers import parse_content_page
        with pytest.raises(RecordNotFoundError, match="Record not found: 42"):
            parse_content_page({"error": "not_found", "uuid": "42"})

    def test_derived_fields_ignore_script_values(self):
        from src.bridge.normalizers import parse_content_page
        page = parse_content_page(self._payload(chunk_length=999, next_offset=999, has_more=False))
        assert page.chunk_length == 5
        assert page.next_offset == 5
        assert page.has_more is True

    def test_non_text_content_raises(self):
        from src.bridge.normalizers import parse_content_page
        with pytest.raises(OutputParseError):
            parse_content_page(self._payload(content=None))


class TestParseTextMap:

    def test_every_uuid_present(self):
        from src.bridge.normalizers import parse_text_map
        assert parse_text_map({"U1": "one"}, ["U1", "U2"]) == {"U1": "one", "U2": ""}

    def test_non_text_value_becomes_empty(self):
        from src.bridge.normalizers import parse_text_map
        assert parse_text_map({"U1": 5, "U2": "two"}, ["U1", "U2"]) == {"U1": "", "U2": "two"}


# ─────────────────────────────────────────────────────────────────────────────
# 4. Adapters
# ─────────────────────────────────────────────────────────────────────────────

class TestJXARecordSource:

    def test_search_runs_one_structured_script(self):
        from src.bridge.structured import JXARecordSource
        inv = _fake_invoker(structured=json.dumps({"total": 1, "results": [_result("U1")]}))
        report = JXARecordSource(inv).search("ONVIF", None, 10, 600)
        assert report.results[0].uuid == "U1"
        inv.run_structured.assert_called_once()
        inv.run_navigation.assert_not_called()

    def test_search_results_capped_at_limit(self):
        from src.bridge.structured import JXARecordSource
        results = [_result(f"U{i}") for i in range(5)]
        inv = _fake_invoker(structured=json.dumps({"total": 5, "results": results}))
        assert len(JXARecordSource(inv).search("q", None, 3, 600).results) == 3

    def test_read_chunk_unknown_uuid(self):
        from src.bridge.structured import JXARecordSource
        inv = _fake_invoker(structured=json.dumps({"error": "not_found", "uuid": "nope"}))
        with pytest.raises(RecordNotFoundError):
            JXARecordSource(inv).read_chunk("nope", 0, 4000)

    def test_batch_text_uses_batch_timeout(self):
        from src.bridge.structured import JXARecordSource
        inv = _fake_invoker(structured=json.dumps({"U1": "a"}))
        JXARecordSource(inv).batch_text(["U1"], 800)
        _, kwargs = inv.run_structured.call_args
        assert kwargs["timeout"] == 60.0

    def test_batch_text_empty_input_skips_script(self):
        from src.bridge.structured import JXARecordSource
        inv = _fake_invoker()
        assert JXARecordSource(inv).batch_text([], 800) == {}
        inv.run_structured.assert_not_called()


class TestAppleScriptGroupNavigator:

    def test_lists_children(self):
        from src.bridge.navigation import AppleScriptGroupNavigator
        inv = _fake_invoker(navigation="U1|||Doc One|||markdown\rU2|||Doc,Two|||PDF document")
        children = AppleScriptGroupNavigator(inv).list_children("/G", "DB", 20)
        assert [c.name for c in children] == ["Doc One", "Doc,Two"]
        inv.run_structured.assert_not_called()

    def test_empty_output_is_empty_list(self):
        from src.bridge.navigation import AppleScriptGroupNavigator
        inv = _fake_invoker(navigation="")
        assert AppleScriptGroupNavigator(inv).list_children("/G", "DB", 20) == []

    def test_caps_at_max_docs(self):
        from src.bridge.navigation import AppleScriptGroupNavigator
        raw = "".join(f"U{i}|||Doc {i}|||txt\r" for i in range(10))
        inv = _fake_invoker(navigation=raw)
        assert len(AppleScriptGroupNavigator(inv).list_children("/G", "DB", 4)) == 4
