"""
Unit tests for src/cli/

Coverage plan
─────────────
arg parsing   → serve / search / read / group subcommands, global flags
commands      → cmd_search / cmd_read / cmd_group over a mocked registry
main()        → no subcommand, routing, timeout overrides
"""

from unittest.mock import MagicMock, patch

import pytest

from src.bridge.base import AbstractGroupNavigator, AbstractRecordSource
from src.bridge.models import ContentPage, SearchReport


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def _parse(args: list[str]):
    """Call the CLI argument parser and return the parsed namespace."""
    from src.cli.main import build_parser
    parser = build_parser()
    return parser.parse_args(args)


@pytest.fixture
def adapters():
    return MagicMock(spec=AbstractRecordSource), MagicMock(spec=AbstractGroupNavigator)


@pytest.fixture
def registry(adapters):
    from src.tools.handlers import DevonThinkTools
    from src.tools.registry import build_registry
    source, navigator = adapters
    return build_registry(DevonThinkTools(source, navigator))


# ─────────────────────────────────────────────────────────────────────────────
# 1. Argument parsing
# ─────────────────────────────────────────────────────────────────────────────

class TestArgParsing:

    def test_serve_subcommand(self):
        assert _parse(["serve"]).subcommand == "serve"

    def test_search_defaults_to_none(self):
        ns = _parse(["search", "ONVIF"])
        assert ns.subcommand == "search"
        assert ns.query == "ONVIF"
        assert (ns.database, ns.limit, ns.excerpt_chars) == (None, None, None)

    def test_search_with_options(self):
        ns = _parse(["search", "ONVIF", "--database", "Active_Work", "--limit", "5", "--excerpt-chars", "200"])
        assert (ns.database, ns.limit, ns.excerpt_chars) == ("Active_Work", 5, 200)

    def test_read_with_offset(self):
        ns = _parse(["read", "U1", "--offset", "4000"])
        assert (ns.uuid, ns.offset, ns.limit) == ("U1", 4000, None)

    def test_group_requires_database(self):
        with pytest.raises(SystemExit):
            _parse(["group", "/G"])

    def test_group_with_options(self):
        ns = _parse(["group", "/G", "--database", "DB", "--max-docs", "3", "--max-chars", "100"])
        assert (ns.group_path, ns.database, ns.max_docs, ns.max_chars) == ("/G", "DB", 3, 100)

    def test_global_flags(self):
        ns = _parse(["--debug", "--timeout", "5", "--batch-timeout", "90", "serve"])
        assert ns.debug is True
        assert (ns.timeout, ns.batch_timeout) == (5.0, 90.0)

    @pytest.mark.parametrize("value", ["-5", "0", "soon"])
    def test_bad_timeout_rejected(self, value):
        with pytest.raises(SystemExit):
            _parse(["--timeout", value, "serve"])

    def test_bad_batch_timeout_rejected(self):
        with pytest.raises(SystemExit):
            _parse(["--batch-timeout", "-1", "serve"])


# ─────────────────────────────────────────────────────────────────────────────
# 2. Command implementations
# ─────────────────────────────────────────────────────────────────────────────

class TestCommands:

    def test_search_prints_results(self, registry, adapters, capsys):
        from src.cli.main import cmd_search
        source, _ = adapters
        source.search.return_value = SearchReport(total=0)
        assert cmd_search(registry, "ONVIF") == 0
        source.search.assert_called_once_with("ONVIF", None, 10, 600)
        assert "Found **0** results" in capsys.readouterr().out

    def test_read_error_goes_to_stderr(self, registry, adapters, capsys):
        from src.cli.main import cmd_read
        from src.exceptions import RecordNotFoundError
        source, _ = adapters
        source.read_chunk.side_effect = RecordNotFoundError("Record not found: X")
        assert cmd_read(registry, "X") == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Record not found: X" in captured.err

    def test_read_passes_offset(self, registry, adapters, capsys):
        from src.cli.main import cmd_read
        source, _ = adapters
        source.read_chunk.return_value = ContentPage("Doc", "U1", "PDF", "xyz", 10, 13)
        assert cmd_read(registry, "U1", offset=10, limit=3) == 0
        source.read_chunk.assert_called_once_with("U1", 10, 3)
        assert "end of document" in capsys.readouterr().out

    def test_group_maps_max_chars(self, registry, adapters, capsys):
        from src.cli.main import cmd_group
        _, navigator = adapters
        navigator.list_children.return_value = []
        assert cmd_group(registry, "/G", "DB", max_docs=3) == 0
        navigator.list_children.assert_called_once_with("/G", "DB", 3)
        assert "empty or not found" in capsys.readouterr().out


# ─────────────────────────────────────────────────────────────────────────────
# 3. main()
# ─────────────────────────────────────────────────────────────────────────────

class TestMain:

    def test_no_subcommand_prints_help(self, capsys):
        from src.cli.main import main
        assert main([]) == 0
        assert "dtplus" in capsys.readouterr().out

    def test_search_routes_through_default_registry(self, registry, adapters):
        from src.cli.main import main
        source, _ = adapters
        source.search.return_value = SearchReport(total=0)
        with patch("src.cli.main.build_default_registry", return_value=registry) as build:
            assert main(["search", "q", "--limit", "3"]) == 0
        build.assert_called_once()
        source.search.assert_called_once_with("q", None, 3, 600)

    def test_timeout_flags_override_config(self, registry, monkeypatch):
        from src.cli.main import main
        monkeypatch.delenv("DTPLUS_TIMEOUT", raising=False)
        with patch("src.cli.main.build_default_registry", return_value=registry) as build, \
                patch("src.cli.main.cmd_serve", return_value=0):
            main(["--timeout", "5", "--batch-timeout", "90", "serve"])
        config = build.call_args.args[0]
        assert (config.timeout, config.batch_timeout) == (5.0, 90.0)

    def test_serve_runs_server(self, registry):
        from src.cli.main import cmd_serve
        with patch("src.server.mcp_server.run") as run:
            assert cmd_serve(registry) == 0
        run.assert_called_once_with(registry)
