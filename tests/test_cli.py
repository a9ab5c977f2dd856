# tests/test_cli.py
"""Tests for the mercury-track command."""

import asyncio
import json

from mercury_evolution.cli import USAGE, main
from mercury_evolution.heat_store import HeatStore


def load(root):
    return asyncio.run(HeatStore(root, strict=True).load())


class TestMain:
    def test_success(self, root, capsys):
        code = main(["read", "/notes/a.md", "--root", str(root)])

        assert code == 0
        assert json.loads(capsys.readouterr().out) == {"success": True}
        heat_map = load(root)
        assert heat_map.nodes["notes/a.md"].access_count == 1

    def test_each_invocation_is_its_own_session(self, root, capsys):
        assert main(["read", "a.md", "--root", str(root)]) == 0
        assert main(["update", "b.md", "--root", str(root)]) == 0

        heat_map = load(root)
        assert set(heat_map.nodes) == {"a.md", "b.md"}
        assert heat_map.edges == {}
        # Auto-started sessions are never ended
        assert heat_map.paths == []

    def test_missing_arguments(self, root, capsys):
        assert main(["read", "--root", str(root)]) == 1
        assert USAGE in capsys.readouterr().err

    def test_no_arguments(self, capsys):
        assert main([]) == 1
        assert USAGE in capsys.readouterr().err

    def test_unknown_action(self, root, capsys):
        code = main(["rename", "a.md", "--root", str(root)])

        assert code == 1
        error = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert error["kind"] == "validation"
        assert "rename" in error["error"]
        assert not HeatStore(root).heat_map_path.exists()
