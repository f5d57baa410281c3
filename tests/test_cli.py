#=============================================================================
# File        : tests/test_cli.py
# Project     : activehandles v1.0
# Component   : CLI Test Suite
# Description : run command against small target modules
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Created     : 2025-09-02
#=============================================================================

import json
import sys
import textwrap
from pathlib import Path

import pytest

# Add activehandles to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent))

from activehandles import cli
from activehandles.cli import load_target, main
from activehandles.compat import uninstall_compat_shim

TARGET = textwrap.dedent('''
    import asyncio


    def keep_alive():
        pass


    async def main():
        asyncio.get_running_loop().call_later(30, keep_alive)


    def start():
        asyncio.get_running_loop().call_later(45, keep_alive)


    not_callable = 3
''')


@pytest.fixture
def target_module(tmp_path, monkeypatch):
    (tmp_path / "ah_cli_target.py").write_text(TARGET)
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delenv("ACTIVEHANDLES_SHIM_UNTIL", raising=False)
    yield "ah_cli_target"
    sys.modules.pop("ah_cli_target", None)
    uninstall_compat_shim()


class TestLoadTarget:
    def test_loads_callable(self, target_module):
        assert load_target(f"{target_module}:main").__name__ == "main"

    @pytest.mark.parametrize("target", ["ah_cli_target", ":main", "ah_cli_target:"])
    def test_rejects_malformed_target(self, target):
        with pytest.raises(ValueError):
            load_target(target)

    def test_rejects_non_callable(self, target_module):
        with pytest.raises(TypeError):
            load_target(f"{target_module}:not_callable")


class TestRunCommand:
    def test_json_report(self, target_module, capsys):
        code = main(["run", f"{target_module}:main", "--after", "0.05",
                     "--format", "json", "--no-color"])
        assert code == 0
        report = json.loads(capsys.readouterr().out)
        names = [entry["name"] for entry in report]
        assert "keep_alive" in names
        entry = report[names.index("keep_alive")]
        assert entry["kind"] == "one-shot-timer"
        assert entry["location"]["line"] >= 1

    def test_text_report(self, target_module, capsys):
        code = main(["run", f"{target_module}:start", "--after", "0.05",
                     "--no-color", "--no-highlight"])
        assert code == 0
        out = capsys.readouterr().out
        assert "keep_alive:" in out
        assert "(one-shot-timer)" in out
        assert "def keep_alive():" in out

    def test_shim_records_interval(self, target_module, capsys):
        code = main(["run", f"{target_module}:main", "--after", "0.05",
                     "--format", "json", "--shim"])
        assert code == 0
        report = json.loads(capsys.readouterr().out)
        entry = next(e for e in report if e["name"] == "keep_alive")
        assert entry["interval_ms"] == 30000

    def test_output_file(self, target_module, tmp_path, capsys):
        out_file = tmp_path / "report.json"
        code = main(["run", f"{target_module}:main", "--after", "0.05",
                     "--format", "json", "--output", str(out_file)])
        assert code == 0
        assert "Report saved to" in capsys.readouterr().out
        assert json.loads(out_file.read_text())

    def test_malformed_env_still_runs(self, target_module, monkeypatch, capsys):
        monkeypatch.setenv("ACTIVEHANDLES_SHIM_UNTIL", "latest")
        code = main(["run", f"{target_module}:main", "--after", "0.05",
                     "--format", "json", "--shim"])
        assert code == 0
        names = [e["name"] for e in json.loads(capsys.readouterr().out)]
        assert "keep_alive" in names

    def test_config_failure_is_reported(self, target_module, monkeypatch, capsys):
        def broken_config(args):
            raise ValueError("bad configuration")

        monkeypatch.setattr(cli, "_config_from_args", broken_config)
        code = main(["run", f"{target_module}:main", "--after", "0"])
        assert code == 1
        assert "Failed to load" in capsys.readouterr().out

    def test_missing_module_fails(self, capsys):
        code = main(["run", "ah_no_such_module_anywhere:main"])
        assert code == 1
        assert "Failed to load" in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()
