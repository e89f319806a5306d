"""Tests for the command line entry point."""

from pathlib import Path
from typing import Any, Callable, Dict

import orjson
import pytest

from bp_scanner.__main__ import main

from conftest import meta_tags

Factory = Callable[..., Dict[str, Any]]


@pytest.fixture
def run(settings_path: Path, capsys: pytest.CaptureFixture[str]) -> Callable[..., Any]:
    """Run the CLI with isolated settings; returns (exit code, decoded stdout)."""

    def _run(*args: str) -> Any:
        code = main(["--settings", str(settings_path), *args])
        out = capsys.readouterr().out
        return code, orjson.loads(out) if out.strip() else None

    return _run


@pytest.mark.usefixtures("clean_logging")
class TestCommands:
    """Each subcommand end to end."""

    def test_deps(self, run: Callable[..., Any], tmp_path: Path, blueprint: Factory, entity: Factory) -> None:
        path = tmp_path / "bp.json"
        path.write_bytes(orjson.dumps(blueprint(entity(1, "kr-loader"))))
        code, data = run("deps", str(path))
        assert code == 0
        assert data["errors"] == {}
        assert data["results"][0]["dependencies"] == {"Krastorio2": ">= 1.3.23"}

    def test_deps_with_failure(self, run: Callable[..., Any], tmp_path: Path) -> None:
        missing = tmp_path / "missing.json"
        code, data = run("deps", str(missing))
        assert code == 1
        assert str(missing) in data["errors"]

    def test_deps_forced_preset(self, run: Callable[..., Any], tmp_path: Path, blueprint: Factory) -> None:
        path = tmp_path / "bp.json"
        path.write_bytes(orjson.dumps(blueprint()))
        code, data = run("deps", str(path), "--preset", "sb")
        assert code == 0
        assert data["results"][0]["dependencies"] == {"SeaBlockMetaPack": ">= 1.1.4"}

    def test_unknown_preset_rejected(self, run: Callable[..., Any], tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            run("deps", str(tmp_path / "bp.json"), "--preset", "Bob")
        assert exc_info.value.code == 2

    def test_refs(self, run: Callable[..., Any], tmp_path: Path, blueprint: Factory, entity: Factory) -> None:
        path = tmp_path / "bp.json"
        path.write_bytes(orjson.dumps(blueprint(entity(1, "inserter"))))
        code, data = run("refs", str(path))
        assert code == 0
        assert data == {"entity": ["inserter"], "quality": ["normal"]}

    def test_startup(self, run: Callable[..., Any], tmp_path: Path, blueprint: Factory, entity: Factory) -> None:
        path = tmp_path / "bp.json"
        raw = blueprint(entity(1, "wooden-chest", tags=meta_tags(startup={"kr-setting": 2})))
        path.write_bytes(orjson.dumps(raw))
        code, data = run("startup", str(path))
        assert code == 0
        assert data == {"kr-setting": 2.0}

    def test_startup_absent(self, run: Callable[..., Any], tmp_path: Path, blueprint: Factory) -> None:
        path = tmp_path / "bp.json"
        path.write_bytes(orjson.dumps(blueprint()))
        code, data = run("startup", str(path))
        assert code == 0
        assert data is None

    def test_mod_list(self, run: Callable[..., Any], tmp_path: Path, blueprint: Factory, entity: Factory) -> None:
        path = tmp_path / "bp.json"
        path.write_bytes(orjson.dumps(blueprint(entity(1, "se-space-pipe"))))
        output = tmp_path / "out" / "mod-list.json"
        code, _ = run("mod-list", str(path), "-o", str(output))
        assert code == 0
        mods = orjson.loads(output.read_bytes())["mods"]
        assert [mod["name"] for mod in mods] == ["base", "space-exploration"]

    def test_mod_list_bad_document(self, run: Callable[..., Any], tmp_path: Path) -> None:
        path = tmp_path / "bp.json"
        path.write_bytes(orjson.dumps({"blueprint": {}}))
        code, data = run("mod-list", str(path), "-o", str(tmp_path / "mod-list.json"))
        assert code == 1
        assert data is None
        assert not (tmp_path / "mod-list.json").exists()

    def test_presets(self, run: Callable[..., Any]) -> None:
        code, data = run("presets")
        assert code == 0
        assert [preset["name"] for preset in data] == ["K2", "SE", "K2SE", "SeaBlock"]
        assert data[0]["prefix"] == "kr-"
