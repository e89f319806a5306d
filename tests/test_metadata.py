"""Tests for the bp_meta_info metadata extractors."""

from typing import Any, Callable, Dict

import pytest

from bp_scanner.blueprint import parse_document
from bp_scanner.mods.versions import DependencyVersion, Version
from bp_scanner.scanner import (
    extract_startup_settings,
    get_explicit_mods,
    get_startup_settings,
    has_meta_info,
)
from bp_scanner.tags import AnyBasic

from conftest import GAME_VERSION, meta_tags

Factory = Callable[..., Dict[str, Any]]


class TestExplicitMods:
    """The mods table of the first marked entity."""

    def test_exact_requirements(self, blueprint: Factory, entity: Factory) -> None:
        raw = blueprint(
            entity(1, "inserter"),
            entity(2, "wooden-chest", tags=meta_tags(mods={"Krastorio2": "1.3.23", "base": "2.0.10"})),
        )
        mods = get_explicit_mods(parse_document(raw))
        assert mods is not None
        assert mods["Krastorio2"] == DependencyVersion.exact(Version(1, 3, 23))
        assert mods.names() == ["Krastorio2", "base"]

    def test_no_marker(self, blueprint: Factory, entity: Factory) -> None:
        doc = parse_document(blueprint(entity(1, "inserter", tags={"other": 1})))
        assert not has_meta_info(doc)
        assert get_explicit_mods(doc) is None

    @pytest.mark.parametrize("version", ["1.3", "1.3.x", "v1.3.23", 1, True, {"v": "1.0.0"}])
    def test_bad_version_discards_list(
        self, blueprint: Factory, entity: Factory, version: Any
    ) -> None:
        raw = blueprint(
            entity(1, "wooden-chest", tags=meta_tags(mods={"good": "1.0.0", "bad": version}))
        )
        assert get_explicit_mods(parse_document(raw)) is None

    @pytest.mark.parametrize("info", ["text", [1, 2], {"mods": "K2"}, {"startup": {}}])
    def test_malformed_marker(self, blueprint: Factory, entity: Factory, info: Any) -> None:
        raw = blueprint(entity(1, "wooden-chest", tags={"bp_meta_info": info}))
        doc = parse_document(raw)
        assert has_meta_info(doc)
        assert get_explicit_mods(doc) is None

    def test_planner_has_no_metadata(self) -> None:
        doc = parse_document(
            {"upgrade_planner": {"item": "upgrade-planner", "version": GAME_VERSION}}
        )
        assert not has_meta_info(doc)
        assert get_explicit_mods(doc) is None
        assert get_startup_settings(doc) is None

    def test_book_reads_active_blueprint_only(
        self, book: Factory, blueprint: Factory, entity: Factory
    ) -> None:
        marked = blueprint(entity(1, "wooden-chest", tags=meta_tags(mods={"foo": "1.0.0"})))
        doc = parse_document(book(marked, blueprint(entity(1, "inserter")), active_index=2))
        assert get_explicit_mods(doc) is None


class TestStartupSettings:
    """The startup table of the first marked entity."""

    def test_startup_table(self, blueprint: Factory, entity: Factory) -> None:
        startup = {"kr-more-realistic-weapon": True, "se-deep-space-belts": 3}
        raw = blueprint(entity(1, "wooden-chest", tags=meta_tags(startup=startup)))
        settings = extract_startup_settings(parse_document(raw))
        assert settings == {
            "kr-more-realistic-weapon": AnyBasic.boolean(True),
            "se-deep-space-belts": AnyBasic.number(3),
        }

    def test_first_marked_entity_decides(self, blueprint: Factory, entity: Factory) -> None:
        raw = blueprint(
            entity(1, "wooden-chest", tags=meta_tags(startup="broken")),
            entity(2, "wooden-chest", tags=meta_tags(startup={"setting": 1})),
        )
        assert get_startup_settings(parse_document(raw)) is None

    def test_first_marked_entity_without_startup(
        self, blueprint: Factory, entity: Factory
    ) -> None:
        raw = blueprint(
            entity(1, "wooden-chest", tags=meta_tags(mods={})),
            entity(2, "wooden-chest", tags=meta_tags(startup={"setting": 1})),
        )
        assert get_startup_settings(parse_document(raw)) is None

    def test_unmarked_entities_skipped(self, blueprint: Factory, entity: Factory) -> None:
        raw = blueprint(
            entity(1, "inserter", tags={"startup": {"x": 1}}),
            entity(2, "wooden-chest", tags=meta_tags(startup={"setting": "on"})),
        )
        settings = get_startup_settings(parse_document(raw))
        assert settings == {"setting": AnyBasic.string("on")}
