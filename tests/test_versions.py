"""Tests for versions, requirements and dependency lists."""

import pytest

from bp_scanner.errors import InvalidVersionError
from bp_scanner.mods.versions import (
    Dependency,
    DependencyKind,
    DependencyList,
    DependencyVersion,
    Version,
    VersionComparator,
)

from conftest import GAME_VERSION


class TestVersion:
    """Three part versions."""

    def test_parse(self) -> None:
        assert Version.parse("1.3.23") == Version(1, 3, 23)
        assert str(Version.parse("0.6.119")) == "0.6.119"

    @pytest.mark.parametrize("text", ["1.3", "1.3.23.4", "a.b.c", "", " 1.2.3", "1.2.3 "])
    def test_parse_invalid(self, text: str) -> None:
        with pytest.raises(InvalidVersionError) as exc_info:
            Version.parse(text, "mods.foo")
        assert exc_info.value.path == "mods.foo"

    def test_numeric_ordering(self) -> None:
        assert Version(1, 10, 0) > Version(1, 9, 99)
        assert Version(0, 6, 119) < Version(1, 0, 0)

    def test_from_packed(self) -> None:
        assert Version.from_packed(GAME_VERSION) == Version(2, 0, 10)
        assert Version.from_packed((1 << 48) | (1 << 32) | (300 << 16) | 7) == Version(1, 1, 300)


class TestDependencyVersion:
    """Version requirements."""

    def test_any_matches_everything(self) -> None:
        requirement = DependencyVersion.any()
        assert requirement.is_any
        assert requirement.matches(Version(0, 0, 1))
        assert requirement.text == "*"
        assert str(requirement) == ""

    def test_at_least(self) -> None:
        requirement = DependencyVersion.at_least(Version(1, 3, 23))
        assert requirement.matches(Version(1, 3, 23))
        assert requirement.matches(Version(1, 4, 0))
        assert not requirement.matches(Version(1, 3, 22))
        assert requirement.text == ">= 1.3.23"

    def test_exact(self) -> None:
        requirement = DependencyVersion.exact(Version(1, 0, 0))
        assert requirement.comparator is VersionComparator.EQUAL
        assert not requirement.matches(Version(1, 0, 1))

    def test_comparator_requires_version(self) -> None:
        with pytest.raises(ValueError):
            DependencyVersion(VersionComparator.EQUAL, None)


class TestDependency:
    """Mod info dependency strings."""

    @pytest.mark.parametrize(
        "text,kind,name",
        [
            ("base", DependencyKind.REQUIRED, "base"),
            ("? space-exploration", DependencyKind.OPTIONAL, "space-exploration"),
            ("(?) aai-industry", DependencyKind.HIDDEN_OPTIONAL, "aai-industry"),
            ("! bobplates", DependencyKind.INCOMPATIBLE, "bobplates"),
            ("~ flib", DependencyKind.LAZY, "flib"),
        ],
    )
    def test_kinds(self, text: str, kind: DependencyKind, name: str) -> None:
        dependency = Dependency.parse(text)
        assert dependency.kind is kind
        assert dependency.name == name
        assert dependency.version.is_any

    def test_version_requirement(self) -> None:
        dependency = Dependency.parse("? space-exploration >= 0.6.0")
        assert dependency.version == DependencyVersion.at_least(Version(0, 6, 0))
        assert str(dependency) == "? space-exploration >= 0.6.0"

    def test_str_round_trip(self) -> None:
        for text in ("base >= 2.0.0", "! bobplates", "flib < 1.0.0"):
            assert str(Dependency.parse(text)) == text

    @pytest.mark.parametrize("text", ["", "foo >= 1.0", "foo ~ 1.0.0", "? a b"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(ValueError):
            Dependency.parse(text)


class TestDependencyList:
    """First-wins requirement mapping."""

    def test_first_requirement_wins(self) -> None:
        deps = DependencyList()
        assert deps.add("Krastorio2", DependencyVersion.at_least(Version(1, 3, 23)))
        assert not deps.add("Krastorio2", DependencyVersion.at_least(Version(2, 0, 0)))
        assert deps["Krastorio2"].version == Version(1, 3, 23)

    def test_equality_ignores_order(self) -> None:
        a = DependencyList([("a", DependencyVersion.any()), ("b", DependencyVersion.any())])
        b = DependencyList([("b", DependencyVersion.any()), ("a", DependencyVersion.any())])
        assert a == b

    def test_extend_keeps_existing(self) -> None:
        deps = DependencyList({"a": DependencyVersion.exact(Version(1, 0, 0))})
        deps.extend({"a": DependencyVersion.any(), "b": DependencyVersion.any()})
        assert deps["a"].comparator is VersionComparator.EQUAL
        assert "b" in deps

    def test_to_dict_sorted(self) -> None:
        deps = DependencyList(
            {"space-exploration": DependencyVersion.any(), "Krastorio2": DependencyVersion.any()}
        )
        assert list(deps.to_dict()) == ["Krastorio2", "space-exploration"]
        assert deps.to_dict()["Krastorio2"] == "*"
