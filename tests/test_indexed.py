"""Tests for the sparsely keyed IndexedVec container."""

from typing import Any

import pytest

from bp_scanner.blueprint import IndexedVec
from bp_scanner.blueprint.signals import Icon
from bp_scanner.errors import DuplicateKeyError, InvalidKeyError, ShapeMismatchError


def _keep(raw: Any, path: str) -> Any:
    return raw


def _dump(value: Any) -> Any:
    return value


class TestIndexedVecMutation:
    """Insertion, appending and removal."""

    def test_append_to_empty_uses_key_one(self) -> None:
        vec: IndexedVec[str] = IndexedVec()
        assert vec.append("a") == 1
        assert vec.keys() == [1]

    def test_append_after_gaps_uses_max_plus_one(self) -> None:
        vec = IndexedVec({2: "a", 5: "b"})
        assert vec.append("c") == 6
        assert vec.keys() == [2, 5, 6]

    def test_append_never_fills_freed_gap(self) -> None:
        vec = IndexedVec({2: "a", 5: "b"})
        assert vec.pop(2) == "a"
        assert vec.append("c") == 6
        assert 2 not in vec

    def test_iteration_is_ascending(self) -> None:
        vec: IndexedVec[str] = IndexedVec()
        vec.insert_at(7, "c")
        vec.insert_at(1, "a")
        vec.insert_at(3, "b")
        assert list(vec.items()) == [(1, "a"), (3, "b"), (7, "c")]
        assert list(vec) == ["a", "b", "c"]

    def test_items_is_restartable(self) -> None:
        vec = IndexedVec({1: "a", 4: "b"})
        assert list(vec.items()) == list(vec.items())

    def test_insert_duplicate_key_raises(self) -> None:
        vec = IndexedVec({3: "a"})
        with pytest.raises(DuplicateKeyError):
            vec.insert_at(3, "b")
        assert vec[3] == "a"

    @pytest.mark.parametrize("key", [0, -1, True, "1", 1.0])
    def test_insert_invalid_key_raises(self, key: Any) -> None:
        vec: IndexedVec[str] = IndexedVec()
        with pytest.raises(InvalidKeyError):
            vec.insert_at(key, "a")
        assert len(vec) == 0

    def test_equality_ignores_insertion_order(self) -> None:
        first: IndexedVec[str] = IndexedVec()
        first.insert_at(3, "b")
        first.insert_at(1, "a")
        assert first == IndexedVec({1: "a", 3: "b"})
        assert first != IndexedVec({1: "a", 2: "b"})

    def test_get_returns_default_for_missing_key(self) -> None:
        vec = IndexedVec({1: "a"})
        assert vec.get(2) is None
        assert vec.get(2, "x") == "x"


class TestIndexedVecSerialization:
    """Keyed object and legacy list forms."""

    def test_round_trip_keeps_gaps(self) -> None:
        vec = IndexedVec({1: "a", 3: "b", 7: "c"})
        restored = IndexedVec.from_dict(vec.to_dict(_dump), _keep)
        assert restored == vec
        assert restored.keys() == [1, 3, 7]

    def test_keys_serialized_in_numeric_order(self) -> None:
        vec = IndexedVec({10: "c", 3: "b", 1: "a"})
        assert list(vec.to_dict(_dump)) == ["1", "3", "10"]

    @pytest.mark.parametrize("key", ["07", "0", "+7", "-1", "abc", " 1", "1.0", ""])
    def test_non_canonical_key_rejected(self, key: str) -> None:
        with pytest.raises(InvalidKeyError) as exc_info:
            IndexedVec.from_dict({key: "a"}, _keep, "icons")
        assert exc_info.value.path == f"icons[{key!r}]"

    def test_bad_key_error_names_the_key(self) -> None:
        with pytest.raises(InvalidKeyError) as exc_info:
            IndexedVec.from_dict({"1": "a", "02": "b"}, _keep, "blueprint.icons")
        assert exc_info.value.path == "blueprint.icons['02']"

    def test_list_form_matches_keyed_form(self) -> None:
        keyed = IndexedVec.from_dict(
            {"1": {"v": "a"}, "4": {"v": "b"}}, _keep
        )
        listed = IndexedVec.from_dict(
            [{"index": 4, "v": "b"}, {"index": 1, "v": "a"}], _keep
        )
        assert listed == keyed

    def test_list_form_duplicate_index_reports_element(self) -> None:
        with pytest.raises(DuplicateKeyError) as exc_info:
            IndexedVec.from_dict([{"index": 1}, {"index": 1}], _keep, "icons")
        assert exc_info.value.path == "icons[1]"

    def test_list_form_requires_index(self) -> None:
        with pytest.raises(ShapeMismatchError):
            IndexedVec.from_dict([{"v": "a"}], _keep, "icons")

    @pytest.mark.parametrize("index", [0, -2, "1", True])
    def test_list_form_invalid_index_rejected(self, index: Any) -> None:
        with pytest.raises(InvalidKeyError):
            IndexedVec.from_dict([{"index": index}], _keep)

    @pytest.mark.parametrize("raw", ["a", 1, None])
    def test_non_container_rejected(self, raw: Any) -> None:
        with pytest.raises(ShapeMismatchError):
            IndexedVec.from_dict(raw, _keep)

    def test_item_path_passed_to_parser(self) -> None:
        paths: list[str] = []

        def record(raw: Any, path: str) -> Any:
            paths.append(path)
            return raw

        IndexedVec.from_dict({"2": "a"}, record, "blueprint.icons")
        assert paths == ["blueprint.icons['2']"]

    def test_get_ids_unions_values(self) -> None:
        icons = IndexedVec.from_dict(
            {
                "1": {"signal": {"name": "iron-plate"}},
                "3": {"signal": {"type": "virtual", "name": "signal-A"}},
            },
            Icon.from_dict,
        )
        ids = icons.get_ids()
        assert ids.item == {"iron-plate"}
        assert ids.virtual_signal == {"signal-A"}
