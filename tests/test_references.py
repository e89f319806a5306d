"""Tests for reference collection over the document tree."""

import logging
from typing import Any, Callable, Dict

import pytest

from bp_scanner.blueprint import Blueprint, Book, UsedIDs, parse_document
from bp_scanner.blueprint.ids import ReferenceCategory
from bp_scanner.scanner import ScannerService, get_references, resolve_dependencies

from conftest import GAME_VERSION, make_blueprint

Factory = Callable[..., Dict[str, Any]]


def _ids(**categories: set[str]) -> UsedIDs:
    ids = UsedIDs()
    for name, values in categories.items():
        for value in values:
            ids.add(ReferenceCategory[name.upper()], value)
    return ids


class TestUsedIDs:
    """Reference set operations."""

    def test_union_is_commutative(self) -> None:
        a = _ids(entity={"inserter"}, item={"iron-plate"})
        b = _ids(entity={"kr-loader"}, quality={"rare"})
        assert a | b == b | a
        assert (a | b).entity == {"inserter", "kr-loader"}

    def test_union_leaves_operands_untouched(self) -> None:
        a = _ids(entity={"inserter"})
        b = _ids(entity={"se-core-miner"})
        combined = a | b
        assert a.entity == {"inserter"}
        assert combined.entity == {"inserter", "se-core-miner"}

    def test_flatten_and_to_dict(self) -> None:
        ids = _ids(entity={"b", "a"}, virtual_signal={"signal-A"})
        assert ids.flatten() == {"a", "b", "signal-A"}
        assert ids.to_dict() == {"entity": ["a", "b"], "virtual-signal": ["signal-A"]}

    def test_is_empty(self) -> None:
        assert UsedIDs().is_empty()
        assert not _ids(other={"x"}).is_empty()


class TestEntityReferences:
    """References contributed by entities and their children."""

    def test_entity_name_quality_and_recipe(self, blueprint: Factory, entity: Factory) -> None:
        raw = blueprint(
            entity(1, "assembling-machine-2", recipe="iron-gear-wheel", recipe_quality="uncommon")
        )
        ids = get_references(parse_document(raw))
        assert ids.entity == {"assembling-machine-2"}
        assert ids.recipe == {"iron-gear-wheel"}
        assert ids.quality == {"normal", "uncommon"}

    def test_tag_keys_are_other_references(self, blueprint: Factory, entity: Factory) -> None:
        raw = blueprint(entity(1, "wooden-chest", tags={"kr-marker": {"se-value": "se-text"}}))
        ids = get_references(parse_document(raw))
        assert ids.other == {"kr-marker"}
        assert "se-value" not in ids.flatten()
        assert "se-text" not in ids.flatten()

    def test_unmodelled_fields_contribute_nothing(self, blueprint: Factory, entity: Factory) -> None:
        raw = blueprint(entity(1, "splitter", input_priority="left", color={"r": 1, "g": 0, "b": 0, "a": 1}))
        assert get_references(parse_document(raw)) == _ids(entity={"splitter"}, quality={"normal"})

    def test_constant_combinator_and_infinity_pipe(self, blueprint: Factory, entity: Factory) -> None:
        sections = {"sections": {"1": {"filters": {"1": {"count": 1, "name": "kr-steel-gear-wheel"}}}}}
        raw = blueprint(
            entity(1, "constant-combinator", control_behavior={"sections": sections}),
            entity(2, "infinity-pipe", infinity_settings={"name": "se-core-fragment-fluid"}),
        )
        doc = parse_document(raw)
        ids = get_references(doc)
        assert ids.item == {"kr-steel-gear-wheel"}
        assert ids.fluid == {"se-core-fragment-fluid"}
        assert resolve_dependencies(doc).names() == ["Krastorio2", "space-exploration"]

    def test_circuit_signals_and_conditions(self, blueprint: Factory, entity: Factory) -> None:
        raw = blueprint(
            entity(
                1,
                "inserter",
                control_behavior={
                    "circuit_condition": {"first_signal": {"name": "se-rocket-fuel"}, "constant": 5},
                    "logistic_condition": {"second_signal": {"type": "fluid", "name": "water"}},
                    "stack_control_input_signal": {"type": "virtual", "name": "signal-S"},
                    "circuit_set_stack_size": True,
                },
            ),
            entity(2, "small-lamp", control_behavior={"rgb_signal": {"type": "virtual", "name": "signal-white"}}),
        )
        ids = get_references(parse_document(raw))
        assert ids.item == {"se-rocket-fuel"}
        assert ids.fluid == {"water"}
        assert ids.virtual_signal == {"signal-S", "signal-white"}

    def test_combinator_parameters(self, blueprint: Factory, entity: Factory) -> None:
        decider = {
            "conditions": [{"first_signal": {"name": "coal"}, "constant": 10, "comparator": ">"}],
            "outputs": [{"signal": {"type": "virtual", "name": "signal-check"}}],
        }
        arithmetic = {
            "first_signal": {"type": "fluid", "name": "kr-oxygen"},
            "second_constant": 2,
            "operation": "*",
            "output_signal": {"type": "virtual", "name": "signal-O"},
        }
        raw = blueprint(
            entity(1, "decider-combinator", control_behavior={"decider_conditions": decider}),
            entity(2, "arithmetic-combinator", control_behavior={"arithmetic_conditions": arithmetic}),
            entity(
                3,
                "selector-combinator",
                control_behavior={"operation": "quality-transfer", "quality_source_static": {"name": "epic"}},
            ),
        )
        ids = get_references(parse_document(raw))
        assert ids.item == {"coal"}
        assert ids.fluid == {"kr-oxygen"}
        assert ids.virtual_signal == {"signal-check", "signal-O"}
        assert ids.quality == {"normal", "epic"}

    def test_display_panel_messages(self, blueprint: Factory, entity: Factory) -> None:
        message = {
            "text": "low",
            "icon": {"name": "se-heat-shielding"},
            "condition": {"first_signal": {"name": "iron-plate"}, "constant": 100},
        }
        raw = blueprint(
            entity(
                1,
                "display-panel",
                icon={"type": "virtual", "name": "signal-info"},
                control_behavior={"parameters": [message]},
            )
        )
        ids = get_references(parse_document(raw))
        assert ids.item == {"se-heat-shielding", "iron-plate"}
        assert ids.virtual_signal == {"signal-info"}

    def test_entity_filters_and_priority_lists(self, blueprint: Factory, entity: Factory) -> None:
        raw = blueprint(
            entity(1, "asteroid-collector", **{"chunk-filter": {"1": {"name": "metallic-asteroid-chunk"}}}),
            entity(2, "gun-turret", **{"priority-list": {"1": {"name": "se-meteor-defence"}}}),
            entity(3, "electric-mining-drill", filter={"filters": {"1": {"name": "kr-rare-metal-ore"}}}),
            entity(4, "splitter", filter={"name": "coal", "quality": "rare"}),
            entity(5, "pump", fluid_filter="crude-oil"),
        )
        ids = get_references(parse_document(raw))
        assert ids.asteroid_chunk == {"metallic-asteroid-chunk"}
        assert {"se-meteor-defence", "kr-rare-metal-ore"} <= ids.entity
        assert ids.item == {"coal"}
        assert ids.fluid == {"crude-oil"}
        assert "rare" in ids.quality

    def test_speaker_and_vehicle_inventories(self, blueprint: Factory, entity: Factory) -> None:
        raw = blueprint(
            entity(
                1,
                "programmable-speaker",
                parameters={"playback_volume": 1, "volume_signal_id": {"type": "virtual", "name": "signal-V"}},
                alert_parameters={"show_alert": True, "icon_signal_id": {"name": "se-cryonite"}},
            ),
            entity(2, "spidertron", trunk_inventory={"filters": {"1": {"name": "repair-pack"}}}, ammo_inventory={"bar": 1}),
            entity(3, "cargo-wagon", inventory={"filters": {"2": {"name": "wood"}}}),
            entity(4, "infinity-chest", infinity_settings={"filters": [{"index": 1, "name": "kr-battery", "count": 50}]}),
        )
        ids = get_references(parse_document(raw))
        assert ids.virtual_signal == {"signal-V"}
        assert ids.item == {"se-cryonite", "repair-pack", "wood", "kr-battery"}

    def test_items_grid_and_fuel(self, blueprint: Factory, entity: Factory) -> None:
        raw = blueprint(
            entity(
                1,
                "car",
                items=[{"id": {"name": "firearm-magazine"}, "items": {"in_inventory": []}}],
                grid=[{"equipment": {"name": "solar-panel-equipment", "quality": "rare"}, "position": {"x": 0, "y": 0}}],
                burner_fuel_inventory={"filters": {"1": {"name": "coal"}}},
            )
        )
        ids = get_references(parse_document(raw))
        assert ids.item == {"firearm-magazine", "coal"}
        assert ids.equipment == {"solar-panel-equipment"}
        assert ids.quality == {"normal", "rare"}

    def test_logistic_requests(self, blueprint: Factory, entity: Factory) -> None:
        request_filters = {
            "sections": {
                "1": {
                    "filters": {
                        "1": {"count": 10, "name": "iron-plate", "import_from": "vulcanus"},
                        "2": {"count": 5, "type": "fluid", "name": "water", "quality": "epic"},
                    }
                }
            }
        }
        raw = blueprint(entity(1, "cargo-landing-pad", request_filters=request_filters))
        ids = get_references(parse_document(raw))
        assert ids.item == {"iron-plate"}
        assert ids.fluid == {"water"}
        assert ids.space_location == {"vulcanus"}
        assert "epic" in ids.quality

    def test_tiles_icons_and_parameters(self, blueprint: Factory) -> None:
        raw = blueprint(
            icons={"1": {"signal": {"type": "virtual", "name": "signal-A"}}},
            tiles=[{"name": "kr-black-reinforced-plate", "position": {"x": 0, "y": 0}}],
            parameters=[{"type": "id", "id": "parameter-0", "ingredient-of": "parameter-1"}],
        )
        ids = get_references(parse_document(raw))
        assert ids.tile == {"kr-black-reinforced-plate"}
        assert ids.virtual_signal == {"signal-A"}
        assert ids.other == {"parameter-0"}
        assert ids.recipe == {"parameter-1"}

    def test_schedule_planet(self, blueprint: Factory) -> None:
        schedule = {
            "schedule": {
                "records": [
                    {
                        "station": "Orbit",
                        "wait_conditions": [
                            {"type": "any_planet_import_zero", "planet": {"name": "gleba"}},
                            {
                                "type": "item_count",
                                "condition": {"first_signal": {"name": "se-beryllium-ore"}, "constant": 1},
                            },
                        ],
                    }
                ]
            }
        }
        ids = get_references(parse_document(blueprint(schedules=[schedule])))
        assert ids.space_location == {"gleba"}
        assert ids.item == {"se-beryllium-ore"}

    def test_planner_references(self) -> None:
        upgrade = parse_document(
            {
                "upgrade_planner": {
                    "item": "upgrade-planner",
                    "version": GAME_VERSION,
                    "mappers": {
                        "1": {
                            "from": {"type": "entity", "name": "transport-belt"},
                            "to": {"type": "item", "name": "kr-superior-transport-belt"},
                        }
                    },
                }
            }
        )
        decon = parse_document(
            {
                "deconstruction_planner": {
                    "item": "deconstruction-planner",
                    "version": GAME_VERSION,
                    "entity_filters": {"1": {"name": "stone-furnace"}},
                    "tile_filters": {"1": {"name": "stone-path"}},
                }
            }
        )
        assert upgrade.get_ids().to_dict() == {
            "entity": ["transport-belt"],
            "item": ["kr-superior-transport-belt"],
        }
        assert decon.get_ids().to_dict() == {"entity": ["stone-furnace"], "tile": ["stone-path"]}

    def test_fresh_set_per_call(self, blueprint: Factory, entity: Factory) -> None:
        doc = parse_document(blueprint(entity(1, "inserter")))
        first = get_references(doc)
        first.add(ReferenceCategory.ENTITY, "injected")
        assert "injected" not in get_references(doc).entity


class TestBookReferences:
    """Traversal through nested books."""

    def test_book_unions_children(self, book: Factory, blueprint: Factory, entity: Factory) -> None:
        a = blueprint(entity(1, "kr-loader"))
        b = blueprint(entity(1, "se-space-pipe"))
        forward = get_references(parse_document(book(a, book(b))))
        backward = get_references(parse_document(book(book(b), a)))
        assert forward == backward
        assert forward.entity == {"kr-loader", "se-space-pipe"}

    def test_book_icons_included(self, book: Factory) -> None:
        raw = book(icons={"1": {"signal": {"name": "kr-steel-beam"}}})
        assert get_references(parse_document(raw)).item == {"kr-steel-beam"}

    def test_cycle_terminates(self, caplog: pytest.LogCaptureFixture) -> None:
        root = Book(item="blueprint-book", version=GAME_VERSION, label="loop")
        child = parse_document(
            make_blueprint(tiles=[{"name": "concrete", "position": {"x": 0, "y": 0}}])
        )
        root.add_document(child)
        root.add_document(root)

        with caplog.at_level(logging.WARNING, logger="bp_scanner"):
            ids = root.get_ids()

        assert ids.tile == {"concrete"}
        assert "contains itself" in caplog.text

    def test_shared_child_is_not_a_cycle(self, blueprint: Factory) -> None:
        child = parse_document(
            blueprint(tiles=[{"name": "concrete", "position": {"x": 0, "y": 0}}])
        )
        root = Book(item="blueprint-book", version=GAME_VERSION)
        root.add_document(child)
        root.add_document(child)
        assert root.get_ids().tile == {"concrete"}


class TestParallelReferences:
    """ScannerService walks books concurrently."""

    def test_parallel_matches_sequential(
        self, book: Factory, blueprint: Factory, entity: Factory
    ) -> None:
        raw = book(
            blueprint(entity(1, "kr-loader")),
            book(
                blueprint(entity(1, "se-space-pipe", quality="rare")),
                blueprint(tiles=[{"name": "concrete", "position": {"x": 0, "y": 0}}]),
            ),
            blueprint(entity(1, "inserter", tags={"owner": "me"})),
            icons={"1": {"signal": {"type": "virtual", "name": "signal-B"}}},
        )
        doc = parse_document(raw)
        service = ScannerService()
        assert service.get_references(doc) == doc.get_ids()
        assert service.get_references(doc, parallel=False) == doc.get_ids()

    def test_parallel_cycle_terminates(self) -> None:
        root = Book(item="blueprint-book", version=GAME_VERSION)
        root.add_document(Blueprint(item="blueprint", version=GAME_VERSION))
        root.add_document(root)
        assert ScannerService().get_references(root) == root.get_ids()
