"""Shared fixtures for bp_scanner tests."""

import logging
import logging.handlers
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional

import pytest

# 2.0.10, build 1
GAME_VERSION = 562949954076673


def make_entity(number: int, name: str, **fields: Any) -> Dict[str, Any]:
    """Raw entity with a fixed position; extra keyword fields are merged in."""
    entity: Dict[str, Any] = {
        "entity_number": number,
        "name": name,
        "position": {"x": 0.5, "y": 0.5},
    }
    entity.update(fields)
    return entity


def make_blueprint(*entities: Dict[str, Any], **fields: Any) -> Dict[str, Any]:
    """Wrapped raw blueprint holding the given entities."""
    body: Dict[str, Any] = {"item": "blueprint", "version": GAME_VERSION}
    if entities:
        body["entities"] = list(entities)
    body.update(fields)
    return {"blueprint": body}


def make_book(*documents: Dict[str, Any], active_index: int = 1, **fields: Any) -> Dict[str, Any]:
    """Wrapped raw book with documents in slots 1..n."""
    body: Dict[str, Any] = {
        "item": "blueprint-book",
        "version": GAME_VERSION,
        "active_index": active_index,
    }
    if documents:
        body["blueprints"] = {str(i): doc for i, doc in enumerate(documents, start=1)}
    body.update(fields)
    return {"blueprint_book": body}


def meta_tags(mods: Optional[Any] = None, startup: Optional[Any] = None) -> Dict[str, Any]:
    """Entity tags carrying a bp_meta_info marker."""
    info: Dict[str, Any] = {}
    if mods is not None:
        info["mods"] = mods
    if startup is not None:
        info["startup"] = startup
    return {"bp_meta_info": info}


@pytest.fixture
def entity() -> Callable[..., Dict[str, Any]]:
    return make_entity


@pytest.fixture
def blueprint() -> Callable[..., Dict[str, Any]]:
    return make_blueprint


@pytest.fixture
def book() -> Callable[..., Dict[str, Any]]:
    return make_book


@pytest.fixture
def settings_path(tmp_path: Path) -> Path:
    """INI file for an isolated AppSettings instance."""
    return tmp_path / "settings.ini"


@pytest.fixture
def clean_logging() -> Iterator[None]:
    """Remove the handlers installed by setup_logging after the test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, logging.handlers.RotatingFileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
