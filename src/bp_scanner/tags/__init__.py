"""
Free-form metadata values attached to blueprint entities.
"""

from .any_basic import (
    AnyBasic,
    AnyBasicKind,
    TagTable,
    dump_tag_table,
    format_number,
    parse_tag_table,
)

__all__ = [
    "AnyBasic",
    "AnyBasicKind",
    "TagTable",
    "dump_tag_table",
    "format_number",
    "parse_tag_table",
]
