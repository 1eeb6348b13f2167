"""
Component Catalog

Versioned table of infrastructure component kinds. Additions are
backward-compatible; removals and renames are breaking.
"""

from infraflow.catalog.components import (
    COMPONENT_CATALOG,
    ComponentCategory,
    ComponentInfo,
    get_component,
    get_label_for_type,
    get_tier_for_type,
    is_known_type,
    types_in_category,
)

__all__ = [
    "COMPONENT_CATALOG",
    "ComponentCategory",
    "ComponentInfo",
    "get_component",
    "get_label_for_type",
    "get_tier_for_type",
    "is_known_type",
    "types_in_category",
]
