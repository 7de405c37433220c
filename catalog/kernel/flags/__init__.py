"""
Flag Core - bit-flag values and per-domain registries.
"""

from catalog.kernel.flags.bitflags import (
    FLAG_WIDTH,
    clear_flag,
    count_bits,
    has_flag,
    labels_for,
    list_set_bits,
    mask_for,
    match_all,
    match_any,
    names_for,
    set_flag,
    toggle_flag,
)
from catalog.kernel.flags.registry import (
    ACCOUNT_CAPABILITIES,
    EQUIPMENT_MODES,
    NONE_OPTION,
    FlagDefinition,
    FlagRegistry,
)

__all__ = [
    "FLAG_WIDTH",
    "clear_flag",
    "count_bits",
    "has_flag",
    "labels_for",
    "list_set_bits",
    "mask_for",
    "match_all",
    "match_any",
    "names_for",
    "set_flag",
    "toggle_flag",
    "ACCOUNT_CAPABILITIES",
    "EQUIPMENT_MODES",
    "NONE_OPTION",
    "FlagDefinition",
    "FlagRegistry",
]
