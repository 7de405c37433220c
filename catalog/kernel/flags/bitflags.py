"""
Bit-flag arithmetic over plain integers.

A flag set is an unsigned int where bit i means capability/mode i. Every
operation returns a new value; nothing here holds state.
"""

from typing import TYPE_CHECKING, Iterable, Set, Tuple

if TYPE_CHECKING:
    from catalog.kernel.flags.registry import FlagRegistry


FLAG_WIDTH = 32
_MAX_VALUE = (1 << FLAG_WIDTH) - 1


def _check_bit(bit: int) -> int:
    if isinstance(bit, bool) or not isinstance(bit, int):
        raise ValueError(f"Bit position must be an int, got {bit!r}")
    if not 0 <= bit < FLAG_WIDTH:
        raise ValueError(f"Bit position {bit} outside 0..{FLAG_WIDTH - 1}")
    return bit


def _check_value(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Flag value must be an int, got {value!r}")
    if not 0 <= value <= _MAX_VALUE:
        raise ValueError(f"Flag value {value} does not fit in {FLAG_WIDTH} unsigned bits")
    return value


def has_flag(value: int, bit: int) -> bool:
    """Check if a specific bit is set."""
    return (_check_value(value) & (1 << _check_bit(bit))) != 0


def set_flag(value: int, bit: int) -> int:
    return _check_value(value) | (1 << _check_bit(bit))


def clear_flag(value: int, bit: int) -> int:
    return _check_value(value) & ~(1 << _check_bit(bit))


def toggle_flag(value: int, bit: int) -> int:
    return _check_value(value) ^ (1 << _check_bit(bit))


def list_set_bits(value: int) -> Tuple[int, ...]:
    """Positions of set bits, ascending."""
    value = _check_value(value)
    return tuple(bit for bit in range(FLAG_WIDTH) if value & (1 << bit))


def count_bits(value: int) -> int:
    return bin(_check_value(value)).count("1")


def mask_for(bits: Iterable[int]) -> int:
    """Combine bit positions into a single flag value."""
    mask = 0
    for bit in bits:
        mask |= 1 << _check_bit(bit)
    return mask


def match_any(value: int, required: Set[int]) -> bool:
    """True if at least one required bit is set in value."""
    return (_check_value(value) & mask_for(required)) != 0


def match_all(value: int, required: Set[int]) -> bool:
    """True if every required bit is set in value. An empty requirement always holds."""
    mask = mask_for(required)
    return (_check_value(value) & mask) == mask


def names_for(value: int, registry: "FlagRegistry") -> Tuple[str, ...]:
    """Names of bits set in value that the registry knows, in registry order."""
    value = _check_value(value)
    return tuple(d.name for d in registry if value & (1 << d.bit))


def labels_for(value: int, registry: "FlagRegistry") -> Tuple[str, ...]:
    """Display labels counterpart of names_for."""
    value = _check_value(value)
    return tuple(d.label for d in registry if value & (1 << d.bit))
