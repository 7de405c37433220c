"""
Flag registries - ordered bit -> name mappings, one per domain.

The host application supplies definitions once at startup. Registries are
independent: a name or bit in one never affects another.
"""

from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from catalog.kernel.flags.bitflags import FLAG_WIDTH, mask_for


# Filter option meaning "no flags set"; never a registrable name
NONE_OPTION = "none"


class FlagDefinition(BaseModel):
    """One registered bit."""

    model_config = ConfigDict(frozen=True)

    bit: int = Field(..., ge=0, lt=FLAG_WIDTH)
    name: str = Field(..., min_length=1)
    label: str = ""

    @model_validator(mode="before")
    @classmethod
    def default_label(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and not data.get("label") and data.get("name"):
            data = {**data, "label": str(data["name"]).replace("_", " ").title()}
        return data


class FlagRegistry:
    """
    Ordered mapping from bit position to symbolic name.

    Iteration follows definition order, which is also the order used by
    names_for(). Name lookups are case-insensitive.
    """

    def __init__(self, domain: str, definitions: Sequence[FlagDefinition]):
        self.domain = domain
        self._definitions: Tuple[FlagDefinition, ...] = tuple(definitions)
        self._by_name: Dict[str, FlagDefinition] = {}
        self._by_bit: Dict[int, FlagDefinition] = {}

        for definition in self._definitions:
            key = definition.name.lower()
            if key == NONE_OPTION:
                raise ValueError(f"'{NONE_OPTION}' is reserved and cannot name a flag in {domain}")
            if key in self._by_name:
                raise ValueError(f"Duplicate flag name '{definition.name}' in {domain}")
            if definition.bit in self._by_bit:
                raise ValueError(f"Duplicate bit {definition.bit} in {domain}")
            self._by_name[key] = definition
            self._by_bit[definition.bit] = definition

    @classmethod
    def from_definitions(
        cls,
        domain: str,
        definitions: Iterable[Union[FlagDefinition, Mapping[str, Any]]],
    ) -> "FlagRegistry":
        """Build a registry from `{bit, name, label?}` entries."""
        return cls(
            domain,
            [d if isinstance(d, FlagDefinition) else FlagDefinition.model_validate(d) for d in definitions],
        )

    def __iter__(self) -> Iterator[FlagDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._by_name

    def __repr__(self) -> str:
        return f"<FlagRegistry {self.domain} bits={[d.bit for d in self._definitions]}>"

    @property
    def names(self) -> List[str]:
        return [d.name for d in self._definitions]

    @property
    def mask(self) -> int:
        """Union of every registered bit."""
        return mask_for(d.bit for d in self._definitions)

    def bit_for(self, name: str) -> int:
        try:
            return self._by_name[name.lower()].bit
        except KeyError:
            raise KeyError(f"Unknown flag '{name}' in {self.domain}") from None

    def get_bit(self, name: str) -> Optional[int]:
        definition = self._by_name.get(name.lower())
        return definition.bit if definition else None

    def name_for(self, bit: int) -> Optional[str]:
        definition = self._by_bit.get(bit)
        return definition.name if definition else None

    def label_for(self, name: str) -> str:
        return self._by_name[name.lower()].label

    def is_registered_value(self, value: int) -> bool:
        """True if value uses no bits outside this registry."""
        return value & ~self.mask == 0


ACCOUNT_CAPABILITIES = FlagRegistry.from_definitions(
    "account_capabilities",
    [
        {"bit": 0, "name": "light", "label": "Light"},
        {"bit": 1, "name": "camera", "label": "Camera"},
        {"bit": 2, "name": "lens", "label": "Lens"},
        {"bit": 3, "name": "admin", "label": "Administrator"},
    ],
)

EQUIPMENT_MODES = FlagRegistry.from_definitions(
    "equipment_modes",
    [
        {"bit": 0, "name": "tungsten", "label": "Tungsten Mode"},
        {"bit": 1, "name": "daylight", "label": "Daylight Mode"},
        {"bit": 2, "name": "s_curve", "label": "S-Curve"},
        {"bit": 3, "name": "log_curve", "label": "Log Curve"},
        {"bit": 4, "name": "exp_curve", "label": "Exp Curve"},
        {"bit": 5, "name": "dim_0_1", "label": "0.1% Dimming"},
        {"bit": 6, "name": "silent", "label": "Silent Mode"},
    ],
)
