"""Units offered to cooks when entering ingredients and choosing a default."""

from typing import Literal, NamedTuple

UnitGroup = Literal["weight-metric", "weight-imperial", "volume", "other"]

DEFAULT_UNIT = "cups"


class UnitOption(NamedTuple):
    value: str
    label: str
    group: UnitGroup


UNIT_OPTIONS: tuple[UnitOption, ...] = (
    UnitOption("g", "g (grams)", "weight-metric"),
    UnitOption("kg", "kg (kilograms)", "weight-metric"),
    UnitOption("oz", "oz (ounces)", "weight-imperial"),
    UnitOption("lb", "lb (pounds)", "weight-imperial"),
    UnitOption("cups", "cups", "volume"),
    UnitOption("tbsp", "tbsp (tablespoon)", "volume"),
    UnitOption("tsp", "tsp (teaspoon)", "volume"),
    UnitOption("ml", "ml (milliliters)", "volume"),
    UnitOption("fl oz", "fl oz (fluid ounces)", "volume"),
    UnitOption("l", "l (liters)", "volume"),
    UnitOption("other", "Other", "other"),
)

UNIT_GROUPS: dict[str, UnitGroup] = {
    "Weight - Metric": "weight-metric",
    "Weight - Imperial": "weight-imperial",
    "Volume": "volume",
    "Other": "other",
}

_VALUES = frozenset(opt.value for opt in UNIT_OPTIONS)


def is_valid_unit_option(value: str) -> bool:
    return value in _VALUES


def options_by_group() -> dict[UnitGroup, list[UnitOption]]:
    """Options keyed by group id, preserving the display order."""
    grouped: dict[UnitGroup, list[UnitOption]] = {g: [] for g in UNIT_GROUPS.values()}
    for opt in UNIT_OPTIONS:
        grouped[opt.group].append(opt)
    return grouped
