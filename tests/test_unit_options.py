from almanac.services.unit_options import (
    DEFAULT_UNIT, UNIT_GROUPS, UNIT_OPTIONS, is_valid_unit_option, options_by_group,
)
from almanac.services.unit_conversion import classify_unit


def test_default_unit_is_an_option():
    assert is_valid_unit_option(DEFAULT_UNIT)
    assert not is_valid_unit_option("barrel")


def test_options_are_classified_by_converter():
    for opt in UNIT_OPTIONS:
        category = classify_unit(opt.value)
        if opt.group == "volume":
            assert category == "volume", opt
        elif opt.group.startswith("weight"):
            assert category == "weight", opt
        else:
            assert category == "unknown", opt


def test_options_by_group_keeps_order():
    grouped = options_by_group()
    assert list(grouped) == list(UNIT_GROUPS.values())
    assert [o.value for o in grouped["weight-metric"]] == ["g", "kg"]
    assert [o.value for o in grouped["other"]] == ["other"]
