import pytest

from almanac.services.unit_conversion import format_measurement, round_display


@pytest.mark.parametrize(
    "amount,unit,expected",
    [
        (1, "cups", "1 cup"),
        (2, "cups", "2 cups"),
        (1.005, "g", "1 g"),
        (2.5, "cups", "2.5 cups"),
        (1 / 3, "cup", "0.33 cup"),
        (0.999, "tablespoons", "1 tablespoon"),
        (125.0, "g", "125 g"),
        (1, "g", "1 g"),
        (0, "tsp", "0 tsp"),
        (1.5, "cups", "1.5 cups"),
    ],
)
def test_format_measurement(amount, unit, expected):
    assert format_measurement(amount, unit) == expected


def test_singular_only_for_exactly_one():
    assert format_measurement(1.01, "cups") == "1.01 cups"
    assert format_measurement(0.996, "cups") == "1 cup"


def test_round_display_goes_half_up():
    assert round_display(0.125) == 0.13
    assert round_display(1.005) == 1


def test_non_finite_amounts_format_without_raising():
    assert format_measurement(float("inf"), "g") == "inf g"
    assert format_measurement(float("nan"), "cups") == "nan cups"
    assert round_display(float("inf")) == float("inf")


def test_amount_too_large_to_round_passes_through():
    assert round_display(1e307) == 1e307
    assert format_measurement(1e307, "g") == "1e+307 g"
