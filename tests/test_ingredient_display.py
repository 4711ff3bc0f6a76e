import pytest

from almanac.services.ingredient_display import SCALE_PRESETS, prepare_ingredient, render_ingredient


def test_prepare_ingredient_stores_canonical_grams():
    row = prepare_ingredient("Flour", 2, "cups", 0)
    assert row == {
        "name": "Flour",
        "amount_grams": 250,
        "unit": "cups",
        "display_amount": 2,
        "order_index": 0,
    }


def test_prepare_ingredient_weight_unit():
    row = prepare_ingredient("Butter", 0.5, "lb", 3)
    assert row["amount_grams"] == pytest.approx(226.796)
    assert row["order_index"] == 3


def test_render_original_unit():
    shown = render_ingredient("flour", 250, 2, "cups")
    assert shown.amount == 2
    assert shown.unit == "cups"
    assert shown.text == "2 cups flour"
    assert shown.is_approx is False


def test_render_weight_system_is_approximate_for_volume_entries():
    shown = render_ingredient("flour", 250, 2, "cups", unit_system="weight")
    assert shown.text == "250 g flour"
    assert shown.is_approx is True


def test_render_weight_system_exact_for_weight_entries():
    shown = render_ingredient("butter", 453.592, 1, "lb", unit_system="weight")
    assert shown.text == "453.59 g butter"
    assert shown.is_approx is False


def test_render_target_unit_uses_stored_grams():
    # 250 g flour = 500 ml = 33.33 tbsp
    shown = render_ingredient("flour", 250, 2, "cups", target_unit="tbsp")
    assert shown.unit == "tbsp"
    assert shown.amount == pytest.approx(500 / 15)
    assert shown.text == "33.33 tbsp flour"
    assert shown.is_approx is False


def test_render_target_weight_unit_from_volume_entry():
    shown = render_ingredient("water", 1000, 4, "cups", target_unit="kg")
    assert shown.text == "1 kg water"
    assert shown.is_approx is True


@pytest.mark.parametrize("multiplier,expected", [(0.5, "1 cup milk"), (1.0, "2 cups milk"), (2.0, "4 cups milk")])
def test_render_presets_scale_amount(multiplier, expected):
    assert multiplier in SCALE_PRESETS
    shown = render_ingredient("milk", 515, 2, "cups", multiplier=multiplier)
    assert shown.text == expected


def test_render_custom_multiplier_after_conversion():
    shown = render_ingredient("flour", 250, 2, "cups", unit_system="weight", multiplier=1.5)
    assert shown.amount == 375
    assert shown.text == "375 g flour"


def test_render_unknown_unit_is_not_flagged():
    shown = render_ingredient("eggs", 3, 3, "other", unit_system="weight")
    assert shown.text == "3 g eggs"
    assert shown.is_approx is False
