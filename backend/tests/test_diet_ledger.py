import random
from datetime import date

import pytest

from fittrack.core import diet
from fittrack.core.errors import PreconditionError, ValidationError
from fittrack.core.reference import FoodCatalog, Macros
from fittrack.core.state import MacroTotals, ProfileData

DAY = date(2026, 3, 2)
BOWL = [("oats", 1, "cup"), ("whole_milk", 1, "cup"), ("banana", 1, "medium")]


def elementwise_sum(day):
    return diet.sum_macros(e.macros for e in day.entries)


class TestFoodEntries:
    def test_grams_and_rounded_macros(self):
        data = ProfileData()
        e = diet.add_food_entry(data, FoodCatalog(), DAY, food_id="chicken_breast", qty=150, unit="g")
        assert e.grams == 150
        assert e.macros == MacroTotals(calories=248, protein=47, carbs=0, fat=5)
        assert diet.get_day(data, DAY).totals == e.macros

    def test_unit_conversion(self):
        data = ProfileData()
        e = diet.add_food_entry(data, FoodCatalog(), DAY, food_id="egg", qty=2, unit="large")
        assert e.grams == 100
        assert e.macros == MacroTotals(calories=143, protein=13, carbs=1, fat=10)

    def test_food_with_non_100g_reference(self):
        data = ProfileData()
        e = diet.add_food_entry(data, FoodCatalog(), DAY, food_id="whey_protein", qty=1, unit="scoop")
        assert e.macros == MacroTotals(calories=120, protein=24, carbs=3, fat=2)

    @pytest.mark.parametrize("food_id,qty,unit", [
        ("chicken_breast", 1, "cup"),
        ("chicken_breast", 0, "g"),
        ("chicken_breast", -10, "g"),
        ("unicorn", 100, "g"),
    ])
    def test_rejected_entries_leave_the_log_alone(self, food_id, qty, unit):
        data = ProfileData()
        with pytest.raises(ValidationError):
            diet.add_food_entry(data, FoodCatalog(), DAY, food_id=food_id, qty=qty, unit=unit)
        assert data.diet_log == {}


class TestMeals:
    def test_per_serving_totals(self):
        data = ProfileData()
        meal = diet.save_meal(data, FoodCatalog(), name="Oats bowl", items=BOWL)
        assert meal.per_serving_totals == MacroTotals(calories=569, protein=23, carbs=93, fat=14)
        assert [i.grams for i in meal.items] == [81, 244, 118]

    def test_one_serving_matches_saved_totals(self):
        data = ProfileData()
        meal = diet.save_meal(data, FoodCatalog(), name="Oats bowl", items=BOWL)
        e = diet.add_meal_entry(data, DAY, meal_id=meal.id, servings=1)
        assert e.macros == meal.per_serving_totals
        assert len(e.components) == 3

    def test_servings_scale_each_component(self):
        data = ProfileData()
        meal = diet.save_meal(data, FoodCatalog(), name="Oats bowl", items=BOWL)
        e = diet.add_meal_entry(data, DAY, meal_id=meal.id, servings=2)
        assert [c.grams for c in e.components] == [162, 488, 236]
        assert [c.qty for c in e.components] == [2, 2, 2]
        assert e.macros.calories == 630 + 298 + 210

    def test_meal_is_isolated_from_food_edits(self):
        catalog = FoodCatalog()
        data = ProfileData()
        meal = diet.save_meal(data, catalog, name="Oats bowl", items=BOWL)
        logged = diet.add_meal_entry(data, DAY, meal_id=meal.id)
        saved_totals = meal.per_serving_totals.model_copy()

        oats = catalog.get("oats")
        catalog.replace(oats.model_copy(update={"per_reference": Macros(calories=999, protein=1, carbs=1, fat=1)}))

        assert data.meals[0].per_serving_totals == saved_totals
        assert logged.macros == saved_totals
        again = diet.add_meal_entry(data, DAY, meal_id=meal.id)
        assert again.macros == saved_totals

    def test_save_meal_validation(self):
        data = ProfileData()
        with pytest.raises(ValidationError):
            diet.save_meal(data, FoodCatalog(), name="  ", items=BOWL)
        with pytest.raises(ValidationError):
            diet.save_meal(data, FoodCatalog(), name="Empty", items=[])
        with pytest.raises(ValidationError):
            diet.save_meal(data, FoodCatalog(), name="Bad", items=[("oats", 1, "scoop")])
        assert data.meals == []

    def test_unknown_meal(self):
        with pytest.raises(PreconditionError):
            diet.add_meal_entry(ProfileData(), DAY, meal_id="nope")

    def test_deleting_meal_keeps_logged_entries(self):
        data = ProfileData()
        meal = diet.save_meal(data, FoodCatalog(), name="Oats bowl", items=BOWL)
        diet.add_meal_entry(data, DAY, meal_id=meal.id)
        diet.delete_meal(data, meal.id)
        assert data.meals == []
        assert diet.get_day(data, DAY).totals.calories == 569


class TestTotals:
    def test_quick_add(self):
        data = ProfileData()
        diet.add_quick_entry(data, DAY, label="Protein bar", macros=MacroTotals(calories=210, protein=20, carbs=22, fat=7))
        assert diet.get_day(data, DAY).totals.calories == 210

    def test_quick_add_validation(self):
        data = ProfileData()
        with pytest.raises(ValidationError):
            diet.add_quick_entry(data, DAY, label="", macros=MacroTotals(calories=100))
        with pytest.raises(ValidationError):
            diet.add_quick_entry(data, DAY, label="x", macros=MacroTotals(calories=-100))
        assert data.diet_log == {}

    def test_remove_decrements_totals(self):
        data = ProfileData()
        catalog = FoodCatalog()
        a = diet.add_food_entry(data, catalog, DAY, food_id="banana", qty=1, unit="medium")
        b = diet.add_food_entry(data, catalog, DAY, food_id="egg", qty=3, unit="large")
        diet.remove_entry(data, DAY, a.id)
        day = diet.get_day(data, DAY)
        assert [e.id for e in day.entries] == [b.id]
        assert day.totals == b.macros

    def test_remove_unknown_entry(self):
        with pytest.raises(PreconditionError):
            diet.remove_entry(ProfileData(), DAY, "nope")

    def test_days_are_independent(self):
        data = ProfileData()
        diet.add_quick_entry(data, DAY, label="a", macros=MacroTotals(calories=100))
        diet.add_quick_entry(data, date(2026, 3, 3), label="b", macros=MacroTotals(calories=300))
        assert diet.get_day(data, DAY).totals.calories == 100
        assert set(data.diet_log) == {"2026-03-02", "2026-03-03"}

    def test_totals_equal_sum_of_entries_for_any_sequence(self):
        rng = random.Random(7)
        catalog = FoodCatalog()
        data = ProfileData()
        meal = diet.save_meal(data, catalog, name="Oats bowl", items=BOWL)
        foods = catalog.all()
        for _ in range(300):
            day = diet.get_day(data, DAY)
            roll = rng.random()
            if roll < 0.45:
                food = rng.choice(foods)
                unit = rng.choice(food.units)
                diet.add_food_entry(data, catalog, DAY, food_id=food.id, qty=rng.uniform(0.1, 4), unit=unit.key)
            elif roll < 0.65:
                diet.add_meal_entry(data, DAY, meal_id=meal.id, servings=rng.choice([0.5, 1, 1.5, 2]))
            elif roll < 0.8:
                m = MacroTotals(calories=rng.randint(0, 800), protein=rng.randint(0, 60))
                diet.add_quick_entry(data, DAY, label="quick", macros=m)
            elif day.entries:
                diet.remove_entry(data, DAY, rng.choice(day.entries).id)
            day = diet.get_day(data, DAY)
            assert day.totals == elementwise_sum(day)


def test_toggle_favorite():
    data = ProfileData()
    catalog = FoodCatalog()
    assert diet.toggle_favorite(data, catalog, "oats") is True
    assert data.favorites == ["oats"]
    assert diet.toggle_favorite(data, catalog, "oats") is False
    assert data.favorites == []
    with pytest.raises(ValidationError):
        diet.toggle_favorite(data, catalog, "nope")
