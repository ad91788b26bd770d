"""Diet ledger: per-day food, meal and quick entries with running totals.

Macros are rounded per entry when the entry is created, so a day's totals
are sums of already-rounded values. Saved meals freeze each food's
per-reference macros and never read the live food database again.
"""
from __future__ import annotations

import logging
import math
import uuid
from datetime import date
from typing import Iterable, Optional

from fittrack.core.errors import PreconditionError, ValidationError
from fittrack.core.reference import FoodCatalog, Macros
from fittrack.core.state import (
    DietDay,
    FoodEntry,
    MacroTotals,
    Meal,
    MealComponent,
    MealEntry,
    MealItem,
    PerReferenceSnapshot,
    ProfileData,
    QuickEntry,
)

log = logging.getLogger(__name__)


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def scale_macros(per_reference: Macros, reference_grams: float, grams: float) -> MacroTotals:
    ratio = grams / reference_grams
    return MacroTotals(
        calories=round_half_up(per_reference.calories * ratio),
        protein=round_half_up(per_reference.protein * ratio),
        carbs=round_half_up(per_reference.carbs * ratio),
        fat=round_half_up(per_reference.fat * ratio),
    )


def sum_macros(parts: Iterable[MacroTotals]) -> MacroTotals:
    total = MacroTotals()
    for m in parts:
        total = total.plus(m)
    return total


def _positive(value, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value) or value <= 0:
        raise ValidationError(f"{what} must be greater than 0")
    return float(value)


def day_key(on: date) -> str:
    return on.isoformat()


def get_day(data: ProfileData, on: date) -> DietDay:
    day = data.diet_log.get(day_key(on))
    return day if day is not None else DietDay()


def _append(data: ProfileData, on: date, entry) -> None:
    day = data.diet_log.setdefault(day_key(on), DietDay())
    day.entries.append(entry)
    day.totals = day.totals.plus(entry.macros)


def add_food_entry(
    data: ProfileData,
    catalog: FoodCatalog,
    on: date,
    *,
    food_id: str,
    qty,
    unit: str,
) -> FoodEntry:
    food = catalog.get(food_id)
    if food is None:
        raise ValidationError("Unknown food")
    qty = _positive(qty, "Quantity")
    food_unit = food.unit(unit)
    if food_unit is None:
        raise ValidationError(f"{food.name} cannot be measured in '{unit}'")

    grams = qty * food_unit.grams_per_unit
    entry = FoodEntry(
        id=uuid.uuid4().hex,
        food_id=food.id,
        name=food.name,
        qty=qty,
        unit=food_unit.key,
        grams=grams,
        macros=scale_macros(food.per_reference, food.reference_grams, grams),
    )
    _append(data, on, entry)
    log.info("diet %s: +%s kcal from %s", day_key(on), entry.macros.calories, food.id)
    return entry


def add_meal_entry(data: ProfileData, on: date, *, meal_id: str, servings=1) -> MealEntry:
    meal = next((m for m in data.meals if m.id == meal_id), None)
    if meal is None:
        raise PreconditionError("Meal not found")
    servings = _positive(servings, "Servings")

    components = []
    for item in meal.items:
        grams = item.grams * servings
        snap = item.per_ref_snapshot
        components.append(MealComponent(
            food_id=item.food_id,
            name=item.name,
            qty=item.qty * servings,
            unit_key=item.unit_key,
            grams=grams,
            macros=scale_macros(snap.per_reference, snap.reference_grams, grams),
        ))
    entry = MealEntry(
        id=uuid.uuid4().hex,
        meal_id=meal.id,
        name=meal.name,
        servings=servings,
        macros=sum_macros(c.macros for c in components),
        components=components,
    )
    _append(data, on, entry)
    log.info("diet %s: +%s kcal from meal %s", day_key(on), entry.macros.calories, meal.id)
    return entry


def add_quick_entry(data: ProfileData, on: date, *, label: str, macros: MacroTotals) -> QuickEntry:
    label = (label or "").strip()
    if not label:
        raise ValidationError("Quick add needs a label")
    if min(macros.calories, macros.protein, macros.carbs, macros.fat) < 0:
        raise ValidationError("Macros cannot be negative")
    entry = QuickEntry(id=uuid.uuid4().hex, label=label, macros=macros)
    _append(data, on, entry)
    return entry


def remove_entry(data: ProfileData, on: date, entry_id: str) -> None:
    day = data.diet_log.get(day_key(on))
    entry = next((e for e in day.entries if e.id == entry_id), None) if day else None
    if entry is None:
        raise PreconditionError("Entry not found")
    day.entries.remove(entry)
    day.totals = day.totals.minus(entry.macros)


# --- meals ---

def save_meal(
    data: ProfileData,
    catalog: FoodCatalog,
    *,
    name: str,
    items: list[tuple[str, float, str]],
    meal_id: Optional[str] = None,
) -> Meal:
    """Save a meal from ``(food_id, qty, unit_key)`` rows.

    Each row snapshots the food's per-reference macros as they are now.
    """
    name = (name or "").strip()
    if not name:
        raise ValidationError("Meal needs a name")
    if not items:
        raise ValidationError("Meal needs at least one food")

    meal_items = []
    for food_id, qty, unit_key in items:
        food = catalog.get(food_id)
        if food is None:
            raise ValidationError(f"Unknown food '{food_id}'")
        qty = _positive(qty, "Quantity")
        food_unit = food.unit(unit_key)
        if food_unit is None:
            raise ValidationError(f"{food.name} cannot be measured in '{unit_key}'")
        meal_items.append(MealItem(
            food_id=food.id,
            name=food.name,
            qty=qty,
            unit_key=food_unit.key,
            grams=qty * food_unit.grams_per_unit,
            per_ref_snapshot=PerReferenceSnapshot(
                reference_grams=food.reference_grams,
                per_reference=food.per_reference.model_copy(),
            ),
        ))

    meal = Meal(
        id=meal_id or uuid.uuid4().hex,
        name=name,
        items=meal_items,
        per_serving_totals=sum_macros(
            scale_macros(i.per_ref_snapshot.per_reference, i.per_ref_snapshot.reference_grams, i.grams)
            for i in meal_items
        ),
    )
    for idx, existing in enumerate(data.meals):
        if existing.id == meal.id:
            data.meals[idx] = meal
            break
    else:
        data.meals.append(meal)
    return meal


def delete_meal(data: ProfileData, meal_id: str) -> None:
    """Logged meal entries keep their own components and are untouched."""
    before = len(data.meals)
    data.meals = [m for m in data.meals if m.id != meal_id]
    if len(data.meals) == before:
        raise PreconditionError("Meal not found")


def toggle_favorite(data: ProfileData, catalog: FoodCatalog, food_id: str) -> bool:
    if catalog.get(food_id) is None:
        raise ValidationError("Unknown food")
    if food_id in data.favorites:
        data.favorites.remove(food_id)
        return False
    data.favorites.append(food_id)
    return True
