from datetime import date
from fastapi import APIRouter, Depends, status
from fittrack.core import diet
from fittrack.core.notify import BufferedNotifier
from fittrack.core.state import MacroTotals
from fittrack.deps.profile import get_notifier, get_session
from fittrack.schemas.diet import FoodEntryCreate, MealEntryCreate, QuickEntryCreate, WaterCreate
from fittrack.schemas.session import SessionView
from fittrack.services.session import FitnessSession

router = APIRouter(prefix="/diet", tags=["diet"])

@router.get("/{day}")
def read_day(day: date, session: FitnessSession = Depends(get_session)):
    s = session.data.settings
    return {
        "date": day,
        "day": diet.get_day(session.data, day),
        "water": session.data.water_log.get(day.isoformat(), 0),
        "goals": {
            "calories": s.calorie_goal,
            "protein": s.protein_goal,
            "carbs": s.carbs_goal,
            "fat": s.fat_goal,
            "water": s.water_goal,
        },
    }

@router.post("/{day}/foods", response_model=SessionView, status_code=status.HTTP_201_CREATED)
def add_food(
    day: date,
    payload: FoodEntryCreate,
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
):
    session.add_food(day, food_id=payload.food_id, qty=payload.qty, unit=payload.unit)
    return SessionView.of(session, notifier)

@router.post("/{day}/meals", response_model=SessionView, status_code=status.HTTP_201_CREATED)
def add_meal(
    day: date,
    payload: MealEntryCreate,
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
):
    session.add_meal(day, meal_id=payload.meal_id, servings=payload.servings)
    return SessionView.of(session, notifier)

@router.post("/{day}/quick", response_model=SessionView, status_code=status.HTTP_201_CREATED)
def quick_add(
    day: date,
    payload: QuickEntryCreate,
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
):
    macros = MacroTotals(
        calories=payload.calories, protein=payload.protein, carbs=payload.carbs, fat=payload.fat
    )
    session.add_quick(day, label=payload.label, macros=macros)
    return SessionView.of(session, notifier)

@router.delete("/{day}/entries/{entry_id}", response_model=SessionView)
def remove_entry(
    day: date,
    entry_id: str,
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
):
    session.remove_entry(day, entry_id)
    return SessionView.of(session, notifier)

@router.post("/{day}/water", response_model=SessionView)
def log_water(
    day: date,
    payload: WaterCreate,
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
):
    session.log_water(day, payload.cups)
    return SessionView.of(session, notifier)
