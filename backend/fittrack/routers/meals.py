from fastapi import APIRouter, Depends, status
from fittrack.core.notify import BufferedNotifier
from fittrack.core.state import Meal
from fittrack.deps.profile import get_notifier, get_session
from fittrack.schemas.diet import MealCreate
from fittrack.schemas.session import SessionView
from fittrack.services.session import FitnessSession

router = APIRouter(prefix="/meals", tags=["meals"])

@router.get("", response_model=list[Meal])
def list_meals(session: FitnessSession = Depends(get_session)):
    return session.data.meals

@router.post("", response_model=SessionView, status_code=status.HTTP_201_CREATED)
def save_meal(
    payload: MealCreate,
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
):
    items = [(i.food_id, i.qty, i.unit_key) for i in payload.items]
    session.save_meal(name=payload.name, items=items)
    return SessionView.of(session, notifier)

@router.delete("/{meal_id}", response_model=SessionView)
def delete_meal(
    meal_id: str,
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
):
    session.delete_meal(meal_id)
    return SessionView.of(session, notifier)
