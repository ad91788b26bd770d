from fastapi import APIRouter, Depends, HTTPException, Query, status
from fittrack.core.notify import BufferedNotifier
from fittrack.core.reference import Exercise, Food
from fittrack.deps.profile import get_notifier, get_session
from fittrack.schemas.session import SessionView
from fittrack.services.session import DEFAULT_EXERCISES, DEFAULT_FOODS, FitnessSession

router = APIRouter(prefix="/reference", tags=["reference"])

@router.get("/exercises", response_model=list[Exercise])
def list_exercises(muscle_group: str | None = Query(None)):
    exercises = DEFAULT_EXERCISES.all()
    if muscle_group:
        exercises = [e for e in exercises if e.muscle_group == muscle_group]
    return exercises

@router.get("/foods", response_model=list[Food])
def list_foods(q: str | None = Query(None, max_length=60)):
    foods = DEFAULT_FOODS.all()
    if q:
        foods = [f for f in foods if q.lower() in f.name.lower()]
    return foods

@router.get("/foods/{food_id}", response_model=Food)
def get_food(food_id: str):
    food = DEFAULT_FOODS.get(food_id)
    if not food:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Food not found")
    return food

@router.post("/foods/{food_id}/favorite", response_model=SessionView)
def toggle_favorite(
    food_id: str,
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
):
    session.toggle_favorite(food_id)
    return SessionView.of(session, notifier)
