from fastapi import APIRouter, Depends, status
from fittrack.core.notify import BufferedNotifier
from fittrack.deps.profile import get_notifier, get_session
from fittrack.schemas.diet import WeightCreate
from fittrack.schemas.session import SessionView
from fittrack.services.session import FitnessSession

router = APIRouter(prefix="/progress", tags=["progress"])

@router.get("")
def progress_summary(session: FitnessSession = Depends(get_session)):
    return session.progress()

@router.post("/weight", response_model=SessionView, status_code=status.HTTP_201_CREATED)
def log_weight(
    payload: WeightCreate,
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
):
    session.log_weight(payload.date or session.today(), payload.weight)
    return SessionView.of(session, notifier)
