from fastapi import APIRouter, Depends
from fittrack.core.notify import BufferedNotifier
from fittrack.deps.profile import get_notifier, get_session
from fittrack.schemas.profile import RestDefaultsUpdate, SettingsUpdate
from fittrack.schemas.session import SessionView
from fittrack.services.session import FitnessSession

router = APIRouter(prefix="/settings", tags=["settings"])

@router.get("")
def read_settings(session: FitnessSession = Depends(get_session)):
    return {"settings": session.data.settings, "rest_defaults": session.data.rest_defaults}

@router.put("", response_model=SessionView)
def update_settings(
    payload: SettingsUpdate,
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
):
    session.update_settings(**payload.model_dump(exclude_unset=True))
    return SessionView.of(session, notifier)

@router.put("/rest", response_model=SessionView)
def update_rest_defaults(
    payload: RestDefaultsUpdate,
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
):
    session.update_rest_defaults(**payload.model_dump(exclude_unset=True))
    return SessionView.of(session, notifier)
