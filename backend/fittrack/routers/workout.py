# Routes touching the rest timer are async so tick loops share the app's event loop;
# the session work itself runs in the threadpool
from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool
from fittrack.core.notify import BufferedNotifier
from fittrack.core.ticker import RestTicker
from fittrack.deps.profile import get_notifier, get_session, get_ticker
from fittrack.schemas.session import SessionView
from fittrack.schemas.workout import Confirm, ManualSetCreate, SetCreate, WorkoutStart
from fittrack.services.session import FitnessSession
from fittrack.services.timers import sync_ticker

router = APIRouter(prefix="/workout", tags=["workout"])

@router.get("", response_model=SessionView)
async def active_workout(
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
    ticker: RestTicker = Depends(get_ticker),
):
    await run_in_threadpool(session.tick)
    sync_ticker(ticker, session)
    return SessionView.of(session, notifier)

@router.post("/start", response_model=SessionView, status_code=status.HTTP_201_CREATED)
async def start_workout(
    payload: WorkoutStart,
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
    ticker: RestTicker = Depends(get_ticker),
):
    await run_in_threadpool(session.start_workout, payload.template_id, confirm_replace=payload.confirm_replace)
    sync_ticker(ticker, session)
    return SessionView.of(session, notifier)

@router.post("/sets", response_model=SessionView, status_code=status.HTTP_201_CREATED)
async def log_set(
    payload: SetCreate,
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
    ticker: RestTicker = Depends(get_ticker),
):
    await run_in_threadpool(session.log_set, payload.weight, payload.reps, payload.rir)
    sync_ticker(ticker, session)
    return SessionView.of(session, notifier)

@router.post("/next", response_model=SessionView)
async def next_exercise(
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
    ticker: RestTicker = Depends(get_ticker),
):
    await run_in_threadpool(session.next_exercise)
    sync_ticker(ticker, session)
    return SessionView.of(session, notifier)

@router.post("/prev", response_model=SessionView)
async def prev_exercise(
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
    ticker: RestTicker = Depends(get_ticker),
):
    await run_in_threadpool(session.prev_exercise)
    sync_ticker(ticker, session)
    return SessionView.of(session, notifier)

@router.post("/finish", response_model=SessionView)
async def finish_workout(
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
    ticker: RestTicker = Depends(get_ticker),
):
    await run_in_threadpool(session.finish_workout)
    sync_ticker(ticker, session)
    return SessionView.of(session, notifier)

@router.post("/discard", response_model=SessionView)
async def discard_workout(
    payload: Confirm,
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
    ticker: RestTicker = Depends(get_ticker),
):
    await run_in_threadpool(session.discard_workout, confirm=payload.confirm)
    sync_ticker(ticker, session)
    return SessionView.of(session, notifier)

@router.post("/manual-sets", response_model=SessionView, status_code=status.HTTP_201_CREATED)
def log_manual_set(
    payload: ManualSetCreate,
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
):
    session.log_manual_set(
        exercise_id=payload.exercise_id,
        on=payload.date or session.today(),
        weight=payload.weight,
        reps=payload.reps,
        rir=payload.rir,
    )
    return SessionView.of(session, notifier)
