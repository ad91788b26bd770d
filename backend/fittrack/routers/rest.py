from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from fittrack.core.notify import BufferedNotifier
from fittrack.core.ticker import RestTicker
from fittrack.deps.profile import get_notifier, get_session, get_ticker
from fittrack.schemas.session import SessionView
from fittrack.schemas.workout import RestAdjust
from fittrack.services.session import FitnessSession
from fittrack.services.timers import sync_ticker

router = APIRouter(prefix="/rest", tags=["rest"])

@router.get("", response_model=SessionView)
async def read_rest(
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
    ticker: RestTicker = Depends(get_ticker),
):
    await run_in_threadpool(session.tick)
    sync_ticker(ticker, session)
    return SessionView.of(session, notifier)

@router.post("/start", response_model=SessionView)
async def start_rest(
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
    ticker: RestTicker = Depends(get_ticker),
):
    await run_in_threadpool(session.rest_start)
    sync_ticker(ticker, session)
    return SessionView.of(session, notifier)

@router.post("/pause", response_model=SessionView)
async def pause_rest(
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
    ticker: RestTicker = Depends(get_ticker),
):
    await run_in_threadpool(session.rest_pause)
    sync_ticker(ticker, session)
    return SessionView.of(session, notifier)

@router.post("/reset", response_model=SessionView)
async def reset_rest(
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
    ticker: RestTicker = Depends(get_ticker),
):
    await run_in_threadpool(session.rest_reset)
    sync_ticker(ticker, session)
    return SessionView.of(session, notifier)

@router.post("/skip", response_model=SessionView)
async def skip_rest(
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
    ticker: RestTicker = Depends(get_ticker),
):
    await run_in_threadpool(session.rest_skip)
    sync_ticker(ticker, session)
    return SessionView.of(session, notifier)

@router.post("/adjust", response_model=SessionView)
async def adjust_rest(
    payload: RestAdjust,
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
    ticker: RestTicker = Depends(get_ticker),
):
    await run_in_threadpool(session.rest_adjust, payload.delta_sec)
    # A shortened timer may already be due
    await run_in_threadpool(session.tick)
    sync_ticker(ticker, session)
    return SessionView.of(session, notifier)
