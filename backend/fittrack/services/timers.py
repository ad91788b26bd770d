"""Glue between profile sessions and the background rest ticker."""
from __future__ import annotations

import logging

from fittrack.core.state import ProfileData, TimerState
from fittrack.core.ticker import RestTicker
from fittrack.db import SessionLocal
from fittrack.repositories.profile_repo import ProfileRepository
from fittrack.services.locks import ProfileLocks
from fittrack.services.session import PROFILE_LOCKS, FitnessSession

log = logging.getLogger(__name__)


def tick_profile(profile_id: str, locks: ProfileLocks = PROFILE_LOCKS) -> bool:
    """One background tick: load, resync, persist on expiry.

    Runs in a worker thread; the profile lock orders it with requests.
    """
    with SessionLocal() as db:
        repo = ProfileRepository(db)
        profile = repo.get(profile_id)
        if profile is None:
            return False
        return FitnessSession(repo, profile, locks=locks).tick()


def sync_ticker(ticker: RestTicker, session: FitnessSession) -> None:
    """Run a tick loop exactly while the session's rest timer runs."""
    pid, locks = session.profile_id, session.locks
    if session.rest_running:
        ticker.ensure(pid, lambda: tick_profile(pid, locks))
    else:
        ticker.stop(pid)


def resume_tickers(ticker: RestTicker, locks: ProfileLocks = PROFILE_LOCKS) -> int:
    """Restart loops for timers that were running when the process stopped."""
    resumed = 0
    with SessionLocal() as db:
        for profile in ProfileRepository(db).list(limit=1000).items:
            active = ProfileData.load(profile.data).active_workout
            if active is not None and active.rest.state is TimerState.running:
                pid = profile.id
                ticker.ensure(pid, lambda pid=pid: tick_profile(pid, locks))
                resumed += 1
    if resumed:
        log.info("resumed %d running rest timer(s)", resumed)
    return resumed
