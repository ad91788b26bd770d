# fittrack/deps/profile.py
from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from fittrack.core.notify import BufferedNotifier
from fittrack.core.ticker import RestTicker
from fittrack.db import get_db
from fittrack.repositories.profile_repo import ProfileRepository
from fittrack.services.locks import ProfileLocks
from fittrack.services.session import FitnessSession

def get_notifier() -> BufferedNotifier:
    # One per request; FastAPI caches it so routers and the session share it
    return BufferedNotifier()

def get_ticker(request: Request) -> RestTicker:
    return request.app.state.ticker

def get_profile_locks(request: Request) -> ProfileLocks:
    return request.app.state.profile_locks

def get_session(
    x_profile_id: str | None = Header(default=None),
    db: Session = Depends(get_db),
    notifier: BufferedNotifier = Depends(get_notifier),
    locks: ProfileLocks = Depends(get_profile_locks),
) -> FitnessSession:
    """
    The profile is picked by the client with an X-Profile-ID header.
    There is no authentication beyond that.
    """
    if not x_profile_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="X-Profile-ID header required")
    repo = ProfileRepository(db)
    profile = repo.get(x_profile_id)
    if not profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return FitnessSession(repo, profile, notifier=notifier, locks=locks)
