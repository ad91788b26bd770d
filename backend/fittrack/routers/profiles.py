from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from fittrack.core.notify import BufferedNotifier
from fittrack.core.state import RestDefaults
from fittrack.db import get_db
from fittrack.deps.profile import get_notifier, get_session
from fittrack.repositories.profile_repo import ProfileRepository
from fittrack.schemas.profile import ProfileCreate, ProfileRead
from fittrack.schemas.session import SessionView
from fittrack.services.session import FitnessSession, new_profile_data
from fittrack.settings import get_settings

router = APIRouter(prefix="/profiles", tags=["profiles"])

@router.post("", response_model=ProfileRead, status_code=status.HTTP_201_CREATED)
def create_profile(payload: ProfileCreate, db: Session = Depends(get_db)):
    s = get_settings()
    defaults = RestDefaults(
        compound_sec=s.REST_COMPOUND_SEC,
        accessory_sec=s.REST_ACCESSORY_SEC,
        auto_adjust=s.REST_AUTO_ADJUST,
    )
    data = new_profile_data(payload.name, defaults)
    return ProfileRepository(db).create(name=payload.name, data=data.dump())

@router.get("", response_model=list[ProfileRead])
def list_profiles(
    db: Session = Depends(get_db),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    return ProfileRepository(db).list(limit=limit, offset=offset).items

@router.get("/current/state", response_model=SessionView)
def current_state(
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
):
    return SessionView.of(session, notifier)

@router.get("/{profile_id}", response_model=ProfileRead)
def get_profile(profile_id: str, db: Session = Depends(get_db)):
    profile = ProfileRepository(db).get(profile_id)
    if not profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile
