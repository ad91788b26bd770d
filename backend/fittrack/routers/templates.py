from fastapi import APIRouter, Depends, Query, status
from fittrack.core.notify import BufferedNotifier
from fittrack.core.state import Template
from fittrack.deps.profile import get_notifier, get_session
from fittrack.schemas.session import SessionView
from fittrack.schemas.template import DraftAdd, DraftBegin, DraftItemEdit, DraftRename
from fittrack.schemas.workout import Move
from fittrack.services.session import FitnessSession

router = APIRouter(prefix="/templates", tags=["templates"])

@router.get("", response_model=list[Template])
def list_templates(session: FitnessSession = Depends(get_session)):
    return session.data.templates

# Draft builder
@router.post("/draft", response_model=SessionView, status_code=status.HTTP_201_CREATED)
def begin_draft(
    payload: DraftBegin,
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
):
    session.begin_draft(payload.template_id)
    return SessionView.of(session, notifier)

@router.patch("/draft", response_model=SessionView)
def rename_draft(
    payload: DraftRename,
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
):
    session.rename_draft(name=payload.name, notes=payload.notes)
    return SessionView.of(session, notifier)

@router.delete("/draft", response_model=SessionView)
def discard_draft(
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
):
    session.discard_draft()
    return SessionView.of(session, notifier)

@router.post("/draft/items", response_model=SessionView)
def add_draft_item(
    payload: DraftAdd,
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
):
    session.draft_add(payload.exercise_id)
    return SessionView.of(session, notifier)

@router.patch("/draft/items/{index}", response_model=SessionView)
def edit_draft_item(
    index: int,
    payload: DraftItemEdit,
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
):
    session.draft_edit(
        index,
        sets=payload.sets,
        type_=payload.type,
        rest_mode=payload.rest_mode,
        rest_sec=payload.rest_sec,
    )
    return SessionView.of(session, notifier)

@router.post("/draft/items/{index}/move", response_model=SessionView)
def move_draft_item(
    index: int,
    payload: Move,
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
):
    session.draft_move(index, payload.direction)
    return SessionView.of(session, notifier)

@router.delete("/draft/items/{index}", response_model=SessionView)
def remove_draft_item(
    index: int,
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
):
    session.draft_remove(index)
    return SessionView.of(session, notifier)

@router.post("/draft/save", response_model=SessionView, status_code=status.HTTP_201_CREATED)
def save_draft(
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
):
    session.save_draft()
    return SessionView.of(session, notifier)

# Saved templates
@router.post("/{template_id}/duplicate", response_model=SessionView, status_code=status.HTTP_201_CREATED)
def duplicate_template(
    template_id: str,
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
):
    session.duplicate_template(template_id)
    return SessionView.of(session, notifier)

@router.delete("/{template_id}", response_model=SessionView)
def delete_template(
    template_id: str,
    confirm: bool = Query(False),
    session: FitnessSession = Depends(get_session),
    notifier: BufferedNotifier = Depends(get_notifier),
):
    session.delete_template(template_id, confirm=confirm)
    return SessionView.of(session, notifier)
