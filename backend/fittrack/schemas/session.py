from pydantic import BaseModel
from fittrack.core.notify import BufferedNotifier
from fittrack.core.rest_timer import RestTimer
from fittrack.core.state import ProfileData
from fittrack.services.session import FitnessSession

class SessionView(BaseModel):
    """Fully resolved profile state after an operation, plus its toasts."""
    profile_id: str
    state: ProfileData
    rest_remaining_ms: int | None = None
    messages: list[str] = []

    @classmethod
    def of(cls, session: FitnessSession, notifier: BufferedNotifier | None = None) -> "SessionView":
        active = session.data.active_workout
        remaining = RestTimer(active.rest).remaining_ms(session.now()) if active else None
        return cls(
            profile_id=session.profile_id,
            state=session.data,
            rest_remaining_ms=remaining,
            messages=list(notifier.messages) if notifier else [],
        )
