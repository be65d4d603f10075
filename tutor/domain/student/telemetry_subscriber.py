from typing import Dict, Any, Optional
from enum import Enum
from pydantic import BaseModel, Field
import structlog

from tutor.domain.context.state.student_state_store import StudentStateStore
from tutor.domain.models import StudentState, TutorMode

logger = structlog.get_logger(__name__)


class TelemetryEventType(str, Enum):
    """Telemetry events the tutor reacts to"""
    HELP_CLICK = "HELP_CLICK"
    PAGE_VIEW = "PAGE_VIEW"


class TelemetryEvent(BaseModel):
    """Inbound telemetry event"""
    event_type: str = Field(description="Event name, e.g. HELP_CLICK")
    creator_id: str = Field(description="Student the event belongs to")
    payload: Dict[str, Any] = Field(default_factory=dict)


class TelemetrySubscriber:
    """Derives student state from telemetry events

    Repeated help requests are treated as help abuse: once a student
    reaches ``help_click_threshold`` clicks the tutor switches to TEACHER
    mode for their next runs.
    """

    def __init__(self, student_states: StudentStateStore, help_click_threshold: int = 5):
        self.student_states = student_states
        self.help_click_threshold = help_click_threshold

    async def handle_event(self, event: TelemetryEvent) -> Optional[StudentState]:
        """Apply one event; unknown event types are ignored"""

        if event.event_type == TelemetryEventType.HELP_CLICK.value:
            return await self._track_help_usage(event.creator_id)

        if event.event_type == TelemetryEventType.PAGE_VIEW.value:
            path = event.payload.get("path")
            if not path:
                logger.warning("Page view without path", student_id=event.creator_id)
                return None
            return await self.student_states.update_state(event.creator_id, {"current_quest": path})

        logger.debug("Ignoring telemetry event", event_type=event.event_type)
        return None

    async def _track_help_usage(self, student_id: str) -> StudentState:
        state = await self.student_states.increment_help_clicks(student_id)

        if state.help_click_count >= self.help_click_threshold and state.mode != TutorMode.TEACHER:
            state = await self.student_states.update_state(student_id, {"mode": TutorMode.TEACHER})
            logger.info(
                "Switched to TEACHER mode due to help abuse",
                student_id=student_id,
                help_click_count=state.help_click_count
            )

        return state
