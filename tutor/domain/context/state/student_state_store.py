from typing import Dict, Any, Optional
import asyncio
from datetime import datetime

from tutor.domain.models import StudentState, TutorMode


class StudentStateStore:
    """Keeps persisted per-student state (mode, help usage, location)"""

    def __init__(self):
        self.states: Dict[str, StudentState] = {}
        self._lock = asyncio.Lock()

    async def get_state(self, student_id: str) -> Optional[StudentState]:
        """Snapshot of a student's state, or None if never seen"""

        async with self._lock:
            state = self.states.get(student_id)
            return state.model_copy() if state else None

    async def get_mode(self, student_id: str) -> TutorMode:
        """Current mode; unknown students are assisted"""

        state = await self.get_state(student_id)
        return state.mode if state else TutorMode.ASSISTANT

    async def update_state(self, student_id: str, updates: Dict[str, Any]) -> StudentState:
        """Create or update a student's state"""

        async with self._lock:
            current = self.states.get(student_id) or StudentState(student_id=student_id)
            updated = current.model_copy(update={**updates, "updated_at": datetime.utcnow()})
            self.states[student_id] = updated
            return updated.model_copy()

    async def increment_help_clicks(self, student_id: str) -> StudentState:
        """Atomically count one help request"""

        async with self._lock:
            current = self.states.get(student_id) or StudentState(student_id=student_id)
            now = datetime.utcnow()
            updated = current.model_copy(update={
                "help_click_count": current.help_click_count + 1,
                "last_help_at": now,
                "updated_at": now
            })
            self.states[student_id] = updated
            return updated.model_copy()

    async def clear_state(self, student_id: str):
        """Forget a student"""

        async with self._lock:
            self.states.pop(student_id, None)
