from tutor.domain.context.state.student_state_store import StudentStateStore
from tutor.domain.models import TutorMode


class ReportingService:
    """Renders a markdown progress summary for a student"""

    def __init__(self, student_states: StudentStateStore):
        self.student_states = student_states

    async def generate_student_report(self, student_id: str) -> str:
        state = await self.student_states.get_state(student_id)

        mode = state.mode.value if state else TutorMode.ASSISTANT.value
        quest = (state.current_quest if state else None) or "None"
        help_requests = state.help_click_count if state else 0

        lines = [
            f"# Student Progress Report: {student_id}",
            f"**Mode**: {mode}",
            "",
            "## Recent Activity",
            f"- **Current Quest**: {quest}",
            f"- **Help Requests**: {help_requests}",
        ]
        return "\n".join(lines)
