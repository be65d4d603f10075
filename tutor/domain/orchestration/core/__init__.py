from .tutor_agent import TutorAgent, DEFAULT_MAX_ITERATIONS, latest_human_text

__all__ = ["TutorAgent", "DEFAULT_MAX_ITERATIONS", "latest_human_text"]
