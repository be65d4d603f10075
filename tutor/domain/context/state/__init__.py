# Student state is everything the service knows about a learner *right now*:
# which mode the tutor should use, how often help was requested and where in
# the app the student currently is.
#
# Tutoring runs only read it, once at the start of a request. Telemetry
# events are the only writers.

from .student_state_store import StudentStateStore

__all__ = ["StudentStateStore"]
