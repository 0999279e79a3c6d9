from .study_event import StudyEvent
from .sessions import ControlSession, InterventionSession
from .exercise import PatientExercise
from . import choices

__all__ = [
    "StudyEvent",
    "InterventionSession",
    "ControlSession",
    "PatientExercise",
    "choices",
]
