"""
Admin registrations for core app.

Each model admin lives in its own module to avoid a single gigantic file.
"""

from .study_event import StudyEventAdmin  # noqa: F401
from .sessions import ControlSessionAdmin, InterventionSessionAdmin  # noqa: F401
