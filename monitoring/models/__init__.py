from .adverse_event import AdverseEvent
from .issue_log import IssueLog
from .reminder import EventRef, FollowUpRef, Reminder, ReminderRef, SimRechargeRef

__all__ = [
    "AdverseEvent",
    "IssueLog",
    "Reminder",
    "ReminderRef",
    "EventRef",
    "SimRechargeRef",
    "FollowUpRef",
]
