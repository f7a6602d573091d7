"""
Lambda handlers package for AWS Lambda functions.
"""
from .calendar import handler as calendar_handler
from .cycles import handler as cycles_handler, symptoms_handler
from .notes import handler as notes_handler, history_handler, track_period_handler
from .notifications import handler as notifications_handler
from .prediction import handler as prediction_handler
from .profile import handler as profile_handler, last_period_handler
from .report import handler as report_handler
from .statistics import handler as statistics_handler

__all__ = [
    "calendar_handler",
    "cycles_handler",
    "history_handler",
    "last_period_handler",
    "notes_handler",
    "notifications_handler",
    "prediction_handler",
    "profile_handler",
    "report_handler",
    "statistics_handler",
    "symptoms_handler",
    "track_period_handler",
]
