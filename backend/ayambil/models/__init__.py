"""ORM models package export."""

from ayambil.models.admin_user import AdminRole, AdminUser
from ayambil.models.calendar_date import CalendarDate
from ayambil.models.submission import Submission, SubmissionStatus
from ayambil.models.system_setting import SYSTEM_SETTINGS_ID, SystemSettings

__all__ = [
    "AdminRole",
    "AdminUser",
    "CalendarDate",
    "SYSTEM_SETTINGS_ID",
    "Submission",
    "SubmissionStatus",
    "SystemSettings",
]
