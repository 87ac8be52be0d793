from chronoplan.models.classroom import Classroom, RoomType  # noqa: F401
from chronoplan.models.faculty import Faculty, FacultyLeave, LeaveStatus  # noqa: F401
from chronoplan.models.notification import (  # noqa: F401
    Notification,
    NotificationAudience,
    NotificationPriority,
    NotificationType,
)
from chronoplan.models.subject import ProgramLevel, Subject, subject_faculty  # noqa: F401
from chronoplan.models.timeslot import Timeslot  # noqa: F401
from chronoplan.models.timetable import Timetable, TimetableEntry, TimetableStatus  # noqa: F401
