from timetable.models.academic_year import AcademicYear  # noqa: F401
from timetable.models.course import Course, Weekday  # noqa: F401
from timetable.models.room import Room  # noqa: F401
from timetable.models.teacher import Teacher  # noqa: F401
from timetable.models.user import User, UserRole  # noqa: F401
