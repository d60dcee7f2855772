from opsdesk.models.availability import WeeklyAvailability
from opsdesk.models.cost import Cost
from opsdesk.models.leave import LeaveRequest
from opsdesk.models.task import Task
from opsdesk.models.time_entry import TimeEntry
from opsdesk.models.user import User

__all__ = [
    "Cost",
    "LeaveRequest",
    "Task",
    "TimeEntry",
    "User",
    "WeeklyAvailability",
]
