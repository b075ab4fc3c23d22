from enum import Enum


class WorkCenterType(str, Enum):
    PRINTING = "printing"
    EMBROIDERY = "embroidery"
    HEAT_PRESS = "heat_press"
    CUTTING = "cutting"
    SEWING = "sewing"
    PACKAGING = "packaging"
    QUALITY_CONTROL = "quality_control"
    SHIPPING = "shipping"
    OTHER = "other"


class ActivityType(str, Enum):
    SETUP = "setup"
    PRODUCTION = "production"
    QUALITY_CHECK = "quality_check"
    PACKAGING = "packaging"
    CLEANUP = "cleanup"
    MAINTENANCE = "maintenance"


class JobStatus(str, Enum):
    CREATED = "created"
    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    COMPLETED = "completed"
    SHIPPED = "shipped"
    CANCELLED = "cancelled"


class JobRouteStatus(str, Enum):
    PENDING = "pending"
    READY = "ready"
    SETUP = "setup"
    IN_PROGRESS = "in_progress"
    PAUSED = "paused"
    COMPLETED = "completed"
    SKIPPED = "skipped"


# routes in these states block deleting their work center / activity
ACTIVE_ROUTE_STATUSES = [
    JobRouteStatus.PENDING.value,
    JobRouteStatus.READY.value,
    JobRouteStatus.SETUP.value,
    JobRouteStatus.IN_PROGRESS.value,
    JobRouteStatus.PAUSED.value,
]

FINISHED_ROUTE_STATUSES = [
    JobRouteStatus.COMPLETED.value,
    JobRouteStatus.SKIPPED.value,
]


class BOMStatus(str, Enum):
    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    ACTIVE = "active"
    OBSOLETE = "obsolete"


class BOMAction(str, Enum):
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"
    ACTIVATED = "activated"


class IssueType(str, Enum):
    MATERIAL_SHORTAGE = "material_shortage"
    MATERIAL_DEFECT = "material_defect"
    EQUIPMENT_FAILURE = "equipment_failure"
    QUALITY_ISSUE = "quality_issue"
    PROCESS_ISSUE = "process_issue"
    SAFETY = "safety"
    OTHER = "other"


class IssueSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class IssueStatus(str, Enum):
    OPEN = "open"
    INVESTIGATING = "investigating"
    RESOLVED = "resolved"
    CLOSED = "closed"


class CapacityTimeframe(str, Enum):
    WEEK = "week"
    TWO_WEEKS = "2weeks"
    MONTH = "month"


HOURS_PER_DAY = 8
DEFAULT_ROUTE_HOURS = 2
