"""Domain enums for build status reporting."""

from enum import Enum


class BuildStatus(str, Enum):
    """Build execution status enumeration."""

    NEW = "new"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


# Statuses a build cannot leave without being rebuilt. SKIPPED is excluded on
# purpose: a skipped build never serves as "last known" status.
FINISHED_BUILD_STATUSES = frozenset({BuildStatus.SUCCESS, BuildStatus.FAILED})


class BuildActivity(str, Enum):
    """What a branch is currently doing, as shown on status feeds."""

    SLEEPING = "Sleeping"
    PENDING = "Pending"
    BUILDING = "Building"
    UNKNOWN = "Unknown"


class FinishedBuildSource(str, Enum):
    """Where the finished build reported by a status service came from."""

    SELF = "self"
    DELEGATED = "delegated"
