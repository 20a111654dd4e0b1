"""Domain entities for build status reporting."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, List, Optional

from .enums import BuildStatus, FinishedBuildSource, FINISHED_BUILD_STATUSES


@dataclass(frozen=True)
class Project:
    """
    Project entity owning a set of builds.

    Attributes:
        id: Unique project identifier
        title: Display title used in status names
        default_branch: Branch reported when the project has no builds yet
    """

    id: int
    title: str
    default_branch: str = "master"

    def __post_init__(self) -> None:
        """Validate project data after initialization."""
        if self.id <= 0:
            raise ValueError("Project id must be positive")
        if not self.title:
            raise ValueError("Project title cannot be empty")


@dataclass(frozen=True)
class Build:
    """
    Build entity representing one run of a project on one branch.

    Ids grow with creation order and are used as the recency signal.

    Attributes:
        id: Unique build identifier
        project_id: Owning project
        branch: Branch the build ran on
        status: Current build status
        commit_id: Commit the build was triggered for
        created_at: Build creation timestamp
        started_at: When execution started
        finished_at: When execution finished, absent while running
    """

    id: int
    project_id: int
    branch: str
    status: BuildStatus = BuildStatus.NEW
    commit_id: Optional[str] = None
    created_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        """Validate build data after initialization."""
        if self.id <= 0:
            raise ValueError("Build id must be positive")
        if not self.branch:
            raise ValueError("Build branch cannot be empty")

    @property
    def is_finished(self) -> bool:
        """Check if build reached a terminal status."""
        return self.status in FINISHED_BUILD_STATUSES

    def with_status(self, status: BuildStatus) -> "Build":
        """Return a copy of this build carrying a different status."""
        return replace(self, status=status)


@dataclass(frozen=True)
class FinishedBuildInfo:
    """
    The finished build a status service reports on.

    Attributes:
        build: The finished build
        source: SELF when it is the service's own build, DELEGATED when it
            was taken from the latest finished build on the same branch
    """

    build: Build
    source: FinishedBuildSource

    @property
    def is_delegated(self) -> bool:
        return self.source is FinishedBuildSource.DELEGATED


@dataclass(frozen=True)
class SkipFailure:
    """A build that could not be marked as skipped, with the store error."""

    build: Build
    error: Exception


@dataclass
class SkipResult:
    """
    Outcome of collapsing a batch of builds to one survivor per branch.

    Attributes:
        survivors: Newest build per branch
        skipped: Builds marked as skipped
        failures: Builds whose skipped status could not be saved
    """

    survivors: Dict[str, Build] = field(default_factory=dict)
    skipped: List[Build] = field(default_factory=list)
    failures: List[SkipFailure] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return len(self.failures) > 0
