"""Build status resolution for status feeds."""

from datetime import timezone
from typing import Dict, Optional

from ci_status.core.domain.entities import Build, FinishedBuildInfo, Project
from ci_status.core.domain.enums import (
    BuildActivity,
    BuildStatus,
    FinishedBuildSource,
    FINISHED_BUILD_STATUSES,
)
from ci_status.core.exceptions import MissingBuildException
from ci_status.infrastructure.database.repositories.interfaces import BuildRepositoryInterface
from .schemas import BuildStatusSummary

BUILD_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


class BuildStatusService:
    """
    Human-facing status of one project branch, based on one build.

    When the build is still new or running, the service falls back to the
    latest finished build on the same branch for everything that describes
    the "last build". The fallback is held by a parent service that never
    delegates further.

    Status queries that describe the current build (activity, finished
    flag, URL) need a build and raise MissingBuildException without one.
    to_dict() is safe in every state.
    """

    def __init__(
        self,
        branch: str,
        project: Project,
        build: Optional[Build] = None,
        *,
        base_url: str = "",
        is_parent: bool = False,
        parent: Optional["BuildStatusService"] = None,
    ) -> None:
        """
        Initialize status service.

        Use create() when the fallback build still has to be looked up.

        Args:
            branch: Branch being reported
            project: Project the branch belongs to
            build: Current build of the branch, None if it has never built
            base_url: Prefix for build links, used verbatim
            is_parent: True for a fallback service created by another one
            parent: Service wrapping the latest finished build on the branch

        Raises:
            ValueError: If the branch is empty or the parent link is not
                allowed for this build
        """
        if not branch:
            raise ValueError("Branch cannot be empty")
        if parent is not None:
            if is_parent:
                raise ValueError("A parent status service cannot have a parent")
            if build is None or build.is_finished:
                raise ValueError("Only an unfinished build can fall back to a parent")

        self._branch = branch
        self._project = project
        self._build = build
        self._url = base_url
        self._is_parent = is_parent
        self._parent = parent
        self._finished_build_info = self._resolve_finished_build_info()

    @classmethod
    async def create(
        cls,
        branch: str,
        project: Project,
        build: Optional[Build],
        build_repository: BuildRepositoryInterface,
        *,
        base_url: str = "",
        is_parent: bool = False,
    ) -> "BuildStatusService":
        """
        Create a status service, loading the fallback build when needed.

        An unfinished build is paired with the latest build on the same
        branch whose status is Success or Failed. Having none is fine: the
        service then reports no last build.

        Args:
            branch: Branch being reported
            project: Project the branch belongs to
            build: Current build of the branch, None if it has never built
            build_repository: Repository used to find the fallback build
            base_url: Prefix for build links
            is_parent: True to create a service that never falls back

        Returns:
            Configured status service
        """
        parent = None
        if build is not None and not is_parent and not build.is_finished:
            last_finished_build = await build_repository.get_latest_build(
                project.id, branch, FINISHED_BUILD_STATUSES
            )
            if last_finished_build is not None:
                parent = cls(
                    branch,
                    project,
                    last_finished_build,
                    base_url=base_url,
                    is_parent=True,
                )

        return cls(
            branch,
            project,
            build,
            base_url=base_url,
            is_parent=is_parent,
            parent=parent,
        )

    def _resolve_finished_build_info(self) -> Optional[FinishedBuildInfo]:
        if self._build is None:
            return None
        if self._build.is_finished:
            return FinishedBuildInfo(self._build, FinishedBuildSource.SELF)
        if self._parent is not None:
            return FinishedBuildInfo(self._parent.get_build(), FinishedBuildSource.DELEGATED)
        return None

    @property
    def branch(self) -> str:
        return self._branch

    @property
    def project(self) -> Project:
        return self._project

    @property
    def parent(self) -> Optional["BuildStatusService"]:
        """Service wrapping the fallback build, if one was found."""
        return self._parent

    @property
    def finished_build_info(self) -> Optional[FinishedBuildInfo]:
        """The finished build being reported, tagged with where it came from."""
        return self._finished_build_info

    def get_build(self) -> Optional[Build]:
        return self._build

    def _require_build(self, operation: str) -> Build:
        if self._build is None:
            raise MissingBuildException(self._project.title, self._branch, operation)
        return self._build

    def get_activity(self) -> BuildActivity:
        """
        Describe what the branch is doing, based on the current build only.

        Raises:
            MissingBuildException: If there is no build
        """
        status = self._require_build("get_activity").status
        if status in FINISHED_BUILD_STATUSES:
            return BuildActivity.SLEEPING
        elif status == BuildStatus.NEW:
            return BuildActivity.PENDING
        elif status == BuildStatus.RUNNING:
            return BuildActivity.BUILDING
        return BuildActivity.UNKNOWN

    def get_name(self) -> str:
        return f"{self._project.title} / {self._branch}"

    def is_finished(self) -> bool:
        """
        Check if the current build is finished.

        Raises:
            MissingBuildException: If there is no build
        """
        return self._require_build("is_finished").is_finished

    def get_finished_build_info(self) -> Optional[Build]:
        """Own build if finished, else the fallback build, else None."""
        if self._finished_build_info is None:
            return None
        return self._finished_build_info.build

    def get_last_build_label(self) -> str:
        build = self.get_finished_build_info()
        if build is None:
            return ""
        return str(build.id)

    def get_last_build_time(self) -> str:
        """
        Finish time of the last finished build, e.g. 2024-01-05T10:00:00+0000.

        Timestamps without timezone are taken as UTC. Returns an empty string
        when there is no finished build or it has no finish time.
        """
        build = self.get_finished_build_info()
        if build is None or build.finished_at is None:
            return ""

        finished_at = build.finished_at
        if finished_at.tzinfo is None:
            finished_at = finished_at.replace(tzinfo=timezone.utc)
        return finished_at.strftime(BUILD_TIME_FORMAT)

    @staticmethod
    def get_build_status(build: Build) -> str:
        """Map any build's status to its display label."""
        if build.status == BuildStatus.SUCCESS:
            return "Success"
        elif build.status == BuildStatus.FAILED:
            return "Failure"
        elif build.status == BuildStatus.SKIPPED:
            return "Skipped"
        return "Unknown"

    def get_last_build_status(self) -> str:
        build = self.get_finished_build_info()
        if build is None:
            return ""
        return self.get_build_status(build)

    def get_build_url(self) -> str:
        """
        Link to the current build.

        Raises:
            MissingBuildException: If there is no build
        """
        build = self._require_build("get_build_url")
        return f"{self._url}build/view/{build.id}"

    def get_summary(self) -> Optional[BuildStatusSummary]:
        """Status record for the branch, None if it has never built."""
        if self._build is None:
            return None

        return BuildStatusSummary(
            name=self.get_name(),
            activity=self.get_activity().value,
            last_build_label=self.get_last_build_label(),
            last_build_status=self.get_last_build_status(),
            last_build_time=self.get_last_build_time(),
            web_url=self.get_build_url(),
        )

    def to_dict(self) -> Dict[str, str]:
        """
        Status record keyed by its wire names.

        Returns:
            Mapping with name, activity, lastBuildLabel, lastBuildStatus,
            lastBuildTime and webUrl; empty if the branch has never built
        """
        summary = self.get_summary()
        if summary is None:
            return {}
        return summary.model_dump(by_alias=True)
