"""Collapsing queued builds to the newest build per branch."""

import logging
from collections import Counter
from typing import Dict, Iterable, List, Optional

from ci_status.core.domain.entities import Build, SkipFailure, SkipResult
from ci_status.core.domain.enums import BuildStatus
from ci_status.core.exceptions import DuplicateBuildException
from ci_status.infrastructure.database.repositories.interfaces import BuildRepositoryInterface
from .build_factory import BuildFactory, BuildReference
from .interfaces import IntermediateBuildServiceInterface

logger = logging.getLogger(__name__)


class IntermediateBuildService(IntermediateBuildServiceInterface):
    """
    Keeps only the newest build of each branch in a batch.

    Older builds on the same branch are marked as skipped and saved one by
    one. A build that fails to save is reported in the result and does not
    stop the others.
    """

    def __init__(
        self,
        build_repository: BuildRepositoryInterface,
        build_factory: Optional[BuildFactory] = None,
    ):
        """
        Initialize service with dependencies.

        Args:
            build_repository: Repository used to load and save builds
            build_factory: Factory resolving build references
        """
        self._build_repository = build_repository
        self._build_factory = build_factory or BuildFactory(build_repository)

    async def skip_intermediate_builds(self, builds: Iterable[BuildReference]) -> SkipResult:
        """
        Mark every build but the newest per branch as skipped.

        Args:
            builds: Build references in any order

        Returns:
            Surviving build per branch, skipped builds and save failures

        Raises:
            BuildNotFoundException: If a referenced id does not exist
            DuplicateBuildException: If the batch holds the same id twice
        """
        hydrated = await self._build_factory.get_builds(builds)
        builds_per_branch = self._group_by_branch(hydrated)

        result = SkipResult()
        for branch, branch_builds in builds_per_branch.items():
            survivor = max(branch_builds, key=lambda build: build.id)
            result.survivors[branch] = survivor

            for build in branch_builds:
                if build.id == survivor.id:
                    continue
                await self._skip_build(build, survivor, result)

        logger.info(
            "Collapsed %d builds to %d survivors (%d skipped, %d failed)",
            len(hydrated),
            len(result.survivors),
            len(result.skipped),
            len(result.failures),
        )
        return result

    async def _skip_build(self, build: Build, survivor: Build, result: SkipResult) -> None:
        if build.status == BuildStatus.SKIPPED:
            result.skipped.append(build)
            return

        skipped_build = build.with_status(BuildStatus.SKIPPED)
        try:
            await self._build_repository.save_build(skipped_build)
        except Exception as e:
            logger.exception(
                "Failed to mark build %d on branch '%s' as skipped: %s",
                build.id, build.branch, e,
            )
            result.failures.append(SkipFailure(build=build, error=e))
            return

        logger.info(
            "Build %d on branch '%s' skipped in favour of build %d",
            build.id, build.branch, survivor.id,
        )
        result.skipped.append(skipped_build)

    @staticmethod
    def _group_by_branch(builds: List[Build]) -> Dict[str, List[Build]]:
        duplicates = sorted(
            build_id for build_id, count in Counter(build.id for build in builds).items()
            if count > 1
        )
        if duplicates:
            raise DuplicateBuildException(duplicates)

        builds_per_branch: Dict[str, List[Build]] = {}
        for build in builds:
            builds_per_branch.setdefault(build.branch, []).append(build)
        return builds_per_branch
