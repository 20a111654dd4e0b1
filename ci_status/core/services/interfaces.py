"""Service interfaces."""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List

from ci_status.core.domain.entities import SkipResult


class IntermediateBuildServiceInterface(ABC):
    """Interface for collapsing build batches to one build per branch."""

    @abstractmethod
    async def skip_intermediate_builds(self, builds: Iterable) -> SkipResult:
        """
        Keep the newest build of each branch and mark the others as skipped.

        Args:
            builds: Build references (entities, ids, rows or field mappings)

        Returns:
            Survivors per branch together with skipped builds and failures
        """
        pass


class ProjectStatusServiceInterface(ABC):
    """Interface for producing status records of project branches."""

    @abstractmethod
    async def get_branch_status(self, project_id: int, branch: str) -> Dict[str, str]:
        """
        Get the status record of one branch.

        Args:
            project_id: Project to report on
            branch: Branch to report on

        Returns:
            Status record, empty if the branch has never built

        Raises:
            ProjectNotFoundException: If the project does not exist
        """
        pass

    @abstractmethod
    async def get_project_status(self, project_id: int) -> List[Dict[str, str]]:
        """
        Get status records for every branch of a project.

        Args:
            project_id: Project to report on

        Returns:
            One status record per branch that has built

        Raises:
            ProjectNotFoundException: If the project does not exist
        """
        pass
