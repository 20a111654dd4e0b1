"""Status records for project branches."""

import logging
from typing import Dict, List

from ci_status.core.domain.entities import Project
from ci_status.core.exceptions import ProjectNotFoundException
from ci_status.infrastructure.database.repositories.interfaces import (
    BuildRepositoryInterface,
    ProjectRepositoryInterface,
)
from .build_status_service import BuildStatusService
from .interfaces import ProjectStatusServiceInterface

logger = logging.getLogger(__name__)


class ProjectStatusService(ProjectStatusServiceInterface):
    """
    Produces the status feed of a project, one record per branch.

    Each branch is reported on its latest build, whatever its status, with
    the latest finished build filling in the "last build" fields.
    """

    def __init__(
        self,
        project_repository: ProjectRepositoryInterface,
        build_repository: BuildRepositoryInterface,
        base_url: str = "",
    ):
        """
        Initialize service with dependencies.

        Args:
            project_repository: Repository for projects
            build_repository: Repository for builds
            base_url: Prefix for build links
        """
        self._project_repository = project_repository
        self._build_repository = build_repository
        self._base_url = base_url

    async def get_branch_status(self, project_id: int, branch: str) -> Dict[str, str]:
        project = await self._get_project(project_id)
        status_service = await self._get_status_service(project, branch)
        return status_service.to_dict()

    async def get_project_status(self, project_id: int) -> List[Dict[str, str]]:
        project = await self._get_project(project_id)

        branches = await self._build_repository.get_branches(project.id)
        if not branches:
            branches = [project.default_branch]

        records = []
        for branch in branches:
            status_service = await self._get_status_service(project, branch)
            record = status_service.to_dict()
            if record:
                records.append(record)

        logger.debug("Project %d reported %d of %d branches", project.id, len(records), len(branches))
        return records

    async def _get_project(self, project_id: int) -> Project:
        project = await self._project_repository.get_project(project_id)
        if not project:
            raise ProjectNotFoundException(project_id)
        return project

    async def _get_status_service(self, project: Project, branch: str) -> BuildStatusService:
        latest_build = await self._build_repository.get_latest_build(project.id, branch)
        return await BuildStatusService.create(
            branch,
            project,
            latest_build,
            self._build_repository,
            base_url=self._base_url,
        )
