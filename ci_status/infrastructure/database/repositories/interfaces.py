"""Repository interface definitions."""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from ci_status.core.domain.entities import Build, Project
from ci_status.core.domain.enums import BuildStatus


class ProjectRepositoryInterface(ABC):
    """
    Abstract interface for project data access operations.

    Defines the contract for project persistence, allowing different
    storage backends behind the status services.
    """

    @abstractmethod
    async def get_project(self, project_id: int) -> Optional[Project]:
        """
        Retrieve a single project by id.

        Args:
            project_id: Unique project identifier

        Returns:
            Project entity if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_all_projects(self) -> List[Project]:
        """
        Retrieve all projects ordered by id.

        Returns:
            List of Project entities
        """
        pass

    @abstractmethod
    async def create_project(self, title: str, default_branch: str = "master") -> Project:
        """
        Create a new project.

        Args:
            title: Project display title
            default_branch: Branch reported when the project has no builds

        Returns:
            Created project with its assigned id
        """
        pass


class BuildRepositoryInterface(ABC):
    """
    Abstract interface for build data access operations.

    Defines the contract for build persistence, supporting different
    storage backends while keeping status resolution backend-agnostic.
    """

    @abstractmethod
    async def get_build(self, build_id: int) -> Optional[Build]:
        """
        Retrieve a single build by id.

        Args:
            build_id: Unique build identifier

        Returns:
            Build entity if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_builds(self, build_ids: List[int]) -> Dict[int, Build]:
        """
        Retrieve multiple builds by id.

        Args:
            build_ids: List of build ids to retrieve

        Returns:
            Dictionary mapping build ids to Build entities
        """
        pass

    @abstractmethod
    async def get_latest_build(
        self,
        project_id: int,
        branch: str,
        statuses: Optional[Iterable[BuildStatus]] = None,
    ) -> Optional[Build]:
        """
        Retrieve the newest build of a project branch.

        Args:
            project_id: Project to search
            branch: Branch to search
            statuses: Restrict the search to these statuses; any status if None

        Returns:
            Build with the highest id matching the filters, None if no match
        """
        pass

    @abstractmethod
    async def get_branches(self, project_id: int) -> List[str]:
        """
        List distinct branches having at least one build.

        Args:
            project_id: Project to search

        Returns:
            Sorted list of branch names
        """
        pass

    @abstractmethod
    async def create_build(
        self,
        project_id: int,
        branch: str,
        status: BuildStatus = BuildStatus.NEW,
        **fields,
    ) -> Build:
        """
        Create a new build and assign it the next id.

        Args:
            project_id: Owning project
            branch: Branch the build runs on
            status: Initial status
            **fields: Optional commit_id, started_at, finished_at

        Returns:
            Created build entity
        """
        pass

    @abstractmethod
    async def save_build(self, build: Build) -> Build:
        """
        Save an existing build.

        Args:
            build: Build entity to save

        Returns:
            Saved build entity

        Raises:
            BuildNotFoundException: If no build with that id exists
        """
        pass
