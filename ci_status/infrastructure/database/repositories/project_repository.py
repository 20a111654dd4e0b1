"""SQLAlchemy implementation of project repository."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ci_status.core.domain.entities import Project
from ci_status.core.services.projects.models import ProjectModel
from .interfaces import ProjectRepositoryInterface


class SqlProjectRepository(ProjectRepositoryInterface):
    """SQLAlchemy-based implementation of project repository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_project(self, project_id: int) -> Optional[Project]:
        stmt = select(ProjectModel).where(ProjectModel.id == project_id)
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return None

        return self._model_to_entity(model)

    async def get_all_projects(self) -> List[Project]:
        stmt = select(ProjectModel).order_by(ProjectModel.id)
        result = await self.session.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def create_project(self, title: str, default_branch: str = "master") -> Project:
        model = ProjectModel(title=title, default_branch=default_branch)
        self.session.add(model)
        await self.session.flush()
        return self._model_to_entity(model)

    def _model_to_entity(self, model: ProjectModel) -> Project:
        """Convert database model to domain entity."""
        return Project(
            id=model.id,
            title=model.title,
            default_branch=model.default_branch or "master",
        )
