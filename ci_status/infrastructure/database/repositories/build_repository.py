"""SQLAlchemy implementation of build repository."""

from typing import Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ci_status.core.domain.entities import Build
from ci_status.core.domain.enums import BuildStatus
from ci_status.core.exceptions import BuildNotFoundException
from ci_status.core.services.build_factory import BuildFactory
from ci_status.core.services.builds.models import BuildModel
from .interfaces import BuildRepositoryInterface


class SqlBuildRepository(BuildRepositoryInterface):
    """
    SQLAlchemy-based implementation of build repository.

    Each save runs in its own savepoint, so a failing save rolls back only
    that build and leaves the session usable. With commit_on_save each saved
    build is also committed on its own.
    """

    def __init__(self, session: AsyncSession, commit_on_save: bool = False) -> None:
        """
        Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session
            commit_on_save: Commit after every successful save_build
        """
        self.session = session
        self.commit_on_save = commit_on_save

    async def get_build(self, build_id: int) -> Optional[Build]:
        model = await self._get_model(build_id)

        if not model:
            return None

        return BuildFactory.from_model(model)

    async def get_builds(self, build_ids: List[int]) -> Dict[int, Build]:
        if not build_ids:
            return {}

        stmt = select(BuildModel).where(BuildModel.id.in_(build_ids))
        result = await self.session.execute(stmt)
        models = result.scalars().all()

        return {
            model.id: BuildFactory.from_model(model)
            for model in models
        }

    async def get_latest_build(
        self,
        project_id: int,
        branch: str,
        statuses: Optional[Iterable[BuildStatus]] = None,
    ) -> Optional[Build]:
        stmt = select(BuildModel).where(
            BuildModel.project_id == project_id,
            BuildModel.branch == branch,
        )
        if statuses is not None:
            stmt = stmt.where(BuildModel.status.in_([status.value for status in statuses]))
        stmt = stmt.order_by(BuildModel.id.desc()).limit(1)

        result = await self.session.execute(stmt)
        model = result.scalars().first()

        if not model:
            return None

        return BuildFactory.from_model(model)

    async def get_branches(self, project_id: int) -> List[str]:
        stmt = (
            select(BuildModel.branch)
            .where(BuildModel.project_id == project_id)
            .distinct()
            .order_by(BuildModel.branch)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create_build(
        self,
        project_id: int,
        branch: str,
        status: BuildStatus = BuildStatus.NEW,
        **fields,
    ) -> Build:
        model = BuildModel(
            project_id=project_id,
            branch=branch,
            status=status.value,
            commit_id=fields.get("commit_id"),
            started_at=fields.get("started_at"),
            finished_at=fields.get("finished_at"),
        )
        if fields.get("created_at") is not None:
            model.created_at = fields["created_at"]

        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        return BuildFactory.from_model(model)

    async def save_build(self, build: Build) -> Build:
        async with self.session.begin_nested():
            model = await self._get_model(build.id)
            if not model:
                raise BuildNotFoundException(build.id)

            self._update_model_from_entity(model, build)
            self.session.add(model)
            await self.session.flush()

        if self.commit_on_save:
            await self.session.commit()
        return BuildFactory.from_model(model)

    async def _get_model(self, build_id: int) -> Optional[BuildModel]:
        stmt = select(BuildModel).where(BuildModel.id == build_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    def _update_model_from_entity(self, model: BuildModel, entity: Build) -> None:
        """Update database model from domain entity."""
        model.project_id = entity.project_id
        model.branch = entity.branch
        model.status = entity.status.value
        model.commit_id = entity.commit_id
        model.started_at = entity.started_at
        model.finished_at = entity.finished_at
