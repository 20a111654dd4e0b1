"""Hydration of raw build references into Build entities."""

from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional, Union

from ci_status.core.domain.entities import Build
from ci_status.core.domain.enums import BuildStatus
from ci_status.core.exceptions import BuildNotFoundException
from ci_status.core.services.builds.models import BuildModel
from ci_status.infrastructure.database.repositories.interfaces import BuildRepositoryInterface

BuildReference = Union[Build, int, BuildModel, Mapping[str, Any]]


class BuildFactory:
    """
    Turns the different shapes a build can arrive in into Build entities.

    Accepted references are Build entities (returned unchanged), database
    rows, mappings of build fields and bare build ids. Ids need a repository
    to be loaded.
    """

    def __init__(self, build_repository: Optional[BuildRepositoryInterface] = None) -> None:
        """
        Initialize factory.

        Args:
            build_repository: Repository used to load builds referenced by id
        """
        self._build_repository = build_repository

    async def get_build(self, reference: BuildReference) -> Build:
        """
        Resolve a reference to a full Build entity.

        Args:
            reference: Build, build id, BuildModel row or mapping of fields

        Returns:
            Hydrated build entity

        Raises:
            BuildNotFoundException: If an id does not match any stored build
            TypeError: If the reference has an unsupported type
        """
        if isinstance(reference, Build):
            return reference
        if isinstance(reference, BuildModel):
            return self.from_model(reference)
        if isinstance(reference, Mapping):
            return self.from_dict(reference)
        if _is_build_id(reference):
            if self._build_repository is None:
                raise TypeError("Build ids can only be resolved with a build repository")
            build = await self._build_repository.get_build(reference)
            if build is None:
                raise BuildNotFoundException(reference)
            return build

        raise TypeError(f"Unsupported build reference: {type(reference).__name__}")

    async def get_builds(self, references: Iterable[BuildReference]) -> List[Build]:
        """
        Resolve a batch of references, loading all ids with one query.

        Args:
            references: Builds, build ids, BuildModel rows or mappings

        Returns:
            Hydrated builds in the order of the references

        Raises:
            BuildNotFoundException: If an id does not match any stored build
            TypeError: If a reference has an unsupported type
        """
        references = list(references)
        build_ids = [reference for reference in references if _is_build_id(reference)]

        loaded = {}
        if build_ids:
            if self._build_repository is None:
                raise TypeError("Build ids can only be resolved with a build repository")
            loaded = await self._build_repository.get_builds(build_ids)
            missing = [build_id for build_id in build_ids if build_id not in loaded]
            if missing:
                raise BuildNotFoundException(missing[0])

        return [
            loaded[reference] if _is_build_id(reference) else await self.get_build(reference)
            for reference in references
        ]

    @staticmethod
    def from_model(model: BuildModel) -> Build:
        """Convert database model to domain entity."""
        return Build(
            id=model.id,
            project_id=model.project_id,
            branch=model.branch,
            status=BuildStatus(model.status),
            commit_id=model.commit_id,
            created_at=model.created_at,
            started_at=model.started_at,
            finished_at=model.finished_at,
        )

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> Build:
        """
        Build an entity from a raw record such as a decoded JSON payload.

        Timestamps may be datetimes or ISO-8601 strings.
        """
        return Build(
            id=int(data["id"]),
            project_id=int(data["project_id"]),
            branch=data["branch"],
            status=BuildStatus(data.get("status", BuildStatus.NEW.value)),
            commit_id=data.get("commit_id"),
            created_at=_parse_datetime(data.get("created_at")),
            started_at=_parse_datetime(data.get("started_at")),
            finished_at=_parse_datetime(data.get("finished_at")),
        )


def _is_build_id(reference: Any) -> bool:
    return isinstance(reference, int) and not isinstance(reference, bool)


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)
