"""Status resolution and build skipping against a SQLite database."""

import pytest
from sqlalchemy import text

from ci_status.core.domain.enums import BuildStatus, FINISHED_BUILD_STATUSES
from ci_status.core.services.build_status_service import BuildStatusService
from ci_status.core.services.intermediate_build_service import IntermediateBuildService
from ci_status.core.services.project_status_service import ProjectStatusService


class TestSqlBuildQueries:

    @pytest.mark.asyncio
    async def test_ids_follow_creation_order(self, seeded):
        assert [build.id for build in seeded["builds"]] == [1, 2, 3, 4, 5]

    @pytest.mark.asyncio
    async def test_latest_finished_build(self, seeded):
        build = await seeded["build_repository"].get_latest_build(
            seeded["project"].id, "master", FINISHED_BUILD_STATUSES
        )

        assert build.id == 2
        assert build.status == BuildStatus.SUCCESS

    @pytest.mark.asyncio
    async def test_latest_build_any_status(self, seeded):
        build = await seeded["build_repository"].get_latest_build(seeded["project"].id, "master")

        assert build.id == 4

    @pytest.mark.asyncio
    async def test_branches(self, seeded):
        assert await seeded["build_repository"].get_branches(seeded["project"].id) == ["feature", "master"]


class TestStatusResolution:

    @pytest.mark.asyncio
    async def test_running_build_reports_last_finished_build(self, seeded):
        current = seeded["builds"][3]

        service = await BuildStatusService.create(
            "master",
            seeded["project"],
            current,
            seeded["build_repository"],
            base_url="https://ci.example.com/",
        )

        # Build 3 is still running, so the newest Success/Failed build is 2.
        assert service.get_finished_build_info().id == 2
        assert service.to_dict() == {
            "name": "PHPCI / master",
            "activity": "Building",
            "lastBuildLabel": "2",
            "lastBuildStatus": "Success",
            "lastBuildTime": "2024-01-05T10:00:00+0000",
            "webUrl": "https://ci.example.com/build/view/4",
        }

    @pytest.mark.asyncio
    async def test_project_status(self, seeded):
        service = ProjectStatusService(
            seeded["project_repository"], seeded["build_repository"], base_url="http://ci/"
        )

        records = await service.get_project_status(seeded["project"].id)

        assert [record["name"] for record in records] == ["PHPCI / feature", "PHPCI / master"]
        assert records[0]["activity"] == "Pending"
        assert records[0]["lastBuildLabel"] == ""
        assert records[0]["webUrl"] == "http://ci/build/view/5"


class TestSkipIntermediateBuilds:

    @pytest.mark.asyncio
    async def test_skip_persists_status(self, seeded, db_session):
        build_repository = seeded["build_repository"]
        service = IntermediateBuildService(build_repository)

        result = await service.skip_intermediate_builds([3, 4, 5])
        await db_session.commit()

        assert {branch: build.id for branch, build in result.survivors.items()} == {"master": 4, "feature": 5}
        assert (await build_repository.get_build(3)).status == BuildStatus.SKIPPED
        assert (await build_repository.get_build(4)).status == BuildStatus.RUNNING
        assert (await build_repository.get_build(5)).status == BuildStatus.NEW

    @pytest.mark.asyncio
    async def test_skipped_build_is_not_a_fallback(self, seeded, db_session):
        build_repository = seeded["build_repository"]
        await IntermediateBuildService(build_repository).skip_intermediate_builds([2, 4])
        await db_session.commit()

        latest_finished = await build_repository.get_latest_build(
            seeded["project"].id, "master", FINISHED_BUILD_STATUSES
        )

        assert latest_finished.id == 1

    @pytest.mark.asyncio
    async def test_failed_save_keeps_session_usable(self, seeded, db_session):
        """Test that a rejected update does not break saves that follow it."""
        await db_session.execute(text(
            "CREATE TRIGGER lock_build_1 BEFORE UPDATE ON builds WHEN OLD.id = 1 "
            "BEGIN SELECT RAISE(ABORT, 'build 1 is locked'); END"
        ))
        await db_session.commit()
        build_repository = seeded["build_repository"]

        result = await IntermediateBuildService(build_repository).skip_intermediate_builds([1, 2, 4])
        await db_session.commit()

        assert [failure.build.id for failure in result.failures] == [1]
        assert [build.id for build in result.skipped] == [2]
        assert result.survivors["master"].id == 4
        assert (await build_repository.get_build(1)).status == BuildStatus.FAILED
        assert (await build_repository.get_build(2)).status == BuildStatus.SKIPPED
        assert (await build_repository.get_build(4)).status == BuildStatus.RUNNING
