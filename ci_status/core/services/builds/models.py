"""Build database models."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from ci_status.infrastructure.database.connection import Base


class BuildModel(Base):
    """
    Database model for builds.

    Build ids are autoincremented, so a higher id always means a newer build
    on the same branch.
    """

    __tablename__ = "builds"
    __table_args__ = (
        Index("ix_builds_project_id_branch", "project_id", "branch"),
    )

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        doc="Unique build identifier"
    )

    project_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        doc="Owning project"
    )

    branch: Mapped[str] = mapped_column(
        String(250),
        nullable=False,
        default="master",
        doc="Branch the build ran on"
    )

    status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="new",
        doc="Current build status"
    )

    commit_id: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
        doc="Commit the build was triggered for"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        doc="Build creation timestamp"
    )

    started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        doc="Build start timestamp"
    )

    finished_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        doc="Build finish timestamp"
    )

    def __repr__(self) -> str:
        """String representation of build model."""
        return f"<BuildModel(id={self.id}, branch='{self.branch}', status='{self.status}')>"
