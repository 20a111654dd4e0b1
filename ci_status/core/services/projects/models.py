"""Project database models."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from ci_status.infrastructure.database.connection import Base


class ProjectModel(Base):
    """Database model for projects."""

    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        doc="Unique project identifier"
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Project display title"
    )

    default_branch: Mapped[str] = mapped_column(
        String(250),
        nullable=False,
        default="master",
        doc="Branch reported when the project has no builds"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        doc="Project creation timestamp"
    )

    def __repr__(self) -> str:
        """String representation of project model."""
        return f"<ProjectModel(id={self.id}, title='{self.title}')>"
