"""Domain exceptions for build status reporting."""

from typing import List, Optional


class DomainException(Exception):
    """Base exception for domain-related errors."""

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details


class BuildNotFoundException(DomainException):
    """Raised when a build is not found."""

    def __init__(self, build_id: int) -> None:
        """
        Initialize build not found exception.

        Args:
            build_id: Id of the missing build
        """
        message = f"Build {build_id} not found"
        super().__init__(message, f"Build id: {build_id}")
        self.build_id = build_id


class ProjectNotFoundException(DomainException):
    """Raised when a project is not found."""

    def __init__(self, project_id: int) -> None:
        """
        Initialize project not found exception.

        Args:
            project_id: Id of the missing project
        """
        message = f"Project {project_id} not found"
        super().__init__(message, f"Project id: {project_id}")
        self.project_id = project_id


class MissingBuildException(DomainException):
    """Raised when a build-dependent status query runs without a build."""

    def __init__(self, project_title: str, branch: str, operation: str) -> None:
        """
        Initialize missing build exception.

        Args:
            project_title: Title of the project being queried
            branch: Branch being queried
            operation: Name of the query that needs a build
        """
        message = f"'{operation}' requires a build, but '{project_title} / {branch}' has none"
        super().__init__(message, f"Branch: {branch}, Operation: {operation}")
        self.branch = branch
        self.operation = operation


class DuplicateBuildException(DomainException):
    """Raised when a build batch contains the same build id twice."""

    def __init__(self, build_ids: List[int]) -> None:
        """
        Initialize duplicate build exception.

        Args:
            build_ids: Ids occurring more than once
        """
        ids_str = ", ".join(str(build_id) for build_id in build_ids)
        message = f"Duplicate build ids in batch: {ids_str}"
        super().__init__(message, f"Build ids: {build_ids}")
        self.build_ids = build_ids


class ConfigurationException(DomainException):
    """Raised when seed configuration is invalid."""

    def __init__(self, config_type: str, details: str) -> None:
        """
        Initialize configuration exception.

        Args:
            config_type: Type of configuration (projects, builds)
            details: Specific configuration error details
        """
        message = f"Invalid {config_type} configuration: {details}"
        super().__init__(message, details)
        self.config_type = config_type
