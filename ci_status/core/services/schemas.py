"""Status summary schemas."""

from pydantic import BaseModel, ConfigDict, Field


class BuildStatusSummary(BaseModel):
    """
    Status record for one project branch.

    Serialized by alias: the camelCase names are read by CCTray-style
    status monitors and must not change.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(
        ...,
        description="Project title and branch",
        examples=["PHPCI / master"]
    )

    activity: str = Field(
        ...,
        description="Sleeping, Pending, Building or Unknown",
        examples=["Sleeping"]
    )

    last_build_label: str = Field(
        ...,
        alias="lastBuildLabel",
        description="Id of the last finished build, empty if none",
        examples=["42"]
    )

    last_build_status: str = Field(
        ...,
        alias="lastBuildStatus",
        description="Success, Failure, Skipped or Unknown; empty if none",
        examples=["Success"]
    )

    last_build_time: str = Field(
        ...,
        alias="lastBuildTime",
        description="Finish time of the last finished build",
        examples=["2024-01-05T10:00:00+0000"]
    )

    web_url: str = Field(
        ...,
        alias="webUrl",
        description="Link to the current build",
        examples=["https://ci.example.com/build/view/43"]
    )
