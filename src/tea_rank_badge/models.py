"""Response schemas for the tea registry API."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ProjectSummary(BaseModel):
    """A single hit from ``projects/search``."""

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    project_id: str = Field(alias="projectId", strict=True)
    name: str = Field(validation_alias=AliasChoices("name", "projectName"), strict=True)
    rank: float | None = Field(
        default=None, validation_alias=AliasChoices("teaRank", "rank"), strict=True
    )


class SearchResponse(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    projects: list[ProjectSummary]
    total_count: int | None = Field(default=None, alias="totalCount")


class ProjectRecord(BaseModel):
    """Full project record from ``projects/info``.

    Only the identifiers and the rank are required. The registry spells
    them ``projectId``, ``projectName``/``name`` and ``teaRank``; unknown
    fields are kept on the model untouched.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    project_id: str = Field(alias="projectId", strict=True)
    name: str = Field(validation_alias=AliasChoices("name", "projectName"), strict=True)
    rank: float = Field(validation_alias=AliasChoices("teaRank", "rank"), strict=True)

    rank_calculated_at: str | None = Field(default=None, alias="teaRankCalculatedAt")
    status: str | None = None
    homepage: str | None = None
    source: str | None = None
    package_managers: list[str] | None = Field(default=None, alias="packageManagers")
    number_of_signers: int | None = Field(default=None, alias="numberOfSigners")
    dependents_count: int | None = Field(default=None, alias="dependentsCount")
    dependencies_count: int | None = Field(default=None, alias="dependenciesCount")
