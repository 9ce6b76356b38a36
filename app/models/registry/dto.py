from typing import List

from pydantic import BaseModel, ConfigDict, Field


class CridPatient(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    birth_date: str = Field(alias="birthDate")
    gender: str = Field(alias="gender")


class CridRequest(BaseModel):
    ccn: str
    patient: CridPatient


class CridMatch(BaseModel):
    model_config = ConfigDict(extra="allow")

    crid: int | str
    match_type: str | None = Field(alias="matchType", default=None)
    matched_criteria: List[str] | None = Field(alias="matchedCriteria", default=None)


class CridResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    perfect_match: List[CridMatch] = Field(alias="perfectMatch")


class SearchResource(BaseModel):
    model_config = ConfigDict(extra="allow")

    resource_type: str | None = Field(alias="resourceType", default=None)
    id: str | None = Field(alias="id", default=None)


class SearchEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    resource: SearchResource | None = Field(alias="resource", default=None)


class SearchResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    total: int | None = Field(alias="total", default=None)
    entry: List[SearchEntry] = Field(alias="entry", default=[])

    @property
    def count(self) -> int:
        if self.total is not None:
            return self.total
        return len(self.entry)
