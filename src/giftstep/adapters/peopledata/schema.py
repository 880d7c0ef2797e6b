"""Pydantic models describing People Data Labs person enrichment payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class PeopleDataBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class PersonData(PeopleDataBaseModel):
    """The subset of a person record we map onto recipients.

    Location and job values are kept untyped; the provider occasionally sends
    booleans or numbers in place of strings.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    job_company_name: object = None
    job_title: object = None
    location_locality: object = None
    location_region: object = None
    location_country: object = None


class PersonEnrichResponse(PeopleDataBaseModel):
    status: int
    likelihood: int | None = None
    data: PersonData = Field(default_factory=PersonData)


class ErrorDetail(PeopleDataBaseModel):
    type: str | None = None
    message: str | None = None


class ErrorResponse(PeopleDataBaseModel):
    status: int | None = None
    error: ErrorDetail | None = None
