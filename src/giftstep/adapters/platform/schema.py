"""Pydantic models describing the campaign platform API payloads."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime  # noqa: TC003
from typing import cast

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

DELETED_STATUS = "deleted"


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _none_to_empty(value: object) -> object:
    return "" if value is None else value


def _none_to_list(value: object) -> object:
    return [] if value is None else value


class PlatformBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ListMetricsPayload(PlatformBaseModel):
    total_contacts: int | None = Field(default=None, alias="totalContacts")
    total_recipients: int | None = Field(default=None, alias="totalRecipients")


class ContactListPayload(PlatformBaseModel):
    id: str = Field(default="", validation_alias=AliasChoices("_id", "id"))
    name: str | None = None
    description: str | None = None
    recipient_count: int | None = Field(default=None, alias="recipientCount")
    metrics: ListMetricsPayload | None = None
    contacts: list[object] | None = None
    recipients: list[object] | None = None
    tags: list[str] = Field(default_factory=list[str])
    created_at: datetime | None = Field(default=None, alias="createdAt")
    status: str | None = None
    is_deleted: bool = Field(default=False, alias="isDeleted")

    _normalize_name = field_validator("name", "status", mode="before")(_blank_to_none)
    _normalize_tags = field_validator("tags", mode="before")(_none_to_list)

    @property
    def is_deleted_list(self) -> bool:
        return self.is_deleted or self.status == DELETED_STATUS

    def resolved_recipient_count(self) -> int:
        if self.recipient_count is not None:
            return self.recipient_count
        if self.metrics is not None:
            if self.metrics.total_contacts:
                return self.metrics.total_contacts
            if self.metrics.total_recipients:
                return self.metrics.total_recipients
        if self.contacts:
            return len(self.contacts)
        if self.recipients:
            return len(self.recipients)
        return 0


def extract_list_payloads(payload: object) -> list[object]:
    """Accept the lists array under ``lists``, ``data.lists`` or ``data``."""

    if not isinstance(payload, Mapping):
        raise TypeError("Invalid response format: expected an object")
    mapping = cast(Mapping[str, object], payload)
    candidate = mapping.get("lists")
    if candidate is None:
        data = mapping.get("data")
        if isinstance(data, Mapping):
            candidate = cast(Mapping[str, object], data).get("lists")
        else:
            candidate = data
    if candidate is None:
        return []
    if not isinstance(candidate, list):
        raise TypeError("Invalid response format: lists is not an array")
    return cast(list[object], candidate)


class AddressPayload(PlatformBaseModel):
    line1: str = ""
    line2: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    country: str = ""
    is_verified: bool = Field(default=False, alias="isVerified")
    confidence_score: float | None = Field(default=None, alias="confidenceScore")

    _normalize_strings = field_validator(
        "line1", "line2", "city", "state", "zip", "country", mode="before"
    )(_none_to_empty)


class ContactPayload(PlatformBaseModel):
    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    mail_id: str = Field(default="", alias="mailId")
    company_name: str = Field(default="", alias="companyName")
    job_title: str = Field(default="", alias="jobTitle")
    linkedin_url: str | None = Field(default=None, alias="linkedinUrl")
    address: AddressPayload | None = None

    _normalize_strings = field_validator(
        "first_name", "last_name", "mail_id", "company_name", "job_title", mode="before"
    )(_none_to_empty)
    _normalize_url = field_validator("linkedin_url", mode="before")(_blank_to_none)


class ContactDetailsResponse(PlatformBaseModel):
    contacts: list[ContactPayload] = Field(default_factory=list[ContactPayload])


class CampaignPayload(PlatformBaseModel):
    id: str | None = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    motion: str | None = None
    total_recipients: int = 0
    budget: dict[str, object] | None = None
    boost_registration: dict[str, object] | None = Field(
        default=None, alias="boostRegistration"
    )
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    @field_validator("total_recipients", mode="before")
    @classmethod
    def _parse_total(cls, value: object) -> object:
        return 0 if value is None else value


class CampaignResponse(PlatformBaseModel):
    campaign: CampaignPayload


class CommittedRecipientPayload(PlatformBaseModel):
    contact_id: str | None = Field(default=None, alias="contactId")
    record_id: str | None = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    email: str | None = Field(default=None, validation_alias=AliasChoices("mailId", "email"))

    _normalize_names = field_validator("first_name", "last_name", mode="before")(_none_to_empty)
    _normalize_ids = field_validator("contact_id", "record_id", "email", mode="before")(
        _blank_to_none
    )


class CommittedRecipientsResponse(PlatformBaseModel):
    success: bool = True
    data: list[CommittedRecipientPayload] = Field(
        default_factory=list[CommittedRecipientPayload]
    )

    @field_validator("data", mode="before")
    @classmethod
    def _null_data(cls, value: object) -> object:
        return [] if value is None else value


class ErrorPayload(PlatformBaseModel):
    message: str | None = None
    error: str | None = None

    @property
    def detail(self) -> str | None:
        return self.message or self.error
