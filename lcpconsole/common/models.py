"""
Pydantic models for resources, license status documents and console requests.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from lcpconsole.common.crypto import USERKEY_ALGO

BUY = "BUY"
LOAN = "LOAN"
PURCHASE_TYPES = (BUY, LOAN)

# License status document states
STATUS_READY = "ready"
STATUS_ACTIVE = "active"
STATUS_REVOKED = "revoked"
RENEWABLE_STATUSES = (STATUS_READY, STATUS_ACTIVE)
# purchase status set when an operator edits the end of a loan
PURCHASE_TO_BE_RENEWED = "to-be-renewed"

DEFAULT_PROFILE = "http://readium.org/lcp/basic-profile"


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class ApiModel(BaseModel):
    """Base model accepting both field names and API aliases."""

    model_config = ConfigDict(populate_by_name=True)


class User(ApiModel):
    id: int | None = None
    uuid: str | None = None
    name: str = ""
    email: str = ""
    password: str | None = None
    # never sent to the API; only used to derive password
    clear_password: str | None = Field(
        default=None, alias="clearPassword", exclude=True
    )
    hint: str | None = None


class Publication(ApiModel):
    id: int | None = None
    uuid: str | None = None
    title: str = ""
    master_filename: str | None = Field(default=None, alias="masterFilename")
    status: str | None = None


class Purchase(ApiModel):
    id: int | None = None
    uuid: str | None = None
    user: User
    publication: Publication
    type: str = LOAN
    transaction_date: UtcDatetime | None = Field(default=None, alias="transactionDate")
    start_date: UtcDatetime | None = Field(default=None, alias="startDate")
    end_date: UtcDatetime | None = Field(default=None, alias="endDate")
    license_uuid: str | None = Field(default=None, alias="licenseUuid")
    status: str | None = None
    max_end_date: UtcDatetime | None = Field(default=None, alias="maxEndDate")
    partial_license: str | None = Field(default=None, alias="partialLicense")

    @field_validator("type")
    @classmethod
    def check_type(cls, value: str) -> str:
        value = value.upper()
        if value not in PURCHASE_TYPES:
            msg = f"purchase type must be one of {', '.join(PURCHASE_TYPES)}"
            raise ValueError(msg)
        return value

    @model_validator(mode="after")
    def check_window(self) -> Purchase:
        if self.start_date and self.end_date and self.start_date > self.end_date:
            msg = "start date must not be after end date"
            raise ValueError(msg)
        return self

    @property
    def is_loan(self) -> bool:
        return self.type == LOAN

    @property
    def has_license(self) -> bool:
        return bool(self.license_uuid)


# License status document


class Updated(BaseModel):
    license: UtcDatetime | None = None
    status: UtcDatetime | None = None


class Link(BaseModel):
    rel: str
    href: str
    type: str | None = None
    title: str | None = None
    profile: str | None = None
    templated: bool | None = None


class PotentialRights(BaseModel):
    end: UtcDatetime | None = None


class Event(BaseModel):
    name: str = ""
    timestamp: UtcDatetime | None = None
    type: str
    id: str = ""


class LicenseStatus(BaseModel):
    id: str
    status: str
    updated: Updated | None = None
    message: str = ""
    links: list[Link] = Field(default_factory=list)
    device_count: int | None = None
    potential_rights: PotentialRights | None = None
    events: list[Event] = Field(default_factory=list)


class RegisteredDevice(BaseModel):
    id: str
    name: str = ""
    timestamp: UtcDatetime | None = None


class RegisteredDevices(BaseModel):
    id: str
    devices: list[RegisteredDevice] = Field(default_factory=list)


# Partial license


class UserInfo(BaseModel):
    id: str
    email: str = ""
    name: str = ""
    encrypted: list[str] = Field(default_factory=list)


class UserKey(BaseModel):
    algorithm: str = USERKEY_ALGO
    text_hint: str
    value: str = Field(min_length=1)
    key_check: str | None = None


class Encryption(BaseModel):
    profile: str = DEFAULT_PROFILE
    user_key: UserKey


class UserRights(ApiModel):
    print: int | None = None
    copies: int | None = Field(default=None, alias="copy")
    start: UtcDatetime | None = None
    end: UtcDatetime | None = None

    @model_validator(mode="after")
    def check_window(self) -> UserRights:
        if self.start and self.end and self.start > self.end:
            msg = "rights start must not be after rights end"
            raise ValueError(msg)
        return self


class PartialLicense(BaseModel):
    provider: str = Field(min_length=1)
    user: UserInfo
    encryption: Encryption
    rights: UserRights | None = None


# Listings and dashboard


class LicenseSummary(ApiModel):
    id: str
    publication_title: str = Field(default="", alias="publicationTitle")
    user_name: str = Field(default="", alias="userName")
    type: str = ""
    devices: int = 0
    status: str = ""
    purchase_id: int | None = Field(default=None, alias="purchaseId")
    message: str = ""


class DashboardInfo(ApiModel):
    publication_count: int = Field(default=0, alias="publicationCount")
    user_count: int = Field(default=0, alias="userCount")
    buy_count: int = Field(default=0, alias="buyCount")
    loan_count: int = Field(default=0, alias="loanCount")
    average_duration: int = Field(default=0, alias="averageDuration")


class BestSeller(BaseModel):
    title: str
    count: int


class MasterFile(BaseModel):
    name: str


# Console requests


class PurchaseRequest(BaseModel):
    user_id: int
    publication_id: int
    type: str = LOAN
    start_date: UtcDatetime | None = None
    end_date: UtcDatetime | None = None


class PurchaseUpdateRequest(BaseModel):
    end_date: UtcDatetime | None = None
    # clear the end date and let the license status server apply its default
    no_end_date: bool = False
    status: str = PURCHASE_TO_BE_RENEWED


class RenewRequest(BaseModel):
    end_date: UtcDatetime | None = None
    device_id: str | None = None
    device_name: str | None = None


class DeviceRequest(BaseModel):
    device_id: str | None = None
    device_name: str | None = None


class RevokeRequest(BaseModel):
    license_id: str = Field(min_length=1)


class ConsoleConfig(BaseModel):
    api_url: str | None = None
    lsd_url: str | None = None
    lsd_user: str | None = None
    lsd_password: str | None = None
    provider: str | None = None
    right_print: int | None = None
    right_copy: int | None = None
    page_size: int | None = None
    log_level: int | None = None
    console_host: str | None = None
    console_port: int | None = None

    def overrides(self) -> dict[str, Any]:
        """Return only the values that were explicitly set."""
        return self.model_dump(exclude_none=True)
