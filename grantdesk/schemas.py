"""
Pydantic schemas for the grant portal API.

Fields are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from grantdesk.types import (
    AmountType,
    ApplicationStatus,
    GrantCategory,
    GrantStatus,
)


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class UserResponse(ApiModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    country: Optional[str] = None
    phone: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CountryResponse(ApiModel):
    id: str
    name: str
    code: str
    currency: str
    flag: Optional[str] = None
    active: bool


class GrantResponse(ApiModel):
    id: str
    title: str
    description: str
    category: GrantCategory
    country_id: str
    min_amount: Optional[Decimal] = None
    max_amount: Optional[Decimal] = None
    amount: Optional[Decimal] = None
    currency: str
    amount_type: AmountType
    total_spots: int
    available_spots: int
    deadline: Optional[datetime] = None
    status: GrantStatus
    eligibility_criteria: Optional[str] = None
    application_instructions: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    country: Optional[CountryResponse] = None

    # Browser clients read the joined country as `countries`.
    @computed_field
    @property
    def countries(self) -> Optional[CountryResponse]:
        return self.country


class ApplicationResponse(ApiModel):
    id: str
    grant_id: str
    user_id: str
    full_name: str
    email: str
    phone: str
    address: str
    reason_for_applying: str
    referral_name: Optional[str] = None
    has_referral: bool
    auto_qualified: bool
    status: ApplicationStatus
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    selected_at: Optional[datetime] = None
    notes: Optional[str] = None


class ApplicationDetailResponse(ApplicationResponse):
    grant: Optional[GrantResponse] = None
    user: Optional[UserResponse] = None


class ApplicationCreateRequest(ApiModel):
    grant_id: str = Field(..., min_length=1)
    full_name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=320)
    phone: str = Field(..., min_length=1, max_length=64)
    address: str = Field(..., min_length=1, max_length=500)
    reason_for_applying: str = Field(..., min_length=1)
    referral_name: Optional[str] = Field(default=None, max_length=200)


class ApplicationSubmitResponse(ApiModel):
    application: ApplicationResponse
    qualified: bool
    message: str


class ContactMessageRequest(ApiModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=320)
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=5000)


class ContactMessageResponse(ApiModel):
    message: str
    id: str


class ReferralCheckRequest(ApiModel):
    referral_name: Optional[str] = None


class ReferralCheckResponse(ApiModel):
    exists: bool
    auto_qualified: bool


class GrantAwardResponse(ApiModel):
    id: str
    grant_id: str
    application_id: str
    user_id: str
    amount: Decimal
    currency: str
    awarded_at: Optional[datetime] = None
    disbursed_at: Optional[datetime] = None
    notes: Optional[str] = None


class StatsResponse(ApiModel):
    total_grants_distributed: float
    total_recipients: int
    total_countries: int
    success_rate: int
