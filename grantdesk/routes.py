"""
HTTP routes for the grant portal API.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from grantdesk.auth import get_current_claims, get_current_user, user_from_claims
from grantdesk.db import ApplicationRecord, ContactMessageRecord, DbClient, UserRecord
from grantdesk.dependencies import get_db_client, get_random_source
from grantdesk.qualification import RandomSource, normalize_referral, submit_application
from grantdesk.schemas import (
    ApplicationCreateRequest,
    ApplicationDetailResponse,
    ApplicationResponse,
    ApplicationSubmitResponse,
    ContactMessageRequest,
    ContactMessageResponse,
    CountryResponse,
    GrantAwardResponse,
    GrantResponse,
    ReferralCheckRequest,
    ReferralCheckResponse,
    StatsResponse,
    UserResponse,
)
from grantdesk.types import GrantCategory

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/auth/callback", response_model=UserResponse)
def auth_callback(
    claims: dict[str, Any] = Depends(get_current_claims),
    db: DbClient = Depends(get_db_client),
):
    """
    Called by the client after a successful provider login; refreshes the
    stored profile from the ID token claims.
    """
    user = db.upsert_user(user_from_claims(claims))
    return UserResponse.model_validate(user)


@router.get("/auth/user", response_model=UserResponse)
def current_user(user: UserRecord = Depends(get_current_user)):
    return UserResponse.model_validate(user)


@router.get("/countries", response_model=list[CountryResponse])
def list_countries(db: DbClient = Depends(get_db_client)):
    return [CountryResponse.model_validate(c) for c in db.get_active_countries()]


@router.get("/grants", response_model=list[GrantResponse])
def list_grants(
    country: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    db: DbClient = Depends(get_db_client),
):
    # A country filter takes precedence and the category is then not validated.
    if country:
        grants = db.get_grants_by_country(country)
    elif category:
        try:
            grant_category = GrantCategory(category)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid grant category")
        grants = db.get_grants_by_category(grant_category)
    else:
        grants = db.get_all_grants()
    return [GrantResponse.model_validate(g) for g in grants]


@router.get("/grants/{grant_id}", response_model=GrantResponse)
def get_grant(grant_id: str, db: DbClient = Depends(get_db_client)):
    grant = db.get_grant_by_id(grant_id)
    if not grant:
        raise HTTPException(status_code=404, detail="Grant not found")
    return GrantResponse.model_validate(grant)


@router.get("/stats", response_model=StatsResponse)
def get_stats(db: DbClient = Depends(get_db_client)):
    return StatsResponse.model_validate(db.get_grant_stats())


@router.post("/contact", response_model=ContactMessageResponse, status_code=201)
def submit_contact_message(
    payload: ContactMessageRequest, db: DbClient = Depends(get_db_client)
):
    record = db.create_contact_message(
        ContactMessageRecord(
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=payload.email,
            subject=payload.subject,
            message=payload.message,
        )
    )
    return ContactMessageResponse(message="Message sent successfully", id=record.id)


@router.post("/check-referral", response_model=ReferralCheckResponse)
def check_referral(
    payload: ReferralCheckRequest, db: DbClient = Depends(get_db_client)
):
    referral = normalize_referral(payload.referral_name)
    if not referral:
        raise HTTPException(status_code=400, detail="Referral name is required")
    exists = db.check_referral_exists(referral)
    return ReferralCheckResponse(exists=exists, auto_qualified=exists)


@router.get("/applications", response_model=list[ApplicationDetailResponse])
def list_applications(
    user: UserRecord = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    return [
        ApplicationDetailResponse.model_validate(a)
        for a in db.get_applications_by_user(user.id)
    ]


@router.post(
    "/applications", response_model=ApplicationSubmitResponse, status_code=201
)
def create_application(
    payload: ApplicationCreateRequest,
    user: UserRecord = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
    rng: RandomSource = Depends(get_random_source),
):
    draft = ApplicationRecord(
        grant_id=payload.grant_id,
        user_id=user.id,
        full_name=payload.full_name,
        email=payload.email,
        phone=payload.phone,
        address=payload.address,
        reason_for_applying=payload.reason_for_applying,
        referral_name=payload.referral_name,
    )
    result = submit_application(db, draft, rng)
    return ApplicationSubmitResponse(
        application=ApplicationResponse.model_validate(result.application),
        qualified=result.qualified,
        message=result.message,
    )


@router.get("/applications/{application_id}", response_model=ApplicationDetailResponse)
def get_application(
    application_id: str,
    user: UserRecord = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    application = db.get_application_by_id(application_id)
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")
    if application.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return ApplicationDetailResponse.model_validate(application)


@router.get("/awards", response_model=list[GrantAwardResponse])
def list_awards(
    user: UserRecord = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    return [GrantAwardResponse.model_validate(a) for a in db.get_awards_by_user(user.id)]
