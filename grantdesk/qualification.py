"""
Application submission and the qualification decision.

A submission is auto-qualified when its referral names a previous award
recipient; otherwise a single uniform draw decides, passing 70% of the time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Protocol

from grantdesk.db import ApplicationRecord, DbClient
from grantdesk.errors import DuplicateApplicationError, NotFoundError
from grantdesk.types import ApplicationStatus

logger = logging.getLogger(__name__)

# Draws strictly above this value qualify.
QUALIFICATION_THRESHOLD = 0.3

REFERRAL_QUALIFIED_MESSAGE = (
    "Application submitted! You are automatically qualified due to your referral."
)
QUALIFIED_MESSAGE = "Application submitted! You have been qualified for selection."
NOT_QUALIFIED_MESSAGE = (
    "Application submitted. Unfortunately, you do not meet the current "
    "qualification criteria."
)


class RandomSource(Protocol):
    """Anything with a ``random()`` returning a float in [0, 1)."""

    def random(self) -> float:
        ...


@dataclass
class SubmissionResult:
    application: ApplicationRecord
    qualified: bool
    message: str


def normalize_referral(referral_name: str | None) -> str | None:
    if referral_name is None:
        return None
    referral_name = referral_name.strip()
    return referral_name or None


def submit_application(
    db: DbClient, application: ApplicationRecord, rng: RandomSource
) -> SubmissionResult:
    """
    Decide qualification for a new application and persist it.

    Raises DuplicateApplicationError when the user already applied to the
    grant (either from the pre-check or from the storage constraint), and
    NotFoundError when the grant does not exist.
    """
    if db.check_user_has_applied_to_grant(application.user_id, application.grant_id):
        raise DuplicateApplicationError(application.user_id, application.grant_id)
    if db.get_grant_by_id(application.grant_id) is None:
        raise NotFoundError("Grant not found")

    has_referral = False
    auto_qualified = False
    referral = normalize_referral(application.referral_name)
    if referral:
        has_referral = db.check_referral_exists(referral)
        auto_qualified = has_referral

    if not auto_qualified:
        auto_qualified = rng.random() > QUALIFICATION_THRESHOLD

    status = (
        ApplicationStatus.QUALIFIED if auto_qualified else ApplicationStatus.NOT_QUALIFIED
    )
    stored = db.create_application(
        replace(
            application,
            has_referral=has_referral,
            auto_qualified=auto_qualified,
            status=status,
        )
    )
    logger.info(
        "Application %s for grant %s: status=%s referral=%s",
        stored.id,
        stored.grant_id,
        stored.status.value,
        has_referral,
    )

    if not auto_qualified:
        message = NOT_QUALIFIED_MESSAGE
    elif has_referral:
        message = REFERRAL_QUALIFIED_MESSAGE
    else:
        message = QUALIFIED_MESSAGE
    return SubmissionResult(application=stored, qualified=auto_qualified, message=message)
