"""
Enumerations shared by the storage layer and the HTTP schemas.
"""

from __future__ import annotations

from enum import Enum


class GrantCategory(str, Enum):
    EDUCATION = "education"
    BUSINESS = "business"
    HEALTHCARE = "healthcare"
    HOUSING = "housing"
    EMERGENCY = "emergency"
    SENIORS = "seniors"
    RESEARCH = "research"
    INNOVATION = "innovation"
    HOMEBUYER = "homebuyer"
    FINANCIAL_RELIEF = "financial_relief"


class GrantStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"
    DRAFT = "draft"


class AmountType(str, Enum):
    FIXED = "fixed"
    RANGE = "range"
    FLEXIBLE = "flexible"


class ApplicationStatus(str, Enum):
    """
    Lifecycle of an application. Submission only ever produces QUALIFIED or
    NOT_QUALIFIED; the remaining states are set administratively.
    """

    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    QUALIFIED = "qualified"
    NOT_QUALIFIED = "not_qualified"
    SELECTED = "selected"
    AWARDED = "awarded"
    REJECTED = "rejected"


class ContactStatus(str, Enum):
    NEW = "new"
    RESPONDED = "responded"
