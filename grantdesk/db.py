"""
Database abstraction for Postgres and an in-memory test implementation.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional, Protocol

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    create_engine,
    func,
    select,
)
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from grantdesk.errors import DuplicateApplicationError, NotFoundError
from grantdesk.types import (
    AmountType,
    ApplicationStatus,
    ContactStatus,
    GrantCategory,
    GrantStatus,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


class DbClient(Protocol):
    """Interface for database access."""

    def get_user(self, user_id: str) -> Optional["UserRecord"]:
        ...

    def upsert_user(self, user: "UserRecord") -> "UserRecord":
        ...

    def get_all_countries(self) -> list["CountryRecord"]:
        ...

    def get_active_countries(self) -> list["CountryRecord"]:
        ...

    def create_country(self, country: "CountryRecord") -> "CountryRecord":
        ...

    def get_all_grants(self) -> list["GrantRecord"]:
        ...

    def get_grant_by_id(self, grant_id: str) -> Optional["GrantRecord"]:
        ...

    def get_grants_by_country(self, country_id: str) -> list["GrantRecord"]:
        ...

    def get_grants_by_category(
        self, category: GrantCategory
    ) -> list["GrantRecord"]:
        ...

    def create_grant(self, grant: "GrantRecord") -> "GrantRecord":
        ...

    def update_grant(self, grant_id: str, **updates) -> "GrantRecord":
        ...

    def get_applications_by_user(
        self, user_id: str
    ) -> list["ApplicationRecord"]:
        ...

    def get_applications_by_grant(
        self, grant_id: str
    ) -> list["ApplicationRecord"]:
        ...

    def get_application_by_id(
        self, application_id: str
    ) -> Optional["ApplicationRecord"]:
        ...

    def create_application(
        self, application: "ApplicationRecord"
    ) -> "ApplicationRecord":
        ...

    def update_application(
        self, application_id: str, **updates
    ) -> "ApplicationRecord":
        ...

    def check_user_has_applied_to_grant(self, user_id: str, grant_id: str) -> bool:
        ...

    def check_referral_exists(self, referral_name: str) -> bool:
        ...

    def create_contact_message(
        self, message: "ContactMessageRecord"
    ) -> "ContactMessageRecord":
        ...

    def get_all_contact_messages(self) -> list["ContactMessageRecord"]:
        ...

    def create_grant_award(self, award: "GrantAwardRecord") -> "GrantAwardRecord":
        ...

    def get_awards_by_user(self, user_id: str) -> list["GrantAwardRecord"]:
        ...

    def get_grant_stats(self) -> "GrantStats":
        ...


@dataclass
class UserRecord:
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    country: Optional[str] = None
    phone: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}"


@dataclass
class CountryRecord:
    id: str
    name: str
    code: str
    currency: str
    flag: Optional[str] = None
    active: bool = True


@dataclass
class GrantRecord:
    title: str
    description: str
    category: GrantCategory
    country_id: str
    currency: str
    total_spots: int
    available_spots: int
    id: str = field(default_factory=_new_id)
    min_amount: Optional[Decimal] = None
    max_amount: Optional[Decimal] = None
    amount: Optional[Decimal] = None
    amount_type: AmountType = AmountType.FLEXIBLE
    deadline: Optional[datetime] = None
    status: GrantStatus = GrantStatus.ACTIVE
    eligibility_criteria: Optional[str] = None
    application_instructions: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    # Populated on reads that join the country table.
    country: Optional[CountryRecord] = None


@dataclass
class ApplicationRecord:
    grant_id: str
    user_id: str
    full_name: str
    email: str
    phone: str
    address: str
    reason_for_applying: str
    id: str = field(default_factory=_new_id)
    referral_name: Optional[str] = None
    has_referral: bool = False
    auto_qualified: bool = False
    status: ApplicationStatus = ApplicationStatus.PENDING
    submitted_at: datetime = field(default_factory=_utcnow)
    reviewed_at: Optional[datetime] = None
    selected_at: Optional[datetime] = None
    notes: Optional[str] = None
    # Populated by the detail reads.
    grant: Optional[GrantRecord] = None
    user: Optional[UserRecord] = None


@dataclass
class ContactMessageRecord:
    first_name: str
    last_name: str
    email: str
    subject: str
    message: str
    id: str = field(default_factory=_new_id)
    status: ContactStatus = ContactStatus.NEW
    created_at: datetime = field(default_factory=_utcnow)
    responded_at: Optional[datetime] = None


@dataclass
class GrantAwardRecord:
    grant_id: str
    application_id: str
    user_id: str
    amount: Decimal
    currency: str
    id: str = field(default_factory=_new_id)
    awarded_at: datetime = field(default_factory=_utcnow)
    disbursed_at: Optional[datetime] = None
    notes: Optional[str] = None


@dataclass
class GrantStats:
    total_grants_distributed: float
    total_recipients: int
    total_countries: int
    success_rate: int


_GRANT_UPDATABLE = {
    f.name for f in fields(GrantRecord) if f.name not in ("id", "created_at", "country")
}
_APPLICATION_UPDATABLE = {
    f.name
    for f in fields(ApplicationRecord)
    if f.name not in ("id", "grant_id", "user_id", "grant", "user")
}


def _check_updates(updates: dict, allowed: set[str]) -> None:
    unknown = set(updates) - allowed
    if unknown:
        raise ValueError(f"Unknown fields: {', '.join(sorted(unknown))}")


def compute_success_rate(selected: int, total: int) -> int:
    """Percentage of selected applications, rounded half up; 0 when empty."""
    if total <= 0:
        return 0
    return int(math.floor(selected / total * 100 + 0.5))


class InMemoryDbClient:
    """Simple in-memory database for development and tests."""

    def __init__(self):
        self.users: Dict[str, UserRecord] = {}
        self.countries: Dict[str, CountryRecord] = {}
        self.grants: Dict[str, GrantRecord] = {}
        self.applications: Dict[str, ApplicationRecord] = {}
        self.contact_messages: Dict[str, ContactMessageRecord] = {}
        self.awards: Dict[str, GrantAwardRecord] = {}

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.users.clear()
        self.countries.clear()
        self.grants.clear()
        self.applications.clear()
        self.contact_messages.clear()
        self.awards.clear()

    def get_user(self, user_id: str) -> Optional[UserRecord]:
        return self.users.get(user_id)

    def upsert_user(self, user: UserRecord) -> UserRecord:
        existing = self.users.get(user.id)
        if existing:
            user = replace(user, created_at=existing.created_at, updated_at=_utcnow())
        self.users[user.id] = user
        return user

    def get_all_countries(self) -> list[CountryRecord]:
        return sorted(self.countries.values(), key=lambda c: c.name)

    def get_active_countries(self) -> list[CountryRecord]:
        return [c for c in self.get_all_countries() if c.active]

    def create_country(self, country: CountryRecord) -> CountryRecord:
        country = replace(country)
        self.countries[country.id] = country
        return country

    def _with_country(self, grant: GrantRecord) -> GrantRecord:
        return replace(grant, country=self.countries.get(grant.country_id))

    def _grants_newest_first(self, grants) -> list[GrantRecord]:
        ordered = sorted(grants, key=lambda g: g.created_at, reverse=True)
        return [self._with_country(g) for g in ordered]

    def get_all_grants(self) -> list[GrantRecord]:
        return self._grants_newest_first(self.grants.values())

    def get_grant_by_id(self, grant_id: str) -> Optional[GrantRecord]:
        grant = self.grants.get(grant_id)
        return self._with_country(grant) if grant else None

    def get_grants_by_country(self, country_id: str) -> list[GrantRecord]:
        return self._grants_newest_first(
            g for g in self.grants.values() if g.country_id == country_id
        )

    def get_grants_by_category(self, category: GrantCategory) -> list[GrantRecord]:
        return self._grants_newest_first(
            g for g in self.grants.values() if g.category == category
        )

    def create_grant(self, grant: GrantRecord) -> GrantRecord:
        grant = replace(grant, country=None)
        self.grants[grant.id] = grant
        return grant

    def update_grant(self, grant_id: str, **updates) -> GrantRecord:
        _check_updates(updates, _GRANT_UPDATABLE)
        grant = self.grants.get(grant_id)
        if not grant:
            raise NotFoundError("Grant not found")
        updates.setdefault("updated_at", _utcnow())
        grant = replace(grant, **updates)
        self.grants[grant_id] = grant
        return grant

    def _with_details(self, application: ApplicationRecord) -> ApplicationRecord:
        grant = self.grants.get(application.grant_id)
        return replace(
            application,
            grant=self._with_country(grant) if grant else None,
            user=self.users.get(application.user_id),
        )

    def get_applications_by_user(self, user_id: str) -> list[ApplicationRecord]:
        matches = [a for a in self.applications.values() if a.user_id == user_id]
        matches.sort(key=lambda a: a.submitted_at, reverse=True)
        return [self._with_details(a) for a in matches]

    def get_applications_by_grant(self, grant_id: str) -> list[ApplicationRecord]:
        matches = [a for a in self.applications.values() if a.grant_id == grant_id]
        matches.sort(key=lambda a: a.submitted_at, reverse=True)
        return matches

    def get_application_by_id(self, application_id: str) -> Optional[ApplicationRecord]:
        application = self.applications.get(application_id)
        return self._with_details(application) if application else None

    def create_application(self, application: ApplicationRecord) -> ApplicationRecord:
        if self.check_user_has_applied_to_grant(
            application.user_id, application.grant_id
        ):
            raise DuplicateApplicationError(application.user_id, application.grant_id)
        application = replace(application, grant=None, user=None)
        self.applications[application.id] = application
        return application

    def update_application(self, application_id: str, **updates) -> ApplicationRecord:
        _check_updates(updates, _APPLICATION_UPDATABLE)
        application = self.applications.get(application_id)
        if not application:
            raise NotFoundError("Application not found")
        application = replace(application, **updates)
        self.applications[application_id] = application
        return application

    def check_user_has_applied_to_grant(self, user_id: str, grant_id: str) -> bool:
        return any(
            a.user_id == user_id and a.grant_id == grant_id
            for a in self.applications.values()
        )

    def check_referral_exists(self, referral_name: str) -> bool:
        needle = referral_name.lower()
        for award in self.awards.values():
            user = self.users.get(award.user_id)
            if user and needle in user.full_name.lower():
                return True
        return False

    def create_contact_message(
        self, message: ContactMessageRecord
    ) -> ContactMessageRecord:
        self.contact_messages[message.id] = message
        return message

    def get_all_contact_messages(self) -> list[ContactMessageRecord]:
        return sorted(
            self.contact_messages.values(), key=lambda m: m.created_at, reverse=True
        )

    def create_grant_award(self, award: GrantAwardRecord) -> GrantAwardRecord:
        self.awards[award.id] = award
        return award

    def get_awards_by_user(self, user_id: str) -> list[GrantAwardRecord]:
        matches = [a for a in self.awards.values() if a.user_id == user_id]
        return sorted(matches, key=lambda a: a.awarded_at, reverse=True)

    def get_grant_stats(self) -> GrantStats:
        total_amount = sum((a.amount for a in self.awards.values()), Decimal("0"))
        selected = sum(
            1
            for a in self.applications.values()
            if a.status == ApplicationStatus.SELECTED
        )
        return GrantStats(
            total_grants_distributed=float(total_amount),
            total_recipients=len(self.awards),
            total_countries=len(self.get_active_countries()),
            success_rate=compute_success_rate(selected, len(self.applications)),
        )


# Dialects with INSERT ... ON CONFLICT, used for the user upsert.
_DIALECT_INSERTS = {"postgresql": postgresql.insert, "sqlite": sqlite.insert}


class PostgresDbClient:
    """
    SQLAlchemy-backed implementation. Accepts a Postgres URL, or SQLite for tests.
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for PostgresDbClient")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        if self.engine.dialect.name not in _DIALECT_INSERTS:
            raise ValueError(
                f"Unsupported database dialect: {self.engine.dialect.name}"
            )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    # Row <-> record conversion

    def _to_user_record(self, row: "UserRow") -> UserRecord:
        return UserRecord(
            id=row.id,
            email=row.email,
            first_name=row.first_name,
            last_name=row.last_name,
            profile_image_url=row.profile_image_url,
            country=row.country,
            phone=row.phone,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def _to_country_record(self, row: "CountryRow") -> CountryRecord:
        return CountryRecord(
            id=row.id,
            name=row.name,
            code=row.code,
            currency=row.currency,
            flag=row.flag,
            active=bool(row.active),
        )

    def _to_grant_record(
        self, row: "GrantRow", country: Optional["CountryRow"] = None
    ) -> GrantRecord:
        return GrantRecord(
            id=row.id,
            title=row.title,
            description=row.description,
            category=GrantCategory(row.category),
            country_id=row.country_id,
            min_amount=row.min_amount,
            max_amount=row.max_amount,
            amount=row.amount,
            currency=row.currency,
            amount_type=AmountType(row.amount_type),
            total_spots=row.total_spots,
            available_spots=row.available_spots,
            deadline=row.deadline,
            status=GrantStatus(row.status),
            eligibility_criteria=row.eligibility_criteria,
            application_instructions=row.application_instructions,
            created_at=row.created_at,
            updated_at=row.updated_at,
            country=self._to_country_record(country) if country else None,
        )

    def _to_application_record(
        self,
        row: "ApplicationRow",
        grant: Optional[GrantRecord] = None,
        user: Optional["UserRow"] = None,
    ) -> ApplicationRecord:
        return ApplicationRecord(
            id=row.id,
            grant_id=row.grant_id,
            user_id=row.user_id,
            full_name=row.full_name,
            email=row.email,
            phone=row.phone,
            address=row.address,
            reason_for_applying=row.reason_for_applying,
            referral_name=row.referral_name,
            has_referral=bool(row.has_referral),
            auto_qualified=bool(row.auto_qualified),
            status=ApplicationStatus(row.status),
            submitted_at=row.submitted_at,
            reviewed_at=row.reviewed_at,
            selected_at=row.selected_at,
            notes=row.notes,
            grant=grant,
            user=self._to_user_record(user) if user else None,
        )

    def _to_contact_record(self, row: "ContactMessageRow") -> ContactMessageRecord:
        return ContactMessageRecord(
            id=row.id,
            first_name=row.first_name,
            last_name=row.last_name,
            email=row.email,
            subject=row.subject,
            message=row.message,
            status=ContactStatus(row.status),
            created_at=row.created_at,
            responded_at=row.responded_at,
        )

    def _to_award_record(self, row: "GrantAwardRow") -> GrantAwardRecord:
        return GrantAwardRecord(
            id=row.id,
            grant_id=row.grant_id,
            application_id=row.application_id,
            user_id=row.user_id,
            amount=row.amount,
            currency=row.currency,
            awarded_at=row.awarded_at,
            disbursed_at=row.disbursed_at,
            notes=row.notes,
        )

    # Users

    def get_user(self, user_id: str) -> Optional[UserRecord]:
        with self.Session() as session:
            row = session.get(UserRow, user_id)
            return self._to_user_record(row) if row else None

    def upsert_user(self, user: UserRecord) -> UserRecord:
        profile = dict(
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            profile_image_url=user.profile_image_url,
            country=user.country,
            phone=user.phone,
        )
        # Single statement so concurrent first logins cannot both insert.
        insert = _DIALECT_INSERTS[self.engine.dialect.name]
        stmt = insert(UserRow).values(
            id=user.id,
            created_at=user.created_at,
            updated_at=user.updated_at,
            **profile,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[UserRow.id],
            set_=dict(profile, updated_at=_utcnow()),
        )
        with self.Session() as session:
            session.execute(stmt)
            session.commit()
            row = session.execute(
                select(UserRow).where(UserRow.id == user.id)
            ).scalar_one()
            return self._to_user_record(row)

    # Countries

    def get_all_countries(self) -> list[CountryRecord]:
        with self.Session() as session:
            rows = session.execute(
                select(CountryRow).order_by(CountryRow.name.asc())
            ).scalars()
            return [self._to_country_record(row) for row in rows]

    def get_active_countries(self) -> list[CountryRecord]:
        with self.Session() as session:
            rows = session.execute(
                select(CountryRow)
                .where(CountryRow.active.is_(True))
                .order_by(CountryRow.name.asc())
            ).scalars()
            return [self._to_country_record(row) for row in rows]

    def create_country(self, country: CountryRecord) -> CountryRecord:
        with self.Session() as session:
            row = CountryRow(
                id=country.id,
                name=country.name,
                code=country.code,
                currency=country.currency,
                flag=country.flag,
                active=country.active,
            )
            session.add(row)
            session.commit()
            session.refresh(row)
            return self._to_country_record(row)

    # Grants

    def _select_grants(self):
        return (
            select(GrantRow, CountryRow)
            .outerjoin(CountryRow, GrantRow.country_id == CountryRow.id)
            .order_by(GrantRow.created_at.desc())
        )

    def _list_grants(self, stmt) -> list[GrantRecord]:
        with self.Session() as session:
            return [
                self._to_grant_record(grant, country)
                for grant, country in session.execute(stmt).all()
            ]

    def get_all_grants(self) -> list[GrantRecord]:
        return self._list_grants(self._select_grants())

    def get_grant_by_id(self, grant_id: str) -> Optional[GrantRecord]:
        with self.Session() as session:
            result = session.execute(
                self._select_grants().where(GrantRow.id == grant_id)
            ).first()
            if not result:
                return None
            grant, country = result
            return self._to_grant_record(grant, country)

    def get_grants_by_country(self, country_id: str) -> list[GrantRecord]:
        return self._list_grants(
            self._select_grants().where(GrantRow.country_id == country_id)
        )

    def get_grants_by_category(self, category: GrantCategory) -> list[GrantRecord]:
        return self._list_grants(
            self._select_grants().where(
                GrantRow.category == GrantCategory(category).value
            )
        )

    def create_grant(self, grant: GrantRecord) -> GrantRecord:
        with self.Session() as session:
            row = GrantRow(
                id=grant.id,
                title=grant.title,
                description=grant.description,
                category=GrantCategory(grant.category).value,
                country_id=grant.country_id,
                min_amount=grant.min_amount,
                max_amount=grant.max_amount,
                amount=grant.amount,
                currency=grant.currency,
                amount_type=AmountType(grant.amount_type).value,
                total_spots=grant.total_spots,
                available_spots=grant.available_spots,
                deadline=grant.deadline,
                status=GrantStatus(grant.status).value,
                eligibility_criteria=grant.eligibility_criteria,
                application_instructions=grant.application_instructions,
                created_at=grant.created_at,
                updated_at=grant.updated_at,
            )
            session.add(row)
            session.commit()
            session.refresh(row)
            return self._to_grant_record(row)

    def update_grant(self, grant_id: str, **updates) -> GrantRecord:
        _check_updates(updates, _GRANT_UPDATABLE)
        with self.Session() as session:
            row = session.get(GrantRow, grant_id)
            if not row:
                raise NotFoundError("Grant not found")
            updates.setdefault("updated_at", _utcnow())
            for name, value in updates.items():
                if isinstance(value, Enum):
                    value = value.value
                setattr(row, name, value)
            session.commit()
            session.refresh(row)
            return self._to_grant_record(row)

    # Applications

    def _select_application_details(self):
        return (
            select(ApplicationRow, GrantRow, CountryRow, UserRow)
            .outerjoin(GrantRow, ApplicationRow.grant_id == GrantRow.id)
            .outerjoin(CountryRow, GrantRow.country_id == CountryRow.id)
            .outerjoin(UserRow, ApplicationRow.user_id == UserRow.id)
        )

    def _to_application_details(self, result) -> ApplicationRecord:
        application, grant, country, user = result
        grant_record = self._to_grant_record(grant, country) if grant else None
        return self._to_application_record(application, grant_record, user)

    def get_applications_by_user(self, user_id: str) -> list[ApplicationRecord]:
        stmt = (
            self._select_application_details()
            .where(ApplicationRow.user_id == user_id)
            .order_by(ApplicationRow.submitted_at.desc())
        )
        with self.Session() as session:
            return [
                self._to_application_details(result)
                for result in session.execute(stmt).all()
            ]

    def get_applications_by_grant(self, grant_id: str) -> list[ApplicationRecord]:
        stmt = (
            select(ApplicationRow)
            .where(ApplicationRow.grant_id == grant_id)
            .order_by(ApplicationRow.submitted_at.desc())
        )
        with self.Session() as session:
            return [
                self._to_application_record(row)
                for row in session.execute(stmt).scalars()
            ]

    def get_application_by_id(self, application_id: str) -> Optional[ApplicationRecord]:
        stmt = self._select_application_details().where(
            ApplicationRow.id == application_id
        )
        with self.Session() as session:
            result = session.execute(stmt).first()
            if not result:
                return None
            return self._to_application_details(result)

    def create_application(self, application: ApplicationRecord) -> ApplicationRecord:
        with self.Session() as session:
            row = ApplicationRow(
                id=application.id,
                grant_id=application.grant_id,
                user_id=application.user_id,
                full_name=application.full_name,
                email=application.email,
                phone=application.phone,
                address=application.address,
                reason_for_applying=application.reason_for_applying,
                referral_name=application.referral_name,
                has_referral=application.has_referral,
                auto_qualified=application.auto_qualified,
                status=ApplicationStatus(application.status).value,
                submitted_at=application.submitted_at,
                reviewed_at=application.reviewed_at,
                selected_at=application.selected_at,
                notes=application.notes,
            )
            session.add(row)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                # The (user_id, grant_id) constraint is the only one a valid
                # payload can trip besides foreign keys.
                if self.check_user_has_applied_to_grant(
                    application.user_id, application.grant_id
                ):
                    raise DuplicateApplicationError(
                        application.user_id, application.grant_id
                    )
                raise
            session.refresh(row)
            return self._to_application_record(row)

    def update_application(self, application_id: str, **updates) -> ApplicationRecord:
        _check_updates(updates, _APPLICATION_UPDATABLE)
        with self.Session() as session:
            row = session.get(ApplicationRow, application_id)
            if not row:
                raise NotFoundError("Application not found")
            for name, value in updates.items():
                if isinstance(value, Enum):
                    value = value.value
                setattr(row, name, value)
            session.commit()
            session.refresh(row)
            return self._to_application_record(row)

    def check_user_has_applied_to_grant(self, user_id: str, grant_id: str) -> bool:
        stmt = (
            select(func.count())
            .select_from(ApplicationRow)
            .where(
                ApplicationRow.user_id == user_id,
                ApplicationRow.grant_id == grant_id,
            )
        )
        with self.Session() as session:
            return session.execute(stmt).scalar_one() > 0

    def check_referral_exists(self, referral_name: str) -> bool:
        full_name = (
            func.coalesce(UserRow.first_name, "")
            + " "
            + func.coalesce(UserRow.last_name, "")
        )
        stmt = (
            select(func.count())
            .select_from(GrantAwardRow)
            .join(UserRow, GrantAwardRow.user_id == UserRow.id)
            .where(full_name.icontains(referral_name, autoescape=True))
        )
        with self.Session() as session:
            return session.execute(stmt).scalar_one() > 0

    # Contact messages

    def create_contact_message(
        self, message: ContactMessageRecord
    ) -> ContactMessageRecord:
        with self.Session() as session:
            row = ContactMessageRow(
                id=message.id,
                first_name=message.first_name,
                last_name=message.last_name,
                email=message.email,
                subject=message.subject,
                message=message.message,
                status=ContactStatus(message.status).value,
                created_at=message.created_at,
                responded_at=message.responded_at,
            )
            session.add(row)
            session.commit()
            session.refresh(row)
            return self._to_contact_record(row)

    def get_all_contact_messages(self) -> list[ContactMessageRecord]:
        with self.Session() as session:
            rows = session.execute(
                select(ContactMessageRow).order_by(ContactMessageRow.created_at.desc())
            ).scalars()
            return [self._to_contact_record(row) for row in rows]

    # Awards

    def create_grant_award(self, award: GrantAwardRecord) -> GrantAwardRecord:
        with self.Session() as session:
            row = GrantAwardRow(
                id=award.id,
                grant_id=award.grant_id,
                application_id=award.application_id,
                user_id=award.user_id,
                amount=award.amount,
                currency=award.currency,
                awarded_at=award.awarded_at,
                disbursed_at=award.disbursed_at,
                notes=award.notes,
            )
            session.add(row)
            session.commit()
            session.refresh(row)
            return self._to_award_record(row)

    def get_awards_by_user(self, user_id: str) -> list[GrantAwardRecord]:
        with self.Session() as session:
            rows = session.execute(
                select(GrantAwardRow)
                .where(GrantAwardRow.user_id == user_id)
                .order_by(GrantAwardRow.awarded_at.desc())
            ).scalars()
            return [self._to_award_record(row) for row in rows]

    # Statistics

    def get_grant_stats(self) -> GrantStats:
        with self.Session() as session:
            total_amount = session.execute(
                select(func.coalesce(func.sum(GrantAwardRow.amount), 0))
            ).scalar_one()
            recipients = session.execute(
                select(func.count()).select_from(GrantAwardRow)
            ).scalar_one()
            countries = session.execute(
                select(func.count())
                .select_from(CountryRow)
                .where(CountryRow.active.is_(True))
            ).scalar_one()
            total_applications = session.execute(
                select(func.count()).select_from(ApplicationRow)
            ).scalar_one()
            selected = session.execute(
                select(func.count())
                .select_from(ApplicationRow)
                .where(ApplicationRow.status == ApplicationStatus.SELECTED.value)
            ).scalar_one()
        return GrantStats(
            total_grants_distributed=float(total_amount or 0),
            total_recipients=recipients,
            total_countries=countries,
            success_rate=compute_success_rate(selected, total_applications),
        )


Base = declarative_base()


class UserRow(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    email = Column(String, unique=True, nullable=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    profile_image_url = Column(String, nullable=True)
    country = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class CountryRow(Base):
    __tablename__ = "countries"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    code = Column(String(3), nullable=False, unique=True)
    currency = Column(String(3), nullable=False)
    flag = Column(String, nullable=True)
    active = Column(Boolean, nullable=False, default=True)


class GrantRow(Base):
    __tablename__ = "grants"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String, nullable=False, index=True)
    country_id = Column(String, ForeignKey("countries.id"), nullable=False, index=True)
    min_amount = Column(Numeric(12, 2), nullable=True)
    max_amount = Column(Numeric(12, 2), nullable=True)
    amount = Column(Numeric(12, 2), nullable=True)
    currency = Column(String(3), nullable=False)
    amount_type = Column(String, nullable=False, default=AmountType.FLEXIBLE.value)
    total_spots = Column(Integer, nullable=False)
    available_spots = Column(Integer, nullable=False)
    deadline = Column(DateTime(timezone=True), nullable=True)
    status = Column(String, nullable=False, default=GrantStatus.ACTIVE.value)
    eligibility_criteria = Column(Text, nullable=True)
    application_instructions = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class ApplicationRow(Base):
    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("user_id", "grant_id", name="uq_applications_user_grant"),
    )

    id = Column(String, primary_key=True)
    grant_id = Column(String, ForeignKey("grants.id"), nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    full_name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    address = Column(String, nullable=False)
    reason_for_applying = Column(Text, nullable=False)
    referral_name = Column(String, nullable=True)
    has_referral = Column(Boolean, nullable=False, default=False)
    auto_qualified = Column(Boolean, nullable=False, default=False)
    status = Column(
        String, nullable=False, default=ApplicationStatus.PENDING.value, index=True
    )
    submitted_at = Column(DateTime(timezone=True), nullable=False)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    selected_at = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)


class ContactMessageRow(Base):
    __tablename__ = "contact_messages"

    id = Column(String, primary_key=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    subject = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    status = Column(String, nullable=False, default=ContactStatus.NEW.value)
    created_at = Column(DateTime(timezone=True), nullable=False)
    responded_at = Column(DateTime(timezone=True), nullable=True)


class GrantAwardRow(Base):
    __tablename__ = "grant_awards"

    id = Column(String, primary_key=True)
    grant_id = Column(String, ForeignKey("grants.id"), nullable=False)
    application_id = Column(String, ForeignKey("applications.id"), nullable=False)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False)
    awarded_at = Column(DateTime(timezone=True), nullable=False)
    disbursed_at = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
