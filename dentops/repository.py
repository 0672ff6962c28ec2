"""Read queries that feed the free window calculator."""

import logging
from datetime import date, datetime, time, timedelta

from pydantic import ValidationError
from sqlalchemy.orm import Session

from dentops.core.free_windows import AvailabilityRule, BookedInterval, rule_applies_on
from dentops.models.appointment import Appointment, BLOCKING_STATUSES
from dentops.models.appointment_type import AppointmentType
from dentops.models.availability import Availability
from dentops.models.user import PROVIDER_ROLE, User

logger = logging.getLogger(__name__)


def get_provider(db: Session, provider_id: int) -> User | None:
    return db.query(User).filter(
        User.id == provider_id,
        User.role == PROVIDER_ROLE,
    ).first()


def get_active_appointment_type(db: Session, appointment_type_id: int) -> AppointmentType | None:
    return db.query(AppointmentType).filter(
        AppointmentType.id == appointment_type_id,
        AppointmentType.is_active.is_(True),
    ).first()


def list_active_appointment_types(db: Session) -> list[AppointmentType]:
    return db.query(AppointmentType).filter(
        AppointmentType.is_active.is_(True),
    ).order_by(AppointmentType.name.asc()).all()


def list_availability_rows(db: Session, provider_id: int) -> list[Availability]:
    return db.query(Availability).filter(
        Availability.provider_id == provider_id,
    ).order_by(Availability.weekday.asc(), Availability.start_time_of_day.asc()).all()


def to_rule(row: Availability) -> AvailabilityRule | None:
    try:
        return AvailabilityRule.model_validate(row)
    except ValidationError:
        logger.warning('Skipping unreadable availability row %s for provider %s', row.id, row.provider_id)
        return None


def list_active_rules(db: Session, provider_id: int) -> list[AvailabilityRule]:
    rows = db.query(Availability).filter(
        Availability.provider_id == provider_id,
        Availability.is_active.is_(True),
    ).order_by(Availability.start_time_of_day.asc()).all()

    rules = [to_rule(row) for row in rows]
    return [rule for rule in rules if rule is not None]


def list_rules_for_date(db: Session, provider_id: int, day: date) -> list[AvailabilityRule]:
    return [rule for rule in list_active_rules(db, provider_id) if rule_applies_on(rule, day)]


def list_booked_intervals(db: Session, provider_id: int, day: date) -> list[BookedInterval]:
    day_start = datetime.combine(day, time.min)
    day_end = day_start + timedelta(days=1)

    appointments = db.query(Appointment.start_time, Appointment.end_time).filter(
        Appointment.provider_id == provider_id,
        Appointment.status.in_(BLOCKING_STATUSES),
        Appointment.start_time.is_not(None),
        Appointment.end_time.is_not(None),
        Appointment.start_time < day_end,
        Appointment.end_time > day_start,
    ).order_by(Appointment.start_time.asc()).all()

    return [
        BookedInterval(start_time=start_time, end_time=end_time)
        for start_time, end_time in appointments
    ]
