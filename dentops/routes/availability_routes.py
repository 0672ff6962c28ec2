from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dentops import repository
from dentops.core import config
from dentops.core.free_windows import InvalidArgument, compute_free_windows, rule_applies_on
from dentops.database import SessionLocal, ensure_scheduling_schema

router = APIRouter(tags=['availability'])

DATABASE_UNAVAILABLE_DETAIL = 'Database unavailable. Verify DATABASE_URL.'


class AvailabilityRuleResponse(BaseModel):
    id: int
    provider_id: int
    weekday: int | None = None
    start_time_of_day: str
    end_time_of_day: str
    is_recurring: bool
    is_active: bool
    start_date: date | None = None
    end_date: date | None = None

    class Config:
        from_attributes = True


class AppointmentTypeResponse(BaseModel):
    id: int
    name: str
    duration_minutes: int
    description: str | None = None

    class Config:
        from_attributes = True


class FreeWindowResponse(BaseModel):
    start_time: datetime
    end_time: datetime
    duration_minutes: int
    label: str


def ensure_database_ready() -> None:
    try:
        ensure_scheduling_schema()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def require_provider(provider_id: int, db: Session) -> None:
    if repository.get_provider(db, provider_id) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Invalid dental staff member.',
        )


def resolve_duration_minutes(
    appointment_type_id: int | None,
    duration_minutes: int | None,
    db: Session,
) -> int:
    if appointment_type_id is not None:
        appointment_type = repository.get_active_appointment_type(db, appointment_type_id)
        if appointment_type is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail='Invalid appointment type.',
            )
        return appointment_type.duration_minutes

    if duration_minutes is not None:
        return duration_minutes

    return config.DEFAULT_DURATION_MINUTES


def find_free_windows(
    provider_id: int,
    day: date,
    db: Session,
    now: datetime,
    appointment_type_id: int | None = None,
    duration_minutes: int | None = None,
    slot_interval_minutes: int = config.DEFAULT_SLOT_INTERVAL_MINUTES,
    max_results: int = config.DEFAULT_MAX_RESULTS,
    buffer_after_minutes: int = config.DEFAULT_BUFFER_AFTER_MINUTES,
) -> list[FreeWindowResponse]:
    if day < now.date():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Free windows cannot be requested for past dates.',
        )

    try:
        require_provider(provider_id, db)
        duration = resolve_duration_minutes(appointment_type_id, duration_minutes, db)
        rules = repository.list_active_rules(db, provider_id)
        booked = repository.list_booked_intervals(db, provider_id, day)

        windows = compute_free_windows(
            day,
            rules,
            booked,
            duration,
            slot_granularity_minutes=slot_interval_minutes,
            max_results=min(max_results, config.MAX_RESULTS_LIMIT),
            now=now,
            buffer_after_minutes=buffer_after_minutes,
        )
    except InvalidArgument as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc

    return [
        FreeWindowResponse(
            start_time=window.start_time,
            end_time=window.end_time,
            duration_minutes=window.duration_minutes,
            label=f"{window.start_time:%H:%M}-{window.end_time:%H:%M}",
        )
        for window in windows
    ]


@router.get('/appointment-types', response_model=list[AppointmentTypeResponse])
def list_appointment_types(db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return repository.list_active_appointment_types(db)
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


@router.get('/{provider_id}', response_model=list[AvailabilityRuleResponse])
def list_provider_availability(
    provider_id: int,
    day: date | None = Query(default=None, alias='date'),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        require_provider(provider_id, db)
        rows = repository.list_availability_rows(db, provider_id)

        if day is None:
            return rows

        applicable_rows = []
        for row in rows:
            rule = repository.to_rule(row)
            if rule is not None and rule_applies_on(rule, day):
                applicable_rows.append(row)
        return applicable_rows
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


@router.get('/{provider_id}/free-windows', response_model=list[FreeWindowResponse])
def list_free_windows(
    provider_id: int,
    day: date = Query(..., alias='date'),
    appointment_type_id: int | None = Query(default=None),
    duration_minutes: int | None = Query(default=None),
    slot_interval_minutes: int = Query(default=config.DEFAULT_SLOT_INTERVAL_MINUTES),
    max_results: int = Query(default=config.DEFAULT_MAX_RESULTS, ge=1, le=config.MAX_RESULTS_LIMIT),
    buffer_after_minutes: int = Query(default=config.DEFAULT_BUFFER_AFTER_MINUTES),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    return find_free_windows(
        provider_id,
        day,
        db,
        now=datetime.now(),
        appointment_type_id=appointment_type_id,
        duration_minutes=duration_minutes,
        slot_interval_minutes=slot_interval_minutes,
        max_results=max_results,
        buffer_after_minutes=buffer_after_minutes,
    )
