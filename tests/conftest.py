import os
from datetime import date, datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from dentops.database import Base  # noqa: E402
from dentops.models.appointment import Appointment  # noqa: E402
from dentops.models.appointment_type import AppointmentType  # noqa: E402
from dentops.models.availability import Availability  # noqa: E402
from dentops.models.user import User  # noqa: E402

SCHEDULING_TABLES = [User.__table__, AppointmentType.__table__, Availability.__table__, Appointment.__table__]


@pytest.fixture
def scheduling_db():
    engine = create_engine('sqlite:///:memory:')
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine, tables=SCHEDULING_TABLES)

    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine, tables=list(reversed(SCHEDULING_TABLES)))


@pytest.fixture
def monday() -> date:
    return date(2026, 1, 5)


@pytest.fixture
def dentist(scheduling_db) -> User:
    provider = User(email='dentist@dentops.test', full_name='Dr. Rivera', role='dentist')
    scheduling_db.add(provider)
    scheduling_db.commit()
    scheduling_db.refresh(provider)
    return provider


@pytest.fixture
def add_availability(scheduling_db):
    def _add(provider_id: int, **fields) -> Availability:
        values = {
            'weekday': 1,
            'start_time_of_day': '09:00',
            'end_time_of_day': '12:00',
            'is_recurring': True,
            'is_active': True,
        }
        values.update(fields)
        row = Availability(provider_id=provider_id, **values)
        scheduling_db.add(row)
        scheduling_db.commit()
        scheduling_db.refresh(row)
        return row

    return _add


@pytest.fixture
def add_appointment(scheduling_db):
    def _add(provider_id: int, start_time: datetime, end_time: datetime, status: str = 'CONFIRMED') -> Appointment:
        appointment = Appointment(
            provider_id=provider_id,
            start_time=start_time,
            end_time=end_time,
            status=status,
        )
        scheduling_db.add(appointment)
        scheduling_db.commit()
        scheduling_db.refresh(appointment)
        return appointment

    return _add


@pytest.fixture
def add_appointment_type(scheduling_db):
    def _add(name: str, duration_minutes: int, is_active: bool = True) -> AppointmentType:
        appointment_type = AppointmentType(name=name, duration_minutes=duration_minutes, is_active=is_active)
        scheduling_db.add(appointment_type)
        scheduling_db.commit()
        scheduling_db.refresh(appointment_type)
        return appointment_type

    return _add
