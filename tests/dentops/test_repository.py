from datetime import date, datetime

from dentops import repository
from dentops.models.user import User


def test_get_provider_requires_dentist_role(scheduling_db, dentist) -> None:
    patient = User(email='patient@dentops.test', role='patient')
    scheduling_db.add(patient)
    scheduling_db.commit()

    assert repository.get_provider(scheduling_db, dentist.id).email == 'dentist@dentops.test'
    assert repository.get_provider(scheduling_db, patient.id) is None
    assert repository.get_provider(scheduling_db, 999) is None


def test_list_active_rules_converts_rows_and_skips_inactive(scheduling_db, dentist, add_availability) -> None:
    add_availability(dentist.id, start_time_of_day='13:00', end_time_of_day='17:00')
    add_availability(dentist.id, start_time_of_day='08:00', end_time_of_day='09:00', is_active=False)

    rules = repository.list_active_rules(scheduling_db, dentist.id)

    assert len(rules) == 1
    assert rules[0].start_time_of_day == 780
    assert rules[0].end_time_of_day == 1020


def test_list_active_rules_skips_unreadable_rows(scheduling_db, dentist, add_availability) -> None:
    add_availability(dentist.id, start_time_of_day='late', end_time_of_day='12:00')
    add_availability(dentist.id)

    rules = repository.list_active_rules(scheduling_db, dentist.id)

    assert [rule.start_time_of_day for rule in rules] == [540]


def test_list_rules_for_date_combines_recurring_and_one_off_rules(
    scheduling_db,
    dentist,
    add_availability,
    monday,
) -> None:
    add_availability(dentist.id)
    add_availability(dentist.id, weekday=2)
    add_availability(
        dentist.id,
        weekday=None,
        is_recurring=False,
        start_time_of_day='14:00',
        end_time_of_day='16:00',
        start_date=monday,
    )

    rules = repository.list_rules_for_date(scheduling_db, dentist.id, monday)
    tuesday_rules = repository.list_rules_for_date(scheduling_db, dentist.id, date(2026, 1, 6))

    assert sorted(rule.start_time_of_day for rule in rules) == [540, 840]
    assert [rule.weekday for rule in tuesday_rules] == [2]


def test_list_booked_intervals_keeps_blocking_statuses_overlapping_day(
    scheduling_db,
    dentist,
    add_appointment,
    monday,
) -> None:
    add_appointment(dentist.id, datetime(2026, 1, 5, 10, 0), datetime(2026, 1, 5, 10, 30))
    add_appointment(dentist.id, datetime(2026, 1, 5, 11, 0), datetime(2026, 1, 5, 11, 30), status='PENDING')
    add_appointment(dentist.id, datetime(2026, 1, 5, 9, 0), datetime(2026, 1, 5, 9, 30), status='CANCELLED')
    add_appointment(dentist.id, datetime(2026, 1, 4, 23, 30), datetime(2026, 1, 5, 0, 30))
    add_appointment(dentist.id, datetime(2026, 1, 6, 9, 0), datetime(2026, 1, 6, 9, 30))
    add_appointment(dentist.id + 1, datetime(2026, 1, 5, 12, 0), datetime(2026, 1, 5, 12, 30))

    booked = repository.list_booked_intervals(scheduling_db, dentist.id, monday)

    assert [(interval.start_time, interval.end_time) for interval in booked] == [
        (datetime(2026, 1, 4, 23, 30), datetime(2026, 1, 5, 0, 30)),
        (datetime(2026, 1, 5, 10, 0), datetime(2026, 1, 5, 10, 30)),
        (datetime(2026, 1, 5, 11, 0), datetime(2026, 1, 5, 11, 30)),
    ]


def test_list_active_appointment_types_orders_by_name(scheduling_db, add_appointment_type) -> None:
    add_appointment_type('whitening', 60)
    add_appointment_type('cleaning', 45)
    add_appointment_type('legacy exam', 30, is_active=False)

    names = [appointment_type.name for appointment_type in repository.list_active_appointment_types(scheduling_db)]

    assert names == ['cleaning', 'whitening']
