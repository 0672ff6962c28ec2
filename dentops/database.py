from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from dentops.core import config

engine = create_engine(config.DATABASE_URL or "sqlite:///./dentops.db", echo=config.SQL_ECHO)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_scheduling_schema_checked = False

SCHEDULING_INDEXES = {
    'availability': [
        'CREATE INDEX IF NOT EXISTS idx_availability_provider_weekday ON availability(provider_id, weekday)',
    ],
    'appointments': [
        'CREATE INDEX IF NOT EXISTS idx_appointments_provider_start ON appointments(provider_id, start_time)',
        'CREATE INDEX IF NOT EXISTS idx_appointments_time_range ON appointments(start_time, end_time)',
    ],
}


def ensure_scheduling_schema() -> None:
    global _scheduling_schema_checked

    if _scheduling_schema_checked:
        return

    with _schema_lock:
        if _scheduling_schema_checked:
            return

        existing_tables = set(inspect(engine).get_table_names())

        with engine.begin() as connection:
            for table_name, statements in SCHEDULING_INDEXES.items():
                if table_name not in existing_tables:
                    continue
                for statement in statements:
                    connection.execute(text(statement))

        _scheduling_schema_checked = True
