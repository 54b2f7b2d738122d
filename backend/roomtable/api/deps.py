from collections.abc import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from roomtable.db.session import SessionLocal
from roomtable.services.periods import PeriodCatalog, get_period_catalog
from roomtable.services.schedule_store import SqlScheduleRepository


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_repository(db: Session = Depends(get_db)) -> SqlScheduleRepository:
    return SqlScheduleRepository(db)


def get_catalog() -> PeriodCatalog:
    return get_period_catalog()
