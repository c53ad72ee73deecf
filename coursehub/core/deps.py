from typing import Generator

from sqlalchemy.orm import Session

from coursehub.db.session import SessionLocal


# every request that needs DB will get a fresh session, and it will always close.
def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
