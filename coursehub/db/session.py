from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from coursehub.core.config import settings

DATABASE_URL = settings.DATABASE_URL

# SQLite needs check_same_thread off because FastAPI runs sync routes in a threadpool
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {},
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)
