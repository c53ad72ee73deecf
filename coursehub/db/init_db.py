from coursehub.db.base_class import Base
from coursehub.db.session import engine

# import models so SQLAlchemy registers them
from coursehub.models import assignment, submission  # noqa: F401


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
