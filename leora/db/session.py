from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from leora.config import get_settings, require_database_url


@lru_cache(maxsize=1)
def _session_factory() -> sessionmaker:
    # Built on first use so demo mode runs without a database.
    engine = create_engine(require_database_url(get_settings()), future=True)
    return sessionmaker(bind=engine)


def SessionLocal() -> Session:
    return _session_factory()()
