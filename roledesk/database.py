from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from Security.security_config import SECURITY_SETTINGS

DATABASE_URL = SECURITY_SETTINGS["DATABASE_URL"]
if not DATABASE_URL:
    raise ValueError("DATABASE_URL must be set in your .env file.")


def is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def make_engine(url: str, **kwargs):
    if is_sqlite(url):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_pre_ping", True)
    return create_engine(url, **kwargs)


engine = make_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
