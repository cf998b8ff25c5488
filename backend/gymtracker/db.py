from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from .settings import get_settings

settings = get_settings()


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # sessions are opened from threadpool workers
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


# Only remote storage and auth touch the database; nothing connects until then
engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

# Base class for the users / user_documents tables
class Base(DeclarativeBase):
    pass

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

# Dependency for FastAPI routes
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def ping_database(session_factory=SessionLocal) -> None:
    """Round-trip ``SELECT 1``; raises the driver error when the database is unreachable."""
    with session_factory() as db:
        db.execute(text("SELECT 1"))
