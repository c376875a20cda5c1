from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from myhome.core.config import settings

# SQLite connections are shared across the request threadpool
connect_args = (
    {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
)

# Create database engine - manages connection pool
engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)

# Create session factory - each request gets a new session
# autocommit=False: a service commits once at the end of its unit of work
# autoflush=False: pending objects are flushed explicitly where ids are needed
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for all database models
Base = declarative_base()


def get_db():
    """
    Dependency for getting database session.

    The session is closed after the request completes, so every request
    runs in its own session on its own worker thread.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
