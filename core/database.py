# Software Engineer: Kyeshav Chettiar
# Company FXO - Adcorp
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations
# v3.0.0.0

import os

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL")

if not DATABASE_URL:
    raise ValueError("DATABASE_URL not found in .env file")

engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {},
    pool_pre_ping=True,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db() -> None:
    """Register every model on the metadata and create missing tables."""
    import models.user  # noqa: F401
    import models.incident  # noqa: F401
    import models.audit_log  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db():
    """
    Dependency to provide a DB session for FastAPI routes.
    One session per request; it is closed once the response is produced.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
