from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from jalpan.core.config import settings


def _engine_kwargs(database_url: str) -> dict:
    """Engine options per backend (SQLite has no connection pool sizing)"""
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,   # connection liveness check
        "pool_size": 10,         # connection pool size
        "max_overflow": 20       # extra connections allowed
    }


# SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    echo=False,
    **_engine_kwargs(settings.DATABASE_URL)
)

# Session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

# Base class for all models
Base = declarative_base()


def get_db():
    """
    Database session dependency

    Used by FastAPI endpoints:
    @router.get("/reports")
    def list_reports(db: Session = Depends(get_db)):
        ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
