from jalpan.infrastructure.database.session import Base, engine, get_db, SessionLocal

# Models are imported by jalpan.main before create_all (importing them here is circular)

__all__ = ["Base", "engine", "get_db", "SessionLocal"]
