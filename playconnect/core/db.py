"""
SQLAlchemy engine, session factory and request-scoped session dependency
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from playconnect.core.config import settings

Base = declarative_base()


def build_engine(url: str) -> Engine:
    """Create an engine; SQLite connections start every transaction with BEGIN IMMEDIATE.

    Participation writes are read-then-write on the event row. SQLite ignores
    FOR UPDATE, so writers are serialized by taking the reserved lock up front.
    """
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)

    engine = create_engine(url, connect_args={"check_same_thread": False, "timeout": 30})

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


def get_db():
    """Yield a session for one request"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
