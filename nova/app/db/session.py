"""Engine and request-scoped session factory."""

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from nova.app.core.settings import get_settings

settings = get_settings()

connect_args = {}
if settings.database_url.startswith("sqlite"):
    # Handlers run in the threadpool; the busy timeout lets writers queue on the file lock
    connect_args = {"check_same_thread": False, "timeout": 30}

engine = create_engine(settings.database_url, pool_pre_ping=True, connect_args=connect_args)

if engine.dialect.name == "sqlite":

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        # SQLite has no row locks: take the write lock up front so
        # count-then-write units serialize like SELECT ... FOR UPDATE
        conn.exec_driver_sql("BEGIN IMMEDIATE")


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
