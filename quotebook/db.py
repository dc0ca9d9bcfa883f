from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from quotebook.core.settings import settings

DATABASE_URL = settings.DATABASE_URL  # same as alembic.ini


def _make_engine(url: str):
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)

    engine = create_engine(
        url,
        connect_args={
            "check_same_thread": False,  # FastAPI runs sync endpoints in a threadpool
            "timeout": settings.SQLITE_BUSY_TIMEOUT,
        },
    )

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # take over transaction control from pysqlite
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        # writers queue on the busy timeout instead of failing lock upgrades
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


engine = _make_engine(DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
