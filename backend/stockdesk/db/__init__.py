import importlib

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base

from stockdesk.config import settings
from stockdesk.utils.logging import get_logger

log = get_logger("db")

DATABASE_URL = settings.DATABASE_URL
_is_sqlite = DATABASE_URL.startswith("sqlite")

engine = create_engine(
    DATABASE_URL,
    future=True,
    echo=False,
    # FastAPI runs sync endpoints in a threadpool
    connect_args={"check_same_thread": False} if _is_sqlite else {},
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

if _is_sqlite:

    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        # SQLite ships with FK enforcement off; order_items -> products relies on it
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


MODEL_MODULES = [
    "stockdesk.models.product",
    "stockdesk.models.order",
]


def init_db(reset: bool = False):
    """
    Initialize DB schema.

    Imports every model module so Base.metadata is populated, then creates
    missing tables. With reset=True all tables are dropped first.
    """
    for mod in MODEL_MODULES:
        importlib.import_module(mod)

    if reset:
        log.warning("Resetting database at %s", DATABASE_URL)
        Base.metadata.drop_all(bind=engine)

    Base.metadata.create_all(bind=engine)
    log.info("Database initialized (%d tables).", len(Base.metadata.tables))


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
