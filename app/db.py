import logging

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, declarative_base
from werkzeug.security import generate_password_hash

from app.config import get_settings

logger = logging.getLogger(__name__)

SQLALCHEMY_DATABASE_URL = get_settings().database_url

connect_args = {"check_same_thread": False} if SQLALCHEMY_DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

MAX_HOURS_CONFIG_KEY = "max_hr_per_booking"

# PostgreSQL only: the database itself refuses two overlapping windows on one facility.
NO_OVERLAP_CONSTRAINT_SQL = """
DO $$
BEGIN
    ALTER TABLE bookings ADD CONSTRAINT bookings_no_overlap
        EXCLUDE USING gist (facility_id WITH =, tstzrange(start_dt, end_dt, '[)') WITH &&);
EXCEPTION
    WHEN duplicate_object THEN NULL;
END $$;
"""


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def install_overlap_constraint(bind):
    if bind.dialect.name != "postgresql":
        return
    with bind.begin() as conn:
        conn.execute(text("CREATE EXTENSION IF NOT EXISTS btree_gist"))
        conn.execute(text(NO_OVERLAP_CONSTRAINT_SQL))
    logger.info("exclusion constraint bookings_no_overlap installed")


def init_db():
    # Import models here to create tables
    from app.models import Account, BookingConfig
    Base.metadata.create_all(bind=engine)
    install_overlap_constraint(engine)

    settings = get_settings()
    db = SessionLocal()
    try:
        # Default booking policy if none configured
        if not db.query(BookingConfig).first():
            db.add(BookingConfig(key=MAX_HOURS_CONFIG_KEY, value="2"))
        if settings.admin_user_id and settings.admin_password:
            exists = db.query(Account).filter(Account.user_id == settings.admin_user_id).first()
            if not exists:
                db.add(Account(
                    user_id=settings.admin_user_id,
                    admin=True,
                    email=settings.admin_email,
                    password=generate_password_hash(settings.admin_password),
                ))
                logger.info("seeded admin account %s", settings.admin_user_id)
        db.commit()
    finally:
        db.close()
