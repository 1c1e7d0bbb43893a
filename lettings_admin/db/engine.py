"""
SQLAlchemy engine singleton for the marketplace database.

The tables are owned by the upstream Supabase project; this service only reads
them. Pool settings match a small admin workload with a handful of concurrent
dashboard users.
"""

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from lettings_admin.config import DATABASE_URL

if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is not set.")

engine: Engine = create_engine(
    DATABASE_URL,
    future=True,
    pool_size=5,
    max_overflow=10,
    pool_pre_ping=True,  # Supabase pooler drops idle connections
    pool_recycle=1800,
    echo=False,
)


def check_engine_health() -> bool:
    """
    Check if the database is reachable.

    Used by the /ready endpoint before allowing traffic to the service.

    Returns:
        bool: True if a trivial query succeeds, False otherwise
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
