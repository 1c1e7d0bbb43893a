from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    The models mirror tables owned by the upstream Supabase project. They are
    used for building read queries and for creating throwaway schemas in tests,
    never for migrations.
    """

    pass
