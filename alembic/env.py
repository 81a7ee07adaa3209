"""
Alembic environment for the Career Clarified schema.

The database URL comes from CLARIFIED_DATABASE_URL through the app settings,
so migrations always target the same database as the API.
"""
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from careerclarified.config import settings
from careerclarified.database import Base
from careerclarified.models import Profile, AIUsageLog, BlogPost, TrackedJob  # noqa: F401

config = context.config
config.set_main_option("sqlalchemy.url", settings.database_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# SQLite needs batch mode for ALTER TABLE; harmless on Postgres
CONFIGURE_OPTS = {
    "target_metadata": target_metadata,
    "render_as_batch": True,
    "compare_type": True,
}


def run_migrations_offline() -> None:
    """Emit SQL to stdout without connecting."""
    context.configure(
        url=settings.database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **CONFIGURE_OPTS,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations over a single unpooled connection."""
    connectable = create_engine(settings.database_url, poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(connection=connection, **CONFIGURE_OPTS)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
