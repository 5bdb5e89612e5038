"""
Alembic environment for the GoWater Dispatch schema.

The routes/orders baseline is raw SQL, so autogenerate is only used to
diff later model changes against ``Base.metadata``.
"""
from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

from app.db.database import Base, migration_url
import app.models  # noqa: F401  registers routes and orders on Base.metadata

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

config.set_main_option(
    "sqlalchemy.url",
    migration_url(
        cli_url=context.get_x_argument(as_dictionary=True).get("db_url"),
        ini_url=config.get_main_option("sqlalchemy.url"),
    ),
)

# Shared by offline and online runs
CONFIGURE_OPTIONS = {
    "target_metadata": Base.metadata,
    "compare_type": True,
}


def run_offline() -> None:
    """Emit the migration SQL without connecting."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **CONFIGURE_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_online() -> None:
    """Apply migrations over a single unpooled connection."""
    engine = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with engine.connect() as connection:
        context.configure(connection=connection, **CONFIGURE_OPTIONS)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_offline()
else:
    run_online()
