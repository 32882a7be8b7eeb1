"""Migrations for the rasclat tables; DATABASE_URL overrides alembic.ini."""
import os
from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

from rasclat.core.db import Base
from rasclat.models import radio  # noqa: F401

config = context.config
if os.environ.get("DATABASE_URL"):
    config.set_main_option("sqlalchemy.url", os.environ["DATABASE_URL"])
if config.config_file_name:
    fileConfig(config.config_file_name)

# sqlite needs batch mode for ALTER TABLE
OPTIONS = dict(target_metadata=Base.metadata, render_as_batch=True)

if context.is_offline_mode():
    context.configure(url=config.get_main_option("sqlalchemy.url"), literal_binds=True, **OPTIONS)
    with context.begin_transaction():
        context.run_migrations()
else:
    engine = engine_from_config(config.get_section(config.config_ini_section, {}),
                                prefix="sqlalchemy.", poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(connection=connection, **OPTIONS)
        with context.begin_transaction():
            context.run_migrations()
