from logging.config import fileConfig

from alembic import context
from sqlmodel import SQLModel

from portal.database import engine

import portal.models.user  # noqa
import portal.models.project  # noqa
import portal.models.work_item  # noqa
import portal.models.task  # noqa
import portal.models.sprint  # noqa
import portal.models.milestone  # noqa
import portal.models.epic  # noqa
import portal.models.change_request  # noqa
import portal.models.comment  # noqa
import portal.models.project_update  # noqa

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = SQLModel.metadata

# SQLite cannot ALTER most constraints in place; batch mode rebuilds the table.
render_as_batch = engine.dialect.name == "sqlite"


def run_migrations_offline() -> None:
    context.configure(
        url=engine.url.render_as_string(hide_password=False),
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        render_as_batch=render_as_batch,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    with engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=render_as_batch,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
