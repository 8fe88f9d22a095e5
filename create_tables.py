# create_tables.py
from sqlmodel import SQLModel
from portal.database import engine
import portal.models.user
import portal.models.project
import portal.models.work_item
import portal.models.task
import portal.models.sprint
import portal.models.milestone
import portal.models.epic
import portal.models.change_request
import portal.models.comment
import portal.models.project_update


def create_db_and_tables():
    SQLModel.metadata.create_all(engine)

if __name__ == "__main__":
    create_db_and_tables()
