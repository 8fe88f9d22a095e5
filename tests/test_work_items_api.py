import sys
import os
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

os.environ.setdefault("database_url", "sqlite:///:memory:")
os.environ.setdefault("secret_key", "testsecret")

from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session, create_engine, select
from sqlalchemy.pool import StaticPool

from portal.main import app
from portal.models.comment import Comment
from portal.models.enums import UserType
from portal.models.project import Project
from portal.models.project_update import ProjectUpdate
from portal.models.task import WorkItemTask
from portal.models.user import User
from portal.models.work_item import WorkItem
from portal.api.endpoints.auth import get_current_user
from portal.database import get_session


engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
SQLModel.metadata.create_all(engine)

staff = User(id=1, email="staff@studio.test", user_type=UserType.INTERNAL)
client_user = User(id=2, email="client@acme.test", user_type=UserType.CLIENT)


def override_get_session():
    with Session(engine) as session:
        yield session


def reset_database():
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        session.add(Project(id=1, name="Portal", description="Client portal"))
        session.commit()


def client_as(user):
    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_session] = override_get_session
    return TestClient(app)


def create(client, title, status="BACKLOG", **fields):
    response = client.post("/projects/1/work-items/", json={"title": title, "status": status, **fields})
    assert response.status_code == 201
    return response.json()


def test_create_appends_and_defaults():
    reset_database()
    client = client_as(staff)

    first = create(client, "Design login")
    second = create(client, "Build login")
    done = create(client, "Kickoff", status="DONE")

    assert first["order_index"] == 0
    assert second["order_index"] == 1
    assert done["order_index"] == 0
    assert first["priority"] == "MED"
    assert first["client_visible"] is True

    app.dependency_overrides.clear()


def test_create_requires_title():
    reset_database()
    client = client_as(staff)

    assert client.post("/projects/1/work-items/", json={"title": "   "}).status_code == 422
    assert client.post("/projects/1/work-items/", json={"status": "BACKLOG"}).status_code == 422
    assert client.post("/projects/1/work-items/", json={"title": "x", "status": "WONTFIX"}).status_code == 422

    app.dependency_overrides.clear()


def test_create_rejects_sprint_from_unknown_scope():
    reset_database()
    client = client_as(staff)

    response = client.post("/projects/1/work-items/", json={"title": "x", "sprint_id": 42})
    assert response.status_code == 404

    assert client.post("/projects/99/work-items/", json={"title": "x"}).status_code == 404

    app.dependency_overrides.clear()


def test_move_to_top_of_done_column():
    reset_database()
    client = client_as(staff)

    backlog = [create(client, f"b{n}") for n in range(4)]
    done = [create(client, f"d{n}", status="DONE") for n in range(3)]
    x = backlog[2]

    response = client.patch(f"/projects/1/work-items/{x['id']}/move", json={"status": "DONE", "order_index": 0})
    assert response.status_code == 200
    data = response.json()
    assert data["item"]["status"] == "DONE"
    assert data["item"]["order_index"] == 0
    assert [i["id"] for i in data["column"]] == [x["id"]] + [d["id"] for d in done]
    assert [i["order_index"] for i in data["column"]] == [0, 1, 2, 3]

    with Session(engine) as session:
        updates = session.exec(select(ProjectUpdate)).all()
        assert [u.title for u in updates] == ["Deliverable Completed"]

    app.dependency_overrides.clear()


def test_move_errors():
    reset_database()
    client = client_as(staff)

    item = create(client, "a")
    create(client, "d", status="DONE")

    out_of_bounds = client.patch(f"/projects/1/work-items/{item['id']}/move", json={"status": "DONE", "order_index": 2})
    assert out_of_bounds.status_code == 409

    negative = client.patch(f"/projects/1/work-items/{item['id']}/move", json={"status": "DONE", "order_index": -1})
    assert negative.status_code == 422

    missing = client.patch("/projects/1/work-items/999/move", json={"status": "DONE", "order_index": 0})
    assert missing.status_code == 404

    with Session(engine) as session:
        assert session.get(WorkItem, item["id"]).status == "BACKLOG"

    app.dependency_overrides.clear()


def test_update_status_appends_to_new_column_and_records_feed():
    reset_database()
    client = client_as(staff)

    create(client, "qa0", status="QA")
    item = create(client, "feature")

    response = client.patch(f"/projects/1/work-items/{item['id']}", json={"status": "QA", "priority": "HIGH"})
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "QA"
    assert data["order_index"] == 1
    assert data["priority"] == "HIGH"

    with Session(engine) as session:
        update = session.exec(select(ProjectUpdate)).one()
        assert update.title == "Deliverable Status Changed"
        assert "**Backlog**" in update.body and "**QA**" in update.body

    rename = client.patch(f"/projects/1/work-items/{item['id']}", json={"title": ""})
    assert rename.status_code == 422

    app.dependency_overrides.clear()


def test_delete_cascades_to_comments_and_tasks():
    reset_database()
    client = client_as(staff)

    item = create(client, "to delete")
    root = client.post(f"/projects/1/work-items/{item['id']}/comments", json={"content": "root"}).json()
    client.post(f"/projects/1/work-items/{item['id']}/comments", json={"content": "reply", "parent_id": root["id"]})
    client.post(f"/projects/1/work-items/{item['id']}/tasks", json={"title": "subtask"})

    assert client.delete(f"/projects/1/work-items/{item['id']}").status_code == 204
    assert client.delete(f"/projects/1/work-items/{item['id']}").status_code == 404

    with Session(engine) as session:
        assert session.exec(select(Comment)).all() == []
        assert session.exec(select(WorkItemTask)).all() == []

    app.dependency_overrides.clear()


def test_client_users_are_read_only_and_see_visible_items():
    reset_database()
    staff_client = client_as(staff)
    visible = create(staff_client, "public")
    hidden = create(staff_client, "internal only", client_visible=False)

    client = client_as(client_user)
    listing = client.get("/projects/1/work-items/")
    assert listing.status_code == 200
    assert [i["id"] for i in listing.json()] == [visible["id"]]
    assert client.get(f"/projects/1/work-items/{hidden['id']}").status_code == 404

    assert client.post("/projects/1/work-items/", json={"title": "x"}).status_code == 403
    move = client.patch(f"/projects/1/work-items/{visible['id']}/move", json={"status": "DONE", "order_index": 0})
    assert move.status_code == 403
    assert client.delete(f"/projects/1/work-items/{visible['id']}").status_code == 403

    app.dependency_overrides.clear()


def test_tasks_lifecycle():
    reset_database()
    client = client_as(staff)
    item = create(client, "with tasks")
    base = f"/projects/1/work-items/{item['id']}/tasks"

    first = client.post(base, json={"title": "write copy"}).json()
    second = client.post(base, json={"title": "review"}).json()
    assert (first["order_index"], second["order_index"]) == (0, 1)

    done = client.patch(f"{base}/{first['id']}", json={"completed": True}).json()
    assert done["completed"] is True and done["completed_at"] is not None
    undone = client.patch(f"{base}/{first['id']}", json={"completed": False}).json()
    assert undone["completed_at"] is None

    assert client.delete(f"{base}/{second['id']}").status_code == 204
    assert [t["title"] for t in client.get(base).json()] == ["write copy"]
    assert client.patch(f"{base}/999", json={"title": "x"}).status_code == 404

    app.dependency_overrides.clear()
