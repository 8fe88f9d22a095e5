import sys
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

os.environ.setdefault("database_url", "sqlite:///:memory:")
os.environ.setdefault("secret_key", "testsecret")

from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session, create_engine
from sqlalchemy.pool import StaticPool

from portal.main import app
from portal.models.enums import UserType
from portal.models.project import Project
from portal.models.user import User
from portal.models.work_item import WorkItem
from portal.api.deps import get_now
from portal.api.endpoints.auth import get_current_user
from portal.database import get_session


engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

staff = User(id=1, email="staff@studio.test", user_type=UserType.INTERNAL)
client_user = User(id=2, email="client@acme.test", user_type=UserType.CLIENT)


def override_get_session():
    with Session(engine) as session:
        yield session


def reset_database():
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        session.add(Project(id=1, name="Portal"))
        session.add(WorkItem(id=1, project_id=1, title="Homepage"))
        session.add(WorkItem(id=2, project_id=1, title="Secret", client_visible=False))
        session.commit()


class Clock:
    def __init__(self):
        self.now = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


def client_as(user):
    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_now] = Clock()
    return TestClient(app)


def post(client, content, parent_id=None, item_id=1):
    return client.post(
        f"/projects/1/work-items/{item_id}/comments",
        json={"content": content, "parent_id": parent_id},
    )


def test_nested_replies_and_highlight():
    reset_database()
    client = client_as(staff)

    a = post(client, "Is the hero image final?").json()
    b = post(client, "Client asked for a new one", parent_id=a["id"]).json()
    c = post(client, "Uploaded v2", parent_id=b["id"]).json()
    other = post(client, "Separate thread").json()
    assert c["parent_id"] == b["id"]

    response = client.get("/projects/1/work-items/1/comments", params={"highlight": c["id"]})
    assert response.status_code == 200
    data = response.json()
    roots = data["comments"]
    assert [r["id"] for r in roots] == [a["id"], other["id"]]
    assert roots[0]["replies"][0]["replies"][0]["content"] == "Uploaded v2"
    assert data["highlight"] == {"comment_id": c["id"], "found": True, "path": [a["id"], b["id"], c["id"]]}

    app.dependency_overrides.clear()


def test_highlight_of_missing_comment_is_not_an_error():
    reset_database()
    client = client_as(staff)
    post(client, "hello")

    response = client.get("/projects/1/work-items/1/comments", params={"highlight": 404})
    assert response.status_code == 200
    assert response.json()["highlight"] == {"comment_id": 404, "found": False, "path": []}

    plain = client.get("/projects/1/work-items/1/comments").json()
    assert plain["highlight"] is None

    app.dependency_overrides.clear()


def test_comment_validation():
    reset_database()
    client = client_as(staff)

    assert post(client, "").status_code == 422
    assert post(client, "reply", parent_id=777).status_code == 404
    assert post(client, "hi", item_id=99).status_code == 404

    other_item = post(client, "on item 2", item_id=2).json()
    assert post(client, "cross reply", parent_id=other_item["id"]).status_code == 404

    app.dependency_overrides.clear()


def test_clients_comment_only_on_visible_items():
    reset_database()
    client = client_as(client_user)

    created = post(client, "Looks great")
    assert created.status_code == 201
    assert created.json()["author_id"] == client_user.id

    assert post(client, "peek", item_id=2).status_code == 404
    assert client.get("/projects/1/work-items/2/comments").status_code == 404

    app.dependency_overrides.clear()
