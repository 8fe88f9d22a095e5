import sys
import os
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
        session.add(Project(id=2, name="Other"))
        session.commit()


def client_as(user):
    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_session] = override_get_session
    return TestClient(app)


def test_create_and_list_epics_with_deliverable_counts():
    reset_database()
    client = client_as(staff)

    checkout = client.post("/projects/1/epics/", json={"title": "Checkout"})
    assert checkout.status_code == 201
    checkout = checkout.json()
    assert (checkout["status"], checkout["priority"], checkout["order_index"]) == ("NOT_STARTED", "MED", 0)
    search = client.post("/projects/1/epics/", json={"title": "Search", "priority": "HIGH"}).json()
    assert search["order_index"] == 1

    client.post("/projects/1/work-items/", json={"title": "Cart", "epic_id": checkout["id"]})
    client.post("/projects/1/work-items/", json={"title": "Payment", "epic_id": checkout["id"]})
    client.post(
        "/projects/1/work-items/", json={"title": "Fraud rules", "epic_id": checkout["id"], "client_visible": False}
    )

    listing = client.get("/projects/1/epics/").json()
    assert [(e["title"], e["deliverable_count"]) for e in listing] == [("Checkout", 3), ("Search", 0)]

    customer_view = client_as(client_user).get("/projects/1/epics/").json()
    assert customer_view[0]["deliverable_count"] == 2

    app.dependency_overrides.clear()


def test_work_items_must_reference_an_epic_of_their_project():
    reset_database()
    client = client_as(staff)
    foreign = client.post("/projects/2/epics/", json={"title": "Elsewhere"}).json()

    assert client.post("/projects/1/work-items/", json={"title": "x", "epic_id": 99}).status_code == 404
    assert client.post("/projects/1/work-items/", json={"title": "x", "epic_id": foreign["id"]}).status_code == 404

    item = client.post("/projects/1/work-items/", json={"title": "x"}).json()
    assert client.patch(f"/projects/1/work-items/{item['id']}", json={"epic_id": foreign["id"]}).status_code == 404

    app.dependency_overrides.clear()


def test_update_and_delete_epic():
    reset_database()
    client = client_as(staff)
    epic = client.post("/projects/1/epics/", json={"title": "Onboarding"}).json()
    item = client.post("/projects/1/work-items/", json={"title": "Welcome email", "epic_id": epic["id"]}).json()

    updated = client.patch(f"/projects/1/epics/{epic['id']}", json={"status": "IN_PROGRESS", "title": None})
    assert updated.status_code == 200
    assert updated.json()["status"] == "IN_PROGRESS"
    assert updated.json()["title"] == "Onboarding"

    assert client_as(client_user).patch(f"/projects/1/epics/{epic['id']}", json={}).status_code == 403

    client = client_as(staff)
    assert client.delete(f"/projects/1/epics/{epic['id']}").status_code == 204
    assert client.get(f"/projects/1/epics/{epic['id']}").status_code == 404
    assert client.get(f"/projects/1/work-items/{item['id']}").json()["epic_id"] is None

    app.dependency_overrides.clear()


def test_hidden_epics_are_not_shown_to_clients():
    reset_database()
    client = client_as(staff)
    hidden = client.post("/projects/1/epics/", json={"title": "Tech debt", "client_visible": False}).json()
    client.post("/projects/1/epics/", json={"title": "Launch"})

    customer = client_as(client_user)
    assert [e["title"] for e in customer.get("/projects/1/epics/").json()] == ["Launch"]
    assert customer.get(f"/projects/1/epics/{hidden['id']}").status_code == 404

    app.dependency_overrides.clear()
