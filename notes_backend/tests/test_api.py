from local_notes.db import Base
from local_notes.validation import CONTENT_REQUIRED, TITLE_REQUIRED


def test_health(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json() == {"message": "Healthy"}


def test_create_select_edit_delete(client):
    assert client.get("/notes").json() == []
    assert client.get("/state").json()["placeholder"] == "no notes yet"

    assert client.post("/mode/create").json()["mode"] == "creating"
    r = client.post("/notes", json={"title": "A", "content": "B"})
    assert r.status_code == 201
    note = r.json()
    assert (note["title"], note["content"]) == ("A", "B")

    state = client.get("/state").json()
    assert state["mode"] == "browsing"
    assert state["selected"] == note

    state = client.post("/mode/edit").json()
    assert state["mode"] == "editing"
    assert state["draft"] == {"title": "A", "content": "B"}

    r = client.put("/notes/selected", json={"title": "A2", "content": "B"})
    assert r.status_code == 200
    assert r.json() == {"id": note["id"], "title": "A2", "content": "B"}

    r = client.delete(f"/notes/{note['id']}")
    assert r.status_code == 204
    assert client.get("/notes").json() == []
    assert client.get("/state").json()["selected"] is None


def test_validation_failure_surfaces_alerts(client):
    r = client.post("/notes", json={"title": "", "content": ""})
    assert r.status_code == 422
    assert r.json()["errors"] == [TITLE_REQUIRED, CONTENT_REQUIRED]
    assert client.get("/alerts").json() == [TITLE_REQUIRED, CONTENT_REQUIRED]


def test_unknown_ids_are_404(client):
    assert client.delete("/notes/ghost").status_code == 404
    assert client.post("/notes/ghost/select").status_code == 404


def test_update_outside_editing_is_conflict(client):
    client.post("/notes", json={"title": "A", "content": "B"})
    r = client.put("/notes/selected", json={"title": "x", "content": "y"})
    assert r.status_code == 409


def test_draft_patch_and_cancel(client):
    client.post("/mode/create")
    assert client.patch("/draft", json={"title": "T"}).json() == {"title": "T", "content": ""}
    assert client.patch("/draft", json={"content": "C"}).json() == {"title": "T", "content": "C"}
    state = client.post("/mode/cancel").json()
    assert state["mode"] == "browsing"
    assert state["draft"] == {"title": "", "content": ""}


def test_storage_outage_is_503(client, session_factory):
    Base.metadata.drop_all(bind=session_factory.kw["bind"])

    r = client.post("/notes", json={"title": "A", "content": "B"})
    assert r.status_code == 503
    assert r.json() == {"detail": "Local storage unavailable"}
    # the in-memory collection is unchanged
    assert client.get("/notes").json() == []


def test_state_after_deleting_note_being_edited(client):
    note = client.post("/notes", json={"title": "A", "content": "B"}).json()
    assert client.post("/mode/edit").json()["mode"] == "editing"

    assert client.delete(f"/notes/{note['id']}").status_code == 204

    state = client.get("/state").json()
    assert state["mode"] == "browsing"
    assert state["selected"] is None
    assert client.put("/notes/selected", json={"title": "x", "content": "y"}).status_code == 409
