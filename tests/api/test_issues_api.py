import pytest
from bson import ObjectId


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "dbConnected": True}


@pytest.mark.asyncio
async def test_health_reports_disconnected_db(client, fake_db):
    fake_db.connected = False

    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "dbConnected": False}


@pytest.mark.asyncio
async def test_list_issues_default_page(client, seeded_repository):
    response = await client.get("/issues")

    assert response.status_code == 200
    body = response.json()
    assert len(body["issues"]) == 10
    assert body["pagination"] == {
        "page": 1,
        "pageSize": 10,
        "total": 12,
        "totalPages": 2,
    }
    assert set(body["issues"][0]) == {
        "_id",
        "title",
        "description",
        "status",
        "priority",
        "assignee",
        "createdAt",
        "updatedAt",
    }


@pytest.mark.asyncio
async def test_list_issues_status_and_priority(client, seeded_repository):
    response = await client.get(
        "/issues", params={"status": "open", "priority": "critical"}
    )

    issues = response.json()["issues"]
    assert len(issues) == 1
    assert issues[0]["status"] == "open"
    assert issues[0]["priority"] == "critical"


@pytest.mark.asyncio
async def test_list_issues_assignee_all_is_not_a_filter(client, seeded_repository):
    everyone = await client.get("/issues", params={"assignee": "all", "pageSize": 50})
    alice = await client.get("/issues", params={"assignee": "Alice"})

    assert everyone.json()["pagination"]["total"] == 12
    assert alice.json()["pagination"]["total"] == 3


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{"page": 0}, {"pageSize": "ten"}])
async def test_list_issues_rejects_bad_paging(client, params):
    response = await client.get("/issues", params=params)

    assert response.status_code == 400
    assert "error" in response.json()


@pytest.mark.asyncio
async def test_list_issues_store_unreachable(client, repository):
    repository.unreachable = True

    response = await client.get("/issues")

    assert response.status_code == 200
    assert response.json()["issues"] == []
    assert response.json()["pagination"]["total"] == 0


@pytest.mark.asyncio
async def test_unexpected_error_echoes_message(client, repository, monkeypatch):
    async def broken(*args, **kwargs):
        raise RuntimeError("cursor exploded")

    monkeypatch.setattr(repository, "find", broken)

    response = await client.get("/issues")

    assert response.status_code == 500
    assert response.json() == {"error": "cursor exploded"}


@pytest.mark.asyncio
async def test_get_issue(client, repository):
    doc = repository.add(title="Detail")

    response = await client.get(f"/issues/{doc['_id']}")

    assert response.status_code == 200
    assert response.json()["_id"] == str(doc["_id"])
    assert response.json()["title"] == "Detail"


@pytest.mark.asyncio
@pytest.mark.parametrize("issue_id", [str(ObjectId()), "bogus"])
async def test_get_issue_not_found(client, issue_id):
    response = await client.get(f"/issues/{issue_id}")

    assert response.status_code == 404
    assert response.json() == {"error": "Issue not found"}


@pytest.mark.asyncio
async def test_create_issue(client, app):
    queue = app.state.broadcaster.subscribe()

    response = await client.post("/issues", json={"title": "T", "description": "D"})

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "open"
    assert body["priority"] == "medium"
    assert body["assignee"] == "Unassigned"
    assert body["createdAt"] == body["updatedAt"]

    assert queue.qsize() == 1
    event = queue.get_nowait()
    assert event["event"] == "issue-created"
    assert event["data"]["payload"]["_id"] == body["_id"]


@pytest.mark.asyncio
async def test_create_issue_missing_description(client, repository):
    response = await client.post("/issues", json={"title": "T"})

    assert response.status_code == 400
    assert response.json() == {"error": "Title and description are required"}
    assert repository.docs == {}


@pytest.mark.asyncio
async def test_create_issue_malformed_body(client):
    response = await client.post(
        "/issues",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_issue_store_unreachable(client, repository):
    repository.unreachable = True

    response = await client.post("/issues", json={"title": "T", "description": "D"})

    assert response.status_code == 503
    assert response.json() == {"error": "Database unavailable"}


@pytest.mark.asyncio
async def test_update_issue(client, repository, app):
    doc = repository.add(title="Before", assignee="Alice")
    queue = app.state.broadcaster.subscribe()

    response = await client.put(
        f"/issues/{doc['_id']}", json={"status": "closed", "assignee": ""}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Before"
    assert body["status"] == "closed"
    assert body["assignee"] == ""
    assert queue.get_nowait()["event"] == "issue-updated"
    assert queue.empty()


@pytest.mark.asyncio
async def test_update_issue_without_title_keeps_title(client, repository):
    doc = repository.add(title="Keep me", assignee="Bob")

    response = await client.put(f"/issues/{doc['_id']}", json={"priority": "low"})

    assert response.json()["title"] == "Keep me"
    assert response.json()["assignee"] == "Bob"


@pytest.mark.asyncio
async def test_update_issue_not_found(client):
    response = await client.put(f"/issues/{ObjectId()}", json={"title": "X"})

    assert response.status_code == 404
    assert response.json() == {"error": "Issue not found"}


@pytest.mark.asyncio
async def test_update_issue_store_unreachable(client, repository):
    doc = repository.add(title="T")
    repository.unreachable = True

    response = await client.put(f"/issues/{doc['_id']}", json={"title": "X"})

    assert response.status_code == 503


@pytest.mark.asyncio
async def test_assignees(client, seeded_repository):
    response = await client.get("/assignees")

    assert response.status_code == 200
    assert sorted(response.json()) == ["Alice", "Bob"]


@pytest.mark.asyncio
async def test_stats(client, seeded_repository):
    response = await client.get("/stats")

    body = response.json()
    assert body["total"] == 12
    assert body["inProgress"] == 4
    assert body["critical"] == 3
    assert len(body["recent"]) == 5


@pytest.mark.asyncio
async def test_event_stats(client, app):
    app.state.broadcaster.subscribe()

    response = await client.get("/events/stats")

    assert response.status_code == 200
    assert response.json() == {
        "totalConnections": 1,
        "activeConnections": 1,
        "totalEventsSent": 0,
        "droppedListeners": 0,
    }
