from datetime import timedelta

from agency_dashboard.utils.dates import utcnow


async def _post(client, headers, **fields):
    payload = {"title": "Town hall", "message": "Friday 4pm in the big room", **fields}
    return await client.post("/announcements", json=payload, headers=headers)


async def test_admin_posts_and_author_is_forced(client, admin_headers, make_employee):
    _, headers = await make_employee("Alice", "555")
    response = await _post(client, admin_headers, author="Someone Else", priority="High")
    assert response.status_code == 201
    announcement = response.json()["announcement"]
    assert announcement["author"] == "Admin"
    assert announcement["priority"] == "High"
    assert announcement["isActive"] is True

    response = await client.get("/announcements", headers=headers)
    assert [a["title"] for a in response.json()] == ["Town hall"]


async def test_employee_cannot_write(client, admin_headers, make_employee):
    _, headers = await make_employee("Alice", "555")
    response = await _post(client, headers)
    assert response.status_code == 403

    created = (await _post(client, admin_headers)).json()["announcement"]
    response = await client.put(f"/announcements/{created['id']}", json={"title": "Mine"}, headers=headers)
    assert response.status_code == 403
    response = await client.delete(f"/announcements/{created['id']}", headers=headers)
    assert response.status_code == 403


async def test_feed_hides_inactive_and_expired(client, admin_headers):
    await _post(client, admin_headers, title="Live")
    await _post(client, admin_headers, title="Paused", isActive=False)
    await _post(client, admin_headers, title="Gone", expiresAt=(utcnow() - timedelta(hours=1)).isoformat())
    await _post(client, admin_headers, title="Soon gone", expiresAt=(utcnow() + timedelta(days=1)).isoformat())

    response = await client.get("/announcements", headers=admin_headers)
    assert response.status_code == 200
    assert [a["title"] for a in response.json()] == ["Soon gone", "Live"]


async def test_feed_is_capped(client, admin_headers):
    for i in range(22):
        await _post(client, admin_headers, title=f"Note {i}")
    response = await client.get("/announcements", headers=admin_headers)
    feed = response.json()
    assert len(feed) == 20
    assert feed[0]["title"] == "Note 21"


async def test_partial_update(client, admin_headers):
    created = (await _post(client, admin_headers)).json()["announcement"]
    response = await client.put(
        f"/announcements/{created['id']}", json={"isActive": False}, headers=admin_headers
    )
    assert response.status_code == 200
    updated = response.json()["announcement"]
    assert updated["isActive"] is False
    assert updated["title"] == "Town hall"

    response = await client.get("/announcements", headers=admin_headers)
    assert response.json() == []


async def test_delete_and_missing(client, admin_headers):
    created = (await _post(client, admin_headers)).json()["announcement"]
    response = await client.delete(f"/announcements/{created['id']}", headers=admin_headers)
    assert response.status_code == 200

    response = await client.delete(f"/announcements/{created['id']}", headers=admin_headers)
    assert response.status_code == 404
    assert response.json() == {"error": "Announcement not found"}
