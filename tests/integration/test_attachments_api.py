#  Mission Control - Artifacts and Links API Integration Tests
#
#  Depends on: mission_control/routes/missions.py, tests/conftest.py
#  Used by:    pytest


class TestArtifacts:
    async def test_create_and_list(self, authed_client, mission):
        resp = await authed_client.post(f"/api/missions/{mission['id']}/artifacts", json={
            "title": "Flight plan", "ref": "docs/flight.pdf",
        })
        assert resp.status_code == 201
        assert resp.json()["kind"] == "file"

        listed = (await authed_client.get(f"/api/missions/{mission['id']}/artifacts")).json()
        assert listed == [resp.json()]

    async def test_unknown_mission_returns_404(self, authed_client):
        resp = await authed_client.post("/api/missions/msn_missing/artifacts", json={"title": "x", "ref": "y"})
        assert resp.status_code == 404

    async def test_unknown_task_returns_400(self, authed_client, mission):
        resp = await authed_client.post(f"/api/missions/{mission['id']}/artifacts", json={
            "title": "x", "ref": "y", "taskId": "tsk_missing",
        })
        assert resp.status_code == 400


class TestLinks:
    async def test_create_and_list(self, authed_client, mission):
        resp = await authed_client.post(f"/api/missions/{mission['id']}/links", json={
            "title": "Board", "url": "https://example.com/board",
        })
        assert resp.status_code == 201
        listed = (await authed_client.get(f"/api/missions/{mission['id']}/links")).json()
        assert [link["url"] for link in listed] == ["https://example.com/board"]

    async def test_blank_url_returns_400(self, authed_client, mission):
        resp = await authed_client.post(f"/api/missions/{mission['id']}/links", json={"title": "Board", "url": " "})
        assert resp.status_code == 400


class TestEmptyTaskId:
    async def test_artifact_with_empty_task_id(self, authed_client, mission):
        resp = await authed_client.post(f"/api/missions/{mission['id']}/artifacts", json={
            "title": "Flight plan", "ref": "docs/flight.pdf", "taskId": "",
        })
        assert resp.status_code == 201
        assert resp.json()["taskId"] is None

    async def test_link_with_empty_task_id(self, authed_client, mission):
        resp = await authed_client.post(f"/api/missions/{mission['id']}/links", json={
            "title": "Board", "url": "https://example.com/board", "taskId": "",
        })
        assert resp.status_code == 201
        assert resp.json()["taskId"] is None
