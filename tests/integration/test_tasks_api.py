#  Mission Control - Tasks API Integration Tests
#
#  Task creation under a mission, patching and parent bumps.
#
#  Depends on: mission_control/routes/missions.py, mission_control/routes/tasks.py, tests/conftest.py
#  Used by:    pytest


class TestCreateTask:
    async def test_create_returns_201(self, authed_client, mission):
        resp = await authed_client.post(f"/api/missions/{mission['id']}/tasks", json={
            "title": "Fuel", "critical": True,
        })
        assert resp.status_code == 201
        data = resp.json()
        assert data["missionId"] == mission["id"]
        assert data["status"] == "Backlog"
        assert data["critical"] is True

    async def test_unknown_mission_returns_404(self, authed_client):
        resp = await authed_client.post("/api/missions/msn_missing/tasks", json={"title": "Fuel"})
        assert resp.status_code == 404

    async def test_invalid_status_returns_400(self, authed_client, mission):
        resp = await authed_client.post(f"/api/missions/{mission['id']}/tasks", json={
            "title": "Fuel", "status": "Waiting",
        })
        assert resp.status_code == 400

    async def test_list(self, authed_client, mission):
        await authed_client.post(f"/api/missions/{mission['id']}/tasks", json={"title": "A"})
        await authed_client.post(f"/api/missions/{mission['id']}/tasks", json={"title": "B"})
        titles = [t["title"] for t in (await authed_client.get(f"/api/missions/{mission['id']}/tasks")).json()]
        assert titles == ["B", "A"]

    async def test_list_unknown_mission_is_empty(self, authed_client):
        resp = await authed_client.get("/api/missions/msn_missing/tasks")
        assert resp.status_code == 200
        assert resp.json() == []


class TestPatchTask:
    async def test_patch_bumps_mission(self, authed_client, mission):
        task = (await authed_client.post(f"/api/missions/{mission['id']}/tasks", json={"title": "Fuel"})).json()
        resp = await authed_client.patch(f"/api/tasks/{task['id']}", json={"status": "Done"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "Done"

        missions = (await authed_client.get(f"/api/missions?projectId={mission['projectId']}")).json()
        assert missions[0]["updatedAt"] == resp.json()["updatedAt"]

    async def test_unknown_returns_404(self, authed_client):
        resp = await authed_client.patch("/api/tasks/tsk_missing", json={"status": "Done"})
        assert resp.status_code == 404

    async def test_non_bool_critical_returns_400(self, authed_client, mission):
        task = (await authed_client.post(f"/api/missions/{mission['id']}/tasks", json={"title": "Fuel"})).json()
        resp = await authed_client.patch(f"/api/tasks/{task['id']}", json={"critical": "sometimes"})
        assert resp.status_code == 400
