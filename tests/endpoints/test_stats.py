from fastapi.testclient import TestClient

from app.services.stats import exam_bonus_points


def _finish_exam(client, headers, percent):
    return client.post("/results/", headers=headers, json={
        "exam_name": "Mock",
        "earned_points": int(percent),
        "total_points": 100,
        "percent": percent,
        "outcomes": []
    })


class TestStatsEndpoints:
    def test_exam_bonus_points(self):
        assert exam_bonus_points(80.0) == 40
        assert exam_bonus_points(79.99) == 35
        assert exam_bonus_points(100.0) == 50
        assert exam_bonus_points(9.5) == 0

    def test_summary(self, client: TestClient, user_token: str, auth_headers, task_factory):
        headers = auth_headers(user_token)
        closed_a, closed_b = task_factory(), task_factory()
        open_task = task_factory(kind="open", correct_answer="2", options=None, points=2)
        client.post("/progress/", headers=headers, json={"task_id": closed_a.id, "is_correct": True})
        client.post("/progress/", headers=headers, json={"task_id": closed_b.id, "is_correct": False})
        client.post("/progress/", headers=headers, json={"task_id": open_task.id, "is_correct": True, "earned_points": 2})
        # Games mode does not count towards the summary
        client.post("/progress/", headers=headers, json={"task_id": closed_b.id, "mode": "games", "is_correct": True})
        _finish_exam(client, headers, 50.0)
        _finish_exam(client, headers, 75.0)

        response = client.get("/stats/summary", headers=headers)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total_solved"] == 3
        assert data["total_correct"] == 2
        assert data["total_wrong"] == 1
        assert data["closed"]["accuracy_percent"] == 50.0
        assert data["open"]["accuracy_percent"] == 100.0
        assert data["exams_taken"] == 2
        assert data["average_exam_percent"] == 62.5
        assert data["best_exam_percent"] == 75.0

    def test_summary_for_new_user(self, client: TestClient, user_token: str, auth_headers):
        data = client.get("/stats/summary", headers=auth_headers(user_token)).json()["data"]
        assert data["total_solved"] == 0
        assert data["exams_taken"] == 0
        assert data["average_exam_percent"] == 0.0

    def test_leaderboard_combines_games_points_and_exam_bonus(self, client: TestClient, token_for, auth_headers, task_factory):
        task = task_factory(kind="open", correct_answer="1", options=None, points=20)
        alice = auth_headers(token_for("alice"))
        bob = auth_headers(token_for("bob"))
        client.post("/progress/", headers=alice, json={"task_id": task.id, "mode": "games", "is_correct": True, "earned_points": 10})
        _finish_exam(client, alice, 80.0)
        client.post("/progress/", headers=bob, json={"task_id": task.id, "mode": "games", "is_correct": True, "earned_points": 20})

        response = client.get("/stats/leaderboard", headers=alice)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["kind"] == "all"
        assert [(e["rank"], e["name"], e["points"]) for e in data["items"]] == [(1, "alice", 50), (2, "bob", 20)]

    def test_leaderboard_includes_exam_only_users(self, client: TestClient, token_for, auth_headers):
        carol = auth_headers(token_for("carol"))
        _finish_exam(client, carol, 100.0)

        items = client.get("/stats/leaderboard", headers=carol).json()["data"]["items"]
        assert items == [{"rank": 1, "user_id": items[0]["user_id"], "name": "carol", "points": 50}]

    def test_leaderboard_ignores_standard_mode(self, client: TestClient, user_token: str, auth_headers, task_factory):
        task = task_factory(kind="open", correct_answer="1", options=None, points=10)
        headers = auth_headers(user_token)
        client.post("/progress/", headers=headers, json={"task_id": task.id, "is_correct": True, "earned_points": 10})

        items = client.get("/stats/leaderboard", headers=headers).json()["data"]["items"]
        assert items == []

    def test_leaderboard_by_kind(self, client: TestClient, user_token: str, auth_headers, task_factory):
        closed = task_factory()
        open_task = task_factory(kind="open", correct_answer="1", options=None, points=4)
        headers = auth_headers(user_token)
        client.post("/progress/", headers=headers, json={"task_id": closed.id, "mode": "games", "is_correct": True, "earned_points": 1})
        client.post("/progress/", headers=headers, json={"task_id": open_task.id, "mode": "games", "is_correct": True, "earned_points": 4})
        _finish_exam(client, headers, 90.0)

        closed_board = client.get("/stats/leaderboard", headers=headers, params={"kind": "closed"}).json()["data"]
        open_board = client.get("/stats/leaderboard", headers=headers, params={"kind": "open"}).json()["data"]
        assert closed_board["items"][0]["points"] == 1
        assert open_board["items"][0]["points"] == 4

    def test_leaderboard_ties_sorted_by_name(self, client: TestClient, token_for, auth_headers, task_factory):
        task = task_factory(kind="open", correct_answer="1", options=None, points=5)
        for name in ("zoe", "adam"):
            headers = auth_headers(token_for(name))
            client.post("/progress/", headers=headers, json={"task_id": task.id, "mode": "games", "is_correct": True, "earned_points": 5})

        items = client.get("/stats/leaderboard", headers=headers).json()["data"]["items"]
        assert [e["name"] for e in items] == ["adam", "zoe"]
