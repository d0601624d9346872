"""
Vigia - API Tests
=================

Tests for the HTTP boundary: envelopes, auth policy and routing.
"""

from vigia.api.config import APIConfig, AuthMode


class TestHealth:
    """Tests for health endpoints."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] is True
        assert client.get("/api/health").status_code == 200

    def test_detailed_health(self, client):
        response = client.get("/api/health/detailed")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["db_connected"] is True
        assert data["memory_mb"] > 0

    def test_unknown_route_envelope(self, client):
        response = client.get("/api/nothing-here")
        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"

    def test_request_id_header(self, client):
        response = client.get("/health", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"


class TestMembersEndpoints:
    """Tests for member sync and views."""

    def test_sync_and_list(self, client):
        response = client.post("/api/members/sync", json={
            "member_id": "1", "display_name": "alice", "guild_id": "g1",
        })
        assert response.status_code == 200
        assert response.json()["success"] is True

        members = client.get("/api/members").json()["data"]
        assert members[0]["member_id"] == "1"
        assert members[0]["display_name"] == "alice"
        assert members[0]["tickets"] == 0

    def test_camel_case_aliases(self, client):
        client.post("/api/members/sync", json={"memberId": 5, "memberName": "bob", "guildId": 9})

        members = client.get("/api/members", params={"guild": "9"}).json()["data"]
        assert [m["member_id"] for m in members] == ["5"]
        assert members[0]["guild_id"] == "9"

    def test_batch_sync(self, client):
        response = client.post("/api/members/sync/batch", json={
            "guildId": "g1",
            "members": [
                {"memberId": "1", "memberName": "a"},
                {"member_id": "2", "display_name": "b", "joined_at": "2024-01-01T00:00:00Z"},
            ],
        })
        assert response.status_code == 200
        assert response.json()["data"] == {"upserted": 2}

    def test_batch_sync_rejects_whole_batch(self, client):
        response = client.post("/api/members/sync/batch", json={
            "guild_id": "g1",
            "members": [{"member_id": "1"}, {"display_name": "no id"}],
        })
        assert response.status_code == 400
        assert response.json()["details"] == {"field": "members[1].member_id"}
        assert client.get("/api/members").json()["data"] == []

    def test_remove(self, client):
        client.post("/api/members/sync", json={"member_id": "1"})
        assert client.post("/api/members/remove", json={"member_id": "1"}).status_code == 200
        assert client.get("/api/members").json()["data"] == []

    def test_detail_and_history(self, client):
        client.post("/api/members/sync", json={"member_id": "1", "display_name": "alice"})
        client.post("/api/logs", json={"member_id": "1", "message": "hello"})
        client.post("/api/punish/warn", json={"member_id": "1", "reason": "spam"})

        detail = client.get("/api/members/1").json()["data"]
        assert detail["member"]["name"] == "alice"
        assert detail["rollup"]["warn_count"] == 1
        assert detail["punishments_by_kind"]["warns"][0]["reason"] == "spam"

        logs = client.get("/api/members/1/logs").json()["data"]
        assert logs[0]["message"] == "hello"

        punishments = client.get("/api/members/1/punishments").json()["data"]
        assert punishments[0]["kind"] == "warn"

    def test_unknown_member_detail(self, client):
        response = client.get("/api/members/404")
        assert response.status_code == 200
        assert response.json()["data"]["logs"] == []


class TestFactsEndpoints:
    """Tests for appending facts."""

    def test_log_missing_member_id(self, client, test_db):
        response = client.post("/api/logs", json={"message": "hello"})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error_code"] == "VALIDATION_MISSING_FIELD"
        assert body["details"] == {"field": "member_id"}
        assert test_db.get_logs_between("0000", "9999") == []

    def test_unknown_kind(self, client, test_db):
        response = client.post("/api/punish/kick", json={"member_id": "1"})

        assert response.status_code == 400
        assert response.json()["details"] == {"field": "kind"}
        assert test_db.get_member_punishments("1") == []

    def test_bad_duration_type(self, client, test_db):
        response = client.post("/api/punish/mute", json={"member_id": "1", "duration_hours": "long"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_FAILED"
        assert test_db.get_member_punishments("1") == []

    def test_malformed_json(self, client):
        response = client.post(
            "/api/logs",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_FAILED"

    def test_mute_with_camel_case(self, client, test_db):
        response = client.post("/api/punish/mute", json={
            "memberId": "5",
            "memberName": "bob",
            "durationHours": 2,
            "endAt": "2024-02-15T14:00:00Z",
        })
        assert response.status_code == 200
        assert isinstance(response.json()["data"]["id"], int)

        stored = test_db.get_member_punishments("5")[0]
        assert stored["duration_hours"] == 2
        assert stored["end_at"] == "2024-02-15T14:00:00.000Z"

    def test_tickets(self, client, test_db):
        client.post("/api/tickets", json={"agentId": "7", "agentName": "agent", "count": 3})
        client.post("/api/tickets", json={"agent_id": "7", "count": 0})

        assert test_db.get_ticket_total("7") == 4


class TestPolicyEndpoint:
    """Tests for GET /api/policy/next."""

    def test_warn_has_no_hours(self, client):
        response = client.get("/api/policy/next", params={"member_id": "1"})
        assert response.status_code == 200
        assert response.json()["data"] == {"action": "warn"}

    def test_ladder_over_http(self, client):
        client.post("/api/punish/warn", json={"member_id": "1"})
        assert client.get("/api/policy/next?member_id=1").json()["data"] == {"action": "mute", "hours": 2}

        client.post("/api/punish/mute", json={
            "member_id": "1", "duration_hours": 2, "end_at": "2024-02-15T14:00:00Z",
        })
        assert client.get("/api/policy/next?member_id=1").json()["data"] == {
            "action": "activeMute",
            "until": "2024-02-15T14:00:00.000Z",
        }

    def test_camel_case_query(self, client):
        client.post("/api/punish/warn", json={"member_id": "1"})

        response = client.get("/api/policy/next", params={"memberId": "1"})

        assert response.status_code == 200
        assert response.json()["data"] == {"action": "mute", "hours": 2}

    def test_missing_member_id(self, client):
        response = client.get("/api/policy/next")
        assert response.status_code == 400
        assert response.json()["details"] == {"field": "member_id"}


class TestHistoryEndpoints:
    """Tests for period slices, exports and purges."""

    def test_period_slice(self, client):
        client.post("/api/logs", json={"member_id": "1", "message": "in", "timestamp": "2024-02-10T00:00:00Z"})
        client.post("/api/logs", json={"member_id": "1", "message": "out", "timestamp": "2024-03-01T00:00:00Z"})

        data = client.get("/api/history/2024-02").json()["data"]
        assert [log["message"] for log in data["logs"]] == ["in"]
        assert data["end"] == "2024-03-01T00:00:00.000Z"

    def test_period_slice_bad_month(self, client):
        response = client.get("/api/history/2024-2")
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_INVALID_FORMAT"

    def test_period_slice_trailing_newline(self, client):
        response = client.get("/api/history/2024-02%0A")
        assert response.status_code == 400
        assert response.json()["details"] == {"field": "month"}

    def test_export_and_download(self, client, exports_dir):
        client.post("/api/punish/warn", json={"member_id": "1"})

        response = client.post("/api/export/monthly", json={"month": "2024-02"})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data == {"month": "2024-02", "xlsx": "/exports/2024-02.xlsx", "pdf": "/exports/2024-02.pdf"}

        download = client.get(data["pdf"])
        assert download.status_code == 200
        assert download.content.startswith(b"%PDF")

    def test_export_without_body(self, client, exports_dir):
        response = client.post("/api/export/monthly")
        assert response.status_code == 200
        assert response.json()["data"]["month"] == "2024-02"

    def test_export_bad_month(self, client, exports_dir):
        response = client.post("/api/export/monthly", json={"month": "February"})
        assert response.status_code == 400
        assert response.json()["details"] == {"field": "month"}
        assert not exports_dir.exists()

    def test_clear_member(self, client):
        client.post("/api/punish/warn", json={"member_id": "1"})
        client.post("/api/punish/warn", json={"member_id": "2"})

        data = client.post("/api/clear/member", json={"memberId": "1"}).json()["data"]
        assert data == {"logs": 0, "punishments": 1, "tickets": None}
        assert len(client.get("/api/members/2/punishments").json()["data"]) == 1

    def test_clear_all(self, client):
        client.post("/api/punish/warn", json={"member_id": "1"})
        client.post("/api/tickets", json={"agent_id": "7", "count": 2})

        data = client.post("/api/clear/all").json()["data"]
        assert data == {"logs": 0, "punishments": 1, "tickets": 1}


class TestAuthPolicy:
    """Tests for the API key policy."""

    def _client(self, make_client):
        return make_client(APIConfig(auth_mode=AuthMode.API_KEY, api_key="secret"))

    def test_missing_key_rejected(self, make_client, test_db):
        client = self._client(make_client)

        response = client.post("/api/punish/warn", json={"member_id": "1"})

        assert response.status_code == 401
        assert response.json()["error_code"] == "AUTH_MISSING_KEY"
        assert test_db.get_member_punishments("1") == []

    def test_wrong_key_rejected(self, make_client):
        client = self._client(make_client)

        response = client.post("/api/clear/all", headers={"X-API-Key": "nope"})

        assert response.status_code == 401
        assert response.json()["error_code"] == "AUTH_INVALID_KEY"

    def test_correct_key_accepted(self, make_client):
        client = self._client(make_client)

        response = client.post(
            "/api/members/sync",
            json={"member_id": "1"},
            headers={"X-API-Key": "secret"},
        )
        assert response.status_code == 200

    def test_reads_stay_open(self, make_client):
        client = self._client(make_client)

        assert client.get("/api/members").status_code == 200
        assert client.get("/api/policy/next?member_id=1").status_code == 200


class TestRateLimit:
    """Tests for the rate limit middleware."""

    def test_limit_exceeded(self, make_client):
        client = make_client(APIConfig(rate_limit_requests=2, rate_limit_window=60))

        assert client.get("/api/members").status_code == 200
        assert client.get("/api/members").status_code == 200

        response = client.get("/api/members")
        assert response.status_code == 429
        assert response.json()["error_code"] == "RATE_LIMIT_EXCEEDED"
        assert int(response.headers["Retry-After"]) >= 1

    def test_limit_spans_routes(self, make_client):
        client = make_client(APIConfig(rate_limit_requests=2, rate_limit_window=60))

        assert client.get("/api/members").status_code == 200
        assert client.get("/api/history/2024-02").status_code == 200
        assert client.get("/api/policy/next?member_id=1").status_code == 429

    def test_health_exempt(self, make_client):
        client = make_client(APIConfig(rate_limit_requests=1, rate_limit_window=60))

        for _ in range(3):
            assert client.get("/health").status_code == 200
