"""
Integration tests for API endpoints using a SQLite test DB.
"""
import pytest

DAY_MS = 86_400_000
# 2026-10-19 12:00:00 UTC
T0 = 1_792_411_200_000


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        body = r.json()
        assert body["status"] == "ok"
        assert body["store"] == "ok"


class TestDisplay:
    def test_empty_display(self, client):
        r = client.get(f"/tracker/display?now={T0}")
        assert r.status_code == 200
        body = r.json()
        assert body["now"] == T0
        assert body["last_water"] is None
        assert body["last_water_text"] == "No record yet"
        assert body["streak_days"] is None
        assert body["streak_text"] == "No incident"
        assert body["high_score"] == 0
        assert body["water_history"] == []

    def test_display_defaults_to_server_clock(self, client):
        r = client.get("/tracker/display")
        assert r.status_code == 200
        assert r.json()["now"] > 1_600_000_000_000

    def test_display_raises_high_score_as_time_passes(self, client):
        client.post("/tracker/incident", json={"now": T0})
        r1 = client.get(f"/tracker/display?now={T0 + 2 * DAY_MS + 1000}")
        assert r1.json()["streak_days"] == 2
        assert r1.json()["high_score"] == 2
        r2 = client.get(f"/tracker/display?now={T0 + 9 * DAY_MS}")
        assert r2.json()["high_score"] == 9

    def test_negative_now_rejected(self, client):
        r = client.get("/tracker/display?now=-5")
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"


class TestRecordWater:
    def test_record_water(self, client):
        r = client.post("/tracker/water", json={"now": T0})
        assert r.status_code == 201
        body = r.json()
        assert body["last_water"] == T0
        assert body["last_water_text"] == "Oct 19, 2026, 12:00 PM"
        assert body["water_history"] == [T0]
        assert body["water_history_text"] == ["Oct 19, 2026, 12:00 PM"]

    def test_history_most_recent_first(self, client):
        for offset in (0, 1000, 2000):
            client.post("/tracker/water", json={"now": T0 + offset})
        body = client.get(f"/tracker/display?now={T0 + 3000}").json()
        assert body["water_history"] == [T0 + 2000, T0 + 1000, T0]
        assert body["last_water"] == T0 + 2000

    def test_record_water_without_body_uses_server_clock(self, client):
        r = client.post("/tracker/water")
        assert r.status_code == 201
        body = r.json()
        assert body["last_water"] == body["now"]

    def test_record_water_empty_json_uses_server_clock(self, client):
        r = client.post("/tracker/water", json={})
        assert r.status_code == 201
        assert r.json()["water_history"] == [r.json()["now"]]

    def test_non_integer_now_rejected(self, client):
        r = client.post("/tracker/water", json={"now": "yesterday"})
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "VALIDATION_ERROR"
        fields = [e["field"] for e in body["details"]["errors"]]
        assert any("now" in f for f in fields)


class TestRecordIncident:
    def test_record_incident_resets_streak_keeps_high_score(self, client):
        client.post("/tracker/incident", json={"now": T0})
        client.get(f"/tracker/display?now={T0 + 5 * DAY_MS}")
        r = client.post("/tracker/incident", json={"now": T0 + 5 * DAY_MS})
        assert r.status_code == 201
        body = r.json()
        assert body["streak_days"] == 0
        assert body["streak_text"] == "0"
        assert body["high_score"] == 5

    def test_incident_does_not_touch_water(self, client):
        client.post("/tracker/water", json={"now": T0})
        body = client.post("/tracker/incident", json={"now": T0 + 1}).json()
        assert body["water_history"] == [T0]


class TestExport:
    def test_export_download(self, client):
        client.post("/tracker/water", json={"now": T0})
        client.post("/tracker/incident", json={"now": T0 - 2 * DAY_MS})
        client.get(f"/tracker/display?now={T0}")

        r = client.get(f"/tracker/export?now={T0}")
        assert r.status_code == 200
        assert r.headers["content-type"].startswith("text/csv")
        assert (
            r.headers["content-disposition"]
            == 'attachment; filename="dogcare_records_2026-10-19.csv"'
        )
        assert r.text.splitlines() == [
            '"Record Type","Timestamp","Date/Time"',
            f'"Water","{T0}","Oct 19, 2026, 12:00 PM"',
            f'"Last Incident","{T0 - 2 * DAY_MS}","Oct 17, 2026, 12:00 PM"',
            '"High Score (days)","","2"',
        ]

    def test_export_empty_store(self, client):
        r = client.get(f"/tracker/export?now={T0}")
        assert r.status_code == 200
        assert r.text.splitlines() == [
            '"Record Type","Timestamp","Date/Time"',
            '"High Score (days)","","0"',
        ]

    def test_export_does_not_write(self, client, db):
        from dogcare.models.kv_entry import KeyValueEntry

        client.post("/tracker/incident", json={"now": T0})
        client.get(f"/tracker/export?now={T0 + 30 * DAY_MS}")
        db.expire_all()
        assert db.get(KeyValueEntry, "dogcare_highScore") is None


class TestOpenApi:
    @pytest.mark.parametrize("path", ["/tracker/water", "/tracker/incident",
                                      "/tracker/display", "/tracker/export"])
    def test_routes_documented(self, client, path):
        schema = client.get("/openapi.json").json()
        assert path in schema["paths"]
