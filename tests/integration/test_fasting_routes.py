import pytest


@pytest.mark.asyncio
@pytest.mark.integration
async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}

    resp = await client.get("/ready")
    assert resp.json() == {"status": "ready", "remote_calendar": False}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_hijri_conversion(client):
    resp = await client.get("/api/v1/fasting/hijri", params={"date": "2024-03-11"})
    assert resp.status_code == 200
    assert resp.json() == {"day": 1, "month": 9, "month_name": "Ramadhan", "year": 1445, "era": "H"}

    resp = await client.get("/api/v1/fasting/hijri", params={"date": "2024-03-10", "offset": 1})
    assert resp.json()["day"] == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_recommendation_during_ramadhan(client):
    resp = await client.get("/api/v1/fasting/recommendation", params={"date": "2024-03-20"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["date"] == "2024-03-20"
    assert data["recommendation"]["type"] == "Ramadhan"
    assert data["override_warning"] is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_manual_eid_through_api(client):
    resp = await client.put(
        "/api/v1/fasting/config/ramadhan",
        json={"startDate": "2024-03-10", "endDate": "2024-04-08"},
    )
    assert resp.status_code == 200
    assert resp.json() == {"startDate": "2024-03-10", "endDate": "2024-04-08", "override_warning": None}

    resp = await client.get("/api/v1/fasting/prohibited", params={"date": "2024-04-09"})
    assert resp.json()["is_prohibited"] is True
    assert resp.json()["reason"] == "Eid al-Fitr"

    resp = await client.get("/api/v1/fasting/recommendation", params={"date": "2024-04-09"})
    rec = resp.json()["recommendation"]
    assert rec["type"] is None
    assert rec["is_forbidden"] is True

    resp = await client.delete("/api/v1/fasting/config/ramadhan")
    assert resp.json() == {"status": "cleared"}
    resp = await client.get("/api/v1/fasting/config/ramadhan")
    assert resp.json() == {"startDate": None, "endDate": None}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_oversized_override_is_reported_not_applied(client):
    resp = await client.put(
        "/api/v1/fasting/config/ramadhan",
        json={"startDate": "2024-01-01", "endDate": "2024-04-09"},
    )
    assert resp.status_code == 200
    assert resp.json()["startDate"] == "2024-01-01"
    assert resp.json()["override_warning"].startswith("Ramadhan override ignored")

    resp = await client.get("/api/v1/fasting/recommendation", params={"date": "2024-01-10"})
    data = resp.json()
    assert data["override_warning"].startswith("Ramadhan override ignored")
    assert data["recommendation"]["type"] != "Ramadhan"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_schedules_and_trigger_move(client):
    resp = await client.put(
        "/api/v1/fasting/config/nadzar",
        json={"types": ["Senin-Kamis"], "days": [], "customDates": [], "startDate": "", "endDate": ""},
    )
    assert resp.status_code == 200
    assert resp.json()["types"] == ["Senin-Kamis"]
    assert resp.json()["startDate"] is None

    resp = await client.put("/api/v1/fasting/config/qadha", json={"types": ["Senin-Kamis"], "days": [6]})
    assert resp.status_code == 200

    resp = await client.get("/api/v1/fasting/config/nadzar")
    assert resp.json()["types"] == []

    # Monday in Sya'ban 1445
    resp = await client.get("/api/v1/fasting/recommendation", params={"date": "2024-02-26"})
    rec = resp.json()["recommendation"]
    assert rec["type"] == "Senin-Kamis"
    assert rec["is_qadha"] is True
    assert rec["is_nadzar"] is False


@pytest.mark.asyncio
@pytest.mark.integration
async def test_invalid_schedule_rejected(client):
    resp = await client.put("/api/v1/fasting/config/qadha", json={"days": [7]})
    assert resp.status_code == 422


@pytest.mark.asyncio
@pytest.mark.integration
async def test_gregorian_forecast(client):
    resp = await client.get("/api/v1/fasting/forecast", params={"year": 2024, "month": 3})
    assert resp.status_code == 200
    data = resp.json()
    assert data["index_by"] == "gregorian"
    assert len(data["days"]) == 31
    assert data["days"][10]["date"] == "2024-03-11"
    assert data["days"][10]["recommendation"]["type"] == "Ramadhan"
    assert {d["source"] for d in data["days"]} == {"local"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_hijri_forecast(client):
    resp = await client.get(
        "/api/v1/fasting/forecast",
        params={"year": 1445, "month": 10, "index_by": "hijri"},
    )
    assert resp.status_code == 200
    days = resp.json()["days"]
    assert days[0]["hijri"]["day"] == 1
    assert days[0]["recommendation"]["is_forbidden"] is True
    assert days[0]["recommendation"]["reason"] == "Eid al-Fitr"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_forecast_rejects_bad_month(client):
    resp = await client.get("/api/v1/fasting/forecast", params={"year": 2024, "month": 13})
    assert resp.status_code == 422


@pytest.mark.asyncio
@pytest.mark.integration
async def test_log_entry_and_stats(client):
    await client.put("/api/v1/fasting/config/nadzar", json={"types": ["Senin-Kamis"]})

    resp = await client.post(
        "/api/v1/fasting/log-entry",
        json={"date": "2024-01-08", "type": "Senin-Kamis", "notes": "vow"},
    )
    assert resp.status_code == 200
    log = resp.json()
    assert log["isNadzar"] is True
    assert log["isQadha"] is False

    resp = await client.post(
        "/api/v1/fasting/stats",
        json=[
            log,
            {"date": "2024-03-12", "type": "Ramadhan"},
            {"date": "2024-01-06", "type": "Qadha"},
        ],
    )
    assert resp.status_code == 200
    assert resp.json() == {"total": 3, "nadzar": 1, "qadha": 1, "sunnah": 1, "wajib": 1}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_date_beyond_calendar_range_is_rejected(client):
    resp = await client.get("/api/v1/fasting/hijri", params={"date": "9999-12-31", "offset": 1})
    assert resp.status_code == 400
    assert resp.json()["detail"].startswith("Date out of range")
