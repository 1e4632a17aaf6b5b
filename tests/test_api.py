"""
HTTP API tests
"""
import pytest

from jalpan.core.config import settings
from jalpan.domain.inspection.catalog import CORRECTIVE_ACTIONS
from jalpan.domain.inspection.exceptions import ReportLoadError, ReportSaveError
from jalpan.domain.inspection.form import ACTIONS_REQUIRED_MESSAGE
from jalpan.domain.inspection.repository import DailyReportRepository
from jalpan.domain.inspection.schemas import Status

API = settings.API_PREFIX


def _fail_load(db, report_date):
    raise ReportLoadError(f"Failed to load the report for {report_date}.")


@pytest.fixture
def stored_reports(db_session, report_factory):
    DailyReportRepository.upsert(db_session, report_factory("2024-05-01", [("Breakfast", Status.PERFECT)]))
    DailyReportRepository.upsert(db_session, report_factory("2024-05-02", [("Breakfast", Status.NOT_GOOD)]))
    DailyReportRepository.upsert(db_session, report_factory("2024-05-03", [("Breakfast", Status.PENDING)], finalized=False))


def _open(client, report_date="2024-05-10"):
    response = client.post(f"{API}/forms", json={"date": report_date})
    assert response.status_code == 201
    return response.json()


def _fill(client, state):
    session_id = state["session_id"]
    client.put(f"{API}/forms/{session_id}/inspector", json={"inspector_name": "Ravi Kumar"})
    for index, config in enumerate(state["categories"]):
        client.post(f"{API}/forms/{session_id}/items/{index}/status", json={"status": "GOOD"})
        client.patch(f"{API}/forms/{session_id}/items/{index}", json={"counter_incharge": "Suresh"})
        if config["sub_item_waiver_value"]:
            client.post(f"{API}/forms/{session_id}/items/{index}/choice", json={"choice": config["sub_item_waiver_value"]})
        elif config["requires_sub_item"]:
            client.patch(f"{API}/forms/{session_id}/items/{index}", json={"sub_item": "Kheer"})


class TestHealth:

    def test_health(self, client):
        body = client.get("/health").json()
        assert body["status"] == "healthy"
        assert body["version"] == settings.APP_VERSION


class TestFormFlow:

    def test_open_blank_form(self, client):
        state = _open(client)
        assert state["date"] == "2024-05-10"
        assert not state["finalized"]
        assert all(item["status"] == "PENDING" for item in state["items"])
        assert state["available_actions"] == CORRECTIVE_ACTIONS
        assert len(state["categories"]) == len(state["items"])

    def test_bad_date_rejected(self, client):
        assert client.post(f"{API}/forms", json={"date": "10-05-2024"}).status_code == 422

    def test_open_reports_load_failure(self, client, monkeypatch):
        monkeypatch.setattr(DailyReportRepository, "get_by_date", _fail_load)
        response = client.post(f"{API}/forms", json={"date": "2024-05-10"})
        assert response.status_code == 503

    def test_unknown_session(self, client):
        assert client.get(f"{API}/forms/nope").status_code == 404

    def test_status_toggle(self, client):
        session_id = _open(client)["session_id"]
        url = f"{API}/forms/{session_id}/items/0/status"
        assert client.post(url, json={"status": "PERFECT"}).json()["items"][0]["status"] == "PERFECT"
        assert client.post(url, json={"status": "PERFECT"}).json()["items"][0]["status"] == "PENDING"
        assert client.post(f"{API}/forms/{session_id}/items/99/status", json={"status": "GOOD"}).status_code == 404

    def test_free_text_rejected_for_choice_category(self, client):
        state = _open(client)
        index = next(i for i, c in enumerate(state["categories"]) if c["sub_item_mode"] == "choice")
        response = client.patch(f"{API}/forms/{state['session_id']}/items/{index}", json={"sub_item": "Pizza"})
        assert response.status_code == 400

    def test_finalize_end_to_end(self, client, db_session):
        state = _open(client)
        session_id = state["session_id"]
        _fill(client, state)

        client.post(f"{API}/forms/{session_id}/items/1/status", json={"status": "NOT_GOOD"})
        client.patch(f"{API}/forms/{session_id}/items/1", json={"remark": "Served cold"})

        response = client.post(f"{API}/forms/{session_id}/finalize")
        assert response.status_code == 422
        assert response.json()["detail"]["message"] == ACTIONS_REQUIRED_MESSAGE

        client.post(f"{API}/forms/{session_id}/actions/toggle", json={"action": CORRECTIVE_ACTIONS[0]})
        client.put(f"{API}/forms/{session_id}/actions/custom", json={"text": "Urn replaced"})
        assert client.post(f"{API}/forms/{session_id}/validate").json() == {"valid": True, "error": None}

        response = client.post(f"{API}/forms/{session_id}/finalize")
        assert response.status_code == 200
        body = response.json()
        assert body["created"]
        assert body["report"]["finalized"]
        assert body["report"]["actionsTaken"] == f"{CORRECTIVE_ACTIONS[0]}\nUrn replaced"
        assert body["report"]["completionTime"]

        stored = DailyReportRepository.get_by_date(db_session, "2024-05-10")
        assert stored.finalized
        assert stored.items[1].remark == "Served cold"

        # reopening splits the stored actions again
        reopened = _open(client)
        assert reopened["selected_actions"] == [CORRECTIVE_ACTIONS[0]]
        assert reopened["custom_action"] == "Urn replaced"
        assert reopened["inspector_name"] == "Ravi Kumar"

    def test_finalize_save_failure(self, client, monkeypatch):
        state = _open(client)
        _fill(client, state)

        def failing_upsert(db, report):
            raise ReportSaveError("Failed to save to database. Please check connection.")

        monkeypatch.setattr(DailyReportRepository, "upsert", failing_upsert)
        response = client.post(f"{API}/forms/{state['session_id']}/finalize")
        assert response.status_code == 503

        form = client.get(f"{API}/forms/{state['session_id']}").json()
        assert not form["finalized"]
        assert not form["is_saving"]

    def test_finalize_while_saving(self, client, form_manager):
        state = _open(client)
        form_manager.get_session(state["session_id"]).is_saving = True
        response = client.post(f"{API}/forms/{state['session_id']}/finalize")
        assert response.status_code == 409

    def test_edits_rejected_while_saving(self, client, form_manager):
        state = _open(client)
        session_id = state["session_id"]
        form_manager.get_session(session_id).is_saving = True

        responses = [
            client.patch(f"{API}/forms/{session_id}/items/0", json={"counter_incharge": "Late edit"}),
            client.post(f"{API}/forms/{session_id}/items/0/status", json={"status": "GOOD"}),
            client.put(f"{API}/forms/{session_id}/inspector", json={"inspector_name": "Late"}),
            client.post(f"{API}/forms/{session_id}/actions/toggle", json={"action": CORRECTIVE_ACTIONS[0]}),
            client.put(f"{API}/forms/{session_id}/actions/custom", json={"text": "Late note"}),
        ]
        assert [r.status_code for r in responses] == [409] * 5

        form_manager.get_session(session_id).is_saving = False
        form = client.get(f"{API}/forms/{session_id}").json()
        assert form["items"][0]["counterIncharge"] == ""
        assert form["custom_action"] == ""

    def test_session_closed_after_finalize(self, client):
        state = _open(client)
        session_id = state["session_id"]
        _fill(client, state)

        assert client.post(f"{API}/forms/{session_id}/finalize").status_code == 200
        assert client.get(f"{API}/forms/{session_id}").status_code == 404
        assert client.post(f"{API}/forms/{session_id}/finalize").status_code == 404

    def test_close_form(self, client):
        session_id = _open(client)["session_id"]
        assert client.delete(f"{API}/forms/{session_id}").status_code == 204
        assert client.get(f"{API}/forms/{session_id}").status_code == 404


class TestReports:

    def test_listing(self, client, stored_reports):
        body = client.get(f"{API}/reports").json()
        assert body["total"] == 2
        assert [row["date"] for row in body["reports"]] == ["2024-05-02", "2024-05-01"]
        assert body["reports"][0]["headline"] == "1 Anomalies"

    def test_search(self, client, stored_reports):
        assert client.get(f"{API}/reports/search", params={"date": "2024-05-01"}).json()["found"]
        assert not client.get(f"{API}/reports/search", params={"date": "2024-05-03"}).json()["found"]
        assert not client.get(f"{API}/reports/search", params={"date": "2024-06-01"}).json()["found"]

    def test_search_backend_error_is_not_not_found(self, client, monkeypatch):
        monkeypatch.setattr(DailyReportRepository, "get_by_date", _fail_load)
        response = client.get(f"{API}/reports/search", params={"date": "2024-05-01"})
        assert response.status_code == 503

    def test_get_report_or_blank(self, client, stored_reports):
        assert client.get(f"{API}/reports/2024-05-01").json()["finalized"]
        blank = client.get(f"{API}/reports/2024-07-01").json()
        assert not blank["finalized"]
        assert blank["items"][0]["id"] == "2024-07-01-0"

    def test_get_report_load_failure(self, client, monkeypatch):
        monkeypatch.setattr(DailyReportRepository, "get_by_date", _fail_load)
        assert client.get(f"{API}/reports/2024-05-01").status_code == 503

    def test_share_text(self, client, stored_reports):
        body = client.get(f"{API}/reports/2024-05-01/share-text").json()
        assert "📅 *Date:* 01-05-2024" in body["text"]
        assert body["share_url"].startswith("https://wa.me/?text=")
        assert client.get(f"{API}/reports/2024-05-03/share-text").status_code == 404

    def test_summary(self, client, stored_reports, fake_llm):
        body = client.post(f"{API}/reports/2024-05-02/summary").json()
        assert body["summary"] == fake_llm.reply
        assert "Breakfast: NOT_GOOD" in fake_llm.calls[0][1]


class TestAnalyticsAndPDF:

    def test_range_stats(self, client, stored_reports):
        body = client.get(f"{API}/analytics", params={"start": "2024-05-01", "end": "2024-05-31"}).json()
        breakfast = next(row for row in body["categories"] if row["category"] == "Breakfast")
        assert (breakfast["perfect_count"], breakfast["not_good_count"], breakfast["total_checked"]) == (1, 1, 2)
        assert breakfast["distribution"]["perfect"] == 50.0

    def test_range_requires_both_dates(self, client):
        assert client.get(f"{API}/analytics", params={"start": "2024-05-01"}).status_code == 422

    def test_report_pdf(self, client, stored_reports):
        response = client.get(f"{API}/reports/2024-05-01/pdf")
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert 'filename="Jalpan_Quality_Report_01-05-2024.pdf"' in response.headers["content-disposition"]

    def test_report_pdf_not_finalized(self, client, stored_reports):
        assert client.get(f"{API}/reports/2024-05-03/pdf").status_code == 404

    def test_summary_pdf(self, client, stored_reports, fake_exporter):
        response = client.get(f"{API}/analytics/pdf", params={"start": "2024-05-01", "end": "2024-05-31"})
        assert response.status_code == 200
        assert fake_exporter.exported == [("2024-05-01", "2024-05-31")]
