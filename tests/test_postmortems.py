# tests/test_postmortems.py
"""
Postmortem 저장소 / 분석 API 테스트. LLM은 conftest의 FakeAdvisor로 대체한다.
"""
import itertools

import pytest

from cursor_rules_manager.api.dependencies import get_advisor_factory
from cursor_rules_manager.api.main import app
from cursor_rules_manager.errors import PostmortemNotFound
from cursor_rules_manager.models.postmortem_types import (
    PostmortemAnalysis,
    PostmortemCreate,
    PostmortemStatus,
)
from cursor_rules_manager.scanning.project_paths import encode_project_path
from cursor_rules_manager.storage import postmortem_repository


@pytest.fixture
def ordered_clock(monkeypatch):
    """created_at 이 호출 순서대로 증가하도록 고정."""
    counter = itertools.count(1)
    monkeypatch.setattr(
        postmortem_repository,
        "_now_iso",
        lambda: f"2026-01-01T00:00:{next(counter):02d}+00:00",
    )


def _project_with_rule(tmp_path):
    project = tmp_path / "shop"
    rules = project / ".cursor" / "rules"
    rules.mkdir(parents=True)
    (rules / "api.mdc").write_text("---\ndescription: API\n---\nUse the client.\n", encoding="utf-8")
    return project


# ── 저장소 ───────────────────────────────────────────────────────────────────

class TestRepository:
    def test_create_and_get(self, isolated_home):
        pm = postmortem_repository.create_postmortem(
            PostmortemCreate(project_path="/work/shop", title="Deleted migrations", tags=["db"])
        )
        assert len(pm.id) == 32
        assert pm.project_name == "shop"
        assert pm.status == PostmortemStatus.OPEN
        assert (isolated_home / "postmortems" / f"{pm.id}.json").exists()
        assert postmortem_repository.get_postmortem(pm.id) == pm

    def test_list_newest_first_and_filter(self, ordered_clock):
        a = postmortem_repository.create_postmortem(PostmortemCreate(project_path="/w/a", title="A"))
        b = postmortem_repository.create_postmortem(PostmortemCreate(project_path="/w/b", title="B"))
        c = postmortem_repository.create_postmortem(PostmortemCreate(project_path="/w/a", title="C"))

        assert [pm.id for pm in postmortem_repository.list_postmortems()] == [c.id, b.id, a.id]
        assert [pm.id for pm in postmortem_repository.list_postmortems("/w/a")] == [c.id, a.id]

    def test_corrupt_file_skipped(self, isolated_home):
        pm = postmortem_repository.create_postmortem(PostmortemCreate(title="ok"))
        (isolated_home / "postmortems" / "broken.json").write_text("{", encoding="utf-8")
        assert [p.id for p in postmortem_repository.list_postmortems()] == [pm.id]

    def test_save_analysis_marks_analyzed(self):
        pm = postmortem_repository.create_postmortem(PostmortemCreate(title="x"))
        updated = postmortem_repository.save_analysis(
            pm.id, PostmortemAnalysis(title="x", what_happened="y")
        )
        assert updated.status == PostmortemStatus.ANALYZED
        assert postmortem_repository.get_postmortem(pm.id).analysis.what_happened == "y"

    def test_invalid_id_is_not_found(self):
        with pytest.raises(PostmortemNotFound):
            postmortem_repository.get_postmortem("../settings")

    def test_delete_missing(self):
        with pytest.raises(PostmortemNotFound):
            postmortem_repository.delete_postmortem("0" * 32)


# ── CRUD API ─────────────────────────────────────────────────────────────────

class TestPostmortemApi:
    def test_crud(self, client, ordered_clock):
        first = client.post(
            "/api/postmortems",
            json={
                "projectPath": "/w/shop",
                "title": "Ignored lint config",
                "whatHappened": "Reformatted the whole repo.",
                "severity": "high",
            },
        ).json()["postmortem"]
        assert first["projectName"] == "shop"
        assert first["status"] == "open"
        assert first["severity"] == "high"

        client.post("/api/postmortems", json={"projectPath": "/w/other", "title": "Other"})

        all_records = client.get("/api/postmortems").json()["postmortems"]
        assert [r["title"] for r in all_records] == ["Other", "Ignored lint config"]

        encoded = encode_project_path("/w/shop")
        filtered = client.get(f"/api/postmortems?project={encoded}").json()["postmortems"]
        assert [r["id"] for r in filtered] == [first["id"]]

        assert client.get(f"/api/postmortems/{first['id']}").json()["postmortem"] == first
        assert client.delete(f"/api/postmortems/{first['id']}").json() == {"success": True}
        res = client.get(f"/api/postmortems/{first['id']}")
        assert res.status_code == 404
        assert res.json()["errors"][0]["code"] == "POSTMORTEM_NOT_FOUND"

    def test_title_required(self, client):
        assert client.post("/api/postmortems", json={"title": ""}).status_code == 422


# ── LLM 분석 API ─────────────────────────────────────────────────────────────

class TestAnalysisApi:
    def test_analyze_notes_without_saving(self, client, fake_advisor, tmp_path):
        project = _project_with_rule(tmp_path)
        res = client.post(
            "/api/postmortems/analyze",
            json={"notes": "it used fetch again, ugh", "projectPath": str(project)},
        )
        body = res.json()
        assert body["postmortem"] is None
        assert body["analysis"]["severity"] == "high"
        assert body["analysis"]["suggestedRules"][0]["name"] == "use-api-client"
        assert fake_advisor.calls == [
            ("analyze_notes", "it used fetch again, ugh", ["api.mdc"], "shop")
        ]
        assert client.get("/api/postmortems").json()["postmortems"] == []

    def test_analyze_notes_and_save(self, client, fake_advisor):
        body = client.post(
            "/api/postmortems/analyze",
            json={"notes": "raw notes", "save": True},
        ).json()
        saved = body["postmortem"]
        assert saved["status"] == "analyzed"
        assert saved["title"] == "Ignored API client"
        assert saved["notes"] == "raw notes"
        assert saved["analysis"]["rootCause"] == "No rule about the API client."

    def test_analyze_stored_postmortem(self, client, fake_advisor, tmp_path):
        project = _project_with_rule(tmp_path)
        pm = client.post(
            "/api/postmortems", json={"projectPath": str(project), "title": "Skipped tests"}
        ).json()["postmortem"]

        updated = client.post(f"/api/postmortems/{pm['id']}/analyze").json()["postmortem"]
        assert updated["status"] == "analyzed"
        assert updated["analysis"]["rootCause"] == "Missing rule."
        assert fake_advisor.calls == [("analyze_postmortem", pm["id"], ["api.mdc"])]

    def test_patterns(self, client, fake_advisor):
        ids = [
            client.post("/api/postmortems", json={"projectPath": "/w/a", "title": t}).json()[
                "postmortem"
            ]["id"]
            for t in ("one", "two")
        ]
        report = client.post("/api/postmortems/patterns", json={"projectPath": "/w/a"}).json()[
            "report"
        ]
        assert report["patterns"][0]["occurrences"] == 2
        assert sorted(report["patterns"][0]["postmortemIds"]) == sorted(ids)

    def test_patterns_without_postmortems_skips_llm(self, client):
        def _fail():
            raise AssertionError("LLM must not be called")

        app.dependency_overrides[get_advisor_factory] = lambda: _fail
        report = client.post("/api/postmortems/patterns", json={}).json()["report"]
        assert report["patterns"] == []
        assert report["suggestedRules"] == []

    def test_sanity_check(self, client, fake_advisor, tmp_path):
        project = _project_with_rule(tmp_path)
        client.post("/api/postmortems", json={"projectPath": str(project), "title": "x"})

        review = client.post(
            "/api/sanity-check",
            json={"content": "---\n---\nBe good.", "projectPath": str(project)},
        ).json()["review"]
        assert review["verdict"] == "needs_changes"
        assert review["issues"] == ["Vague wording"]
        assert fake_advisor.calls == [("sanity_check", "---\n---\nBe good.", ["api.mdc"], 1)]

    def test_missing_api_key_is_409(self, client):
        res = client.post("/api/sanity-check", json={"content": "rule"})
        assert res.status_code == 409
        body = res.json()
        assert body["errors"][0]["code"] == "API_KEY_MISSING"
        assert body["instance"] == "/api/sanity-check"
