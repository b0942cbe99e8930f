import asyncio
import json
from pathlib import Path

import httpx
import pytest

import review_gate.cli as cli
from review_gate.services.github import GitHubClient
from review_gate.services.github_reviews import GitHubReviewsClient
from review_gate.settings import settings


@pytest.fixture
def action_env(monkeypatch, tmp_path: Path):
    """Configure the gate as an Actions step would, inside a temp dir."""
    monkeypatch.chdir(tmp_path)
    output = tmp_path / "github_output"
    monkeypatch.setenv("GITHUB_OUTPUT", str(output))

    monkeypatch.setattr(settings, "access_token", "ghs_mock")
    monkeypatch.setattr(settings, "org", "octo")
    monkeypatch.setattr(settings, "review_team_slug", "frontend")
    monkeypatch.setattr(settings, "core_reviewers", "alice,carol,dave")
    monkeypatch.setattr(settings, "additional_reviewers", "")
    monkeypatch.setattr(settings, "file_name_match", "app/modules/Common")
    monkeypatch.setattr(settings, "need_review_on_latest_commit", True)
    monkeypatch.setattr(settings, "check_name", "FrontendReviewCheck")
    monkeypatch.setattr(settings, "github_repository", "octo/web")
    monkeypatch.setattr(settings, "github_sha", "merge-sha")

    def write_event(name: str, payload: dict):
        path = tmp_path / "event.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        monkeypatch.setattr(settings, "github_event_name", name)
        monkeypatch.setattr(settings, "github_event_path", str(path))

    write_event.output = output
    write_event.tmp_path = tmp_path
    return write_event


def _fake_pr_api(monkeypatch, files, reviews, members=("alice", "bob")):
    requested = []

    async def fake_list_pr_files(self, repo, pr):
        return [{"filename": f} for f in files]

    async def fake_get_pull(self, repo, pr):
        return {"number": pr, "user": {"login": "dave"}, "head": {"sha": "head"}}

    async def fake_list_reviews(self, repo, pr):
        return reviews

    async def fake_team(self, org, slug):
        return {"id": 1}

    async def fake_members(self, team_id):
        return [{"login": m} for m in members]

    async def fake_request(self, repo, pull_number, reviewers):
        requested.append((pull_number, reviewers))
        return {}

    monkeypatch.setattr(GitHubClient, "list_pr_files", fake_list_pr_files, raising=True)
    monkeypatch.setattr(GitHubClient, "get_pull", fake_get_pull, raising=True)
    monkeypatch.setattr(GitHubClient, "get_team_by_slug", fake_team, raising=True)
    monkeypatch.setattr(GitHubClient, "list_team_members", fake_members, raising=True)
    monkeypatch.setattr(GitHubReviewsClient, "list_reviews", fake_list_reviews, raising=True)
    monkeypatch.setattr(GitHubReviewsClient, "request_reviewers", fake_request, raising=True)
    return requested


PR_PAYLOAD = {"action": "synchronize", "pull_request": {"number": 42, "head": {"sha": "head"}}}


def test_missing_token_skips_quietly(action_env, monkeypatch, capsys):
    monkeypatch.setattr(settings, "access_token", "")
    rc = asyncio.run(cli.main())
    assert rc == 0
    assert "::debug::Please provide access-token and org" in capsys.readouterr().out


def test_needs_review_fails_and_requests_reviewers(action_env, monkeypatch, capsys):
    action_env("pull_request", PR_PAYLOAD)
    requested = _fake_pr_api(monkeypatch, ["app/modules/Common/button.tsx"], reviews=[])

    rc = asyncio.run(cli.main())

    assert rc == 1
    assert requested == [(42, ["alice", "carol"])]
    out = capsys.readouterr().out
    assert "::error::Frontend-Team approval needed" in out
    outputs = action_env.output.read_text("utf-8")
    assert "outcome=NEEDS_REVIEW" in outputs
    assert "reviewers=alice,carol" in outputs

    report = json.loads((action_env.tmp_path / cli.REPORT_FILE).read_text("utf-8"))
    assert report["outcome"] == "NEEDS_REVIEW"
    assert report["event"] == "pull_request"
    assert report["team"] == "Frontend-Team"
    assert report["reviewers_requested"] == ["alice", "carol"]


def test_approved_passes(action_env, monkeypatch, capsys):
    action_env("pull_request", PR_PAYLOAD)
    reviews = [{"user": {"login": "alice"}, "state": "APPROVED", "commit_id": "head"}]
    requested = _fake_pr_api(monkeypatch, ["app/modules/Common/button.tsx"], reviews)

    rc = asyncio.run(cli.main())

    assert rc == 0
    assert requested == []
    out = capsys.readouterr().out
    assert "Pull request is approved by alice" in out
    assert "Frontend-Team approved changes." in out


def test_push_without_pull_request_passes(action_env, monkeypatch):
    action_env("push", {"after": "pushed"})

    async def fake_pulls_for_commit(self, repo, sha):
        return []

    monkeypatch.setattr(GitHubClient, "list_pulls_for_commit", fake_pulls_for_commit, raising=True)
    rc = asyncio.run(cli.main())
    assert rc == 0
    assert "outcome=NOT_APPLICABLE" in action_env.output.read_text("utf-8")


def test_review_without_matching_check_fails(action_env, monkeypatch, capsys):
    action_env("pull_request_review", {"action": "submitted", "pull_request": {"number": 42}})

    async def fake_get_pull(self, repo, pr):
        return {"number": pr, "head": {"sha": "head"}}

    async def fake_check_runs(self, repo, ref, check_name=None):
        return []

    monkeypatch.setattr(GitHubClient, "get_pull", fake_get_pull, raising=True)
    monkeypatch.setattr(GitHubClient, "list_check_runs_for_ref", fake_check_runs, raising=True)

    rc = asyncio.run(cli.main())
    assert rc == 1
    assert "::error::No matching check found" in capsys.readouterr().out


def test_review_retriggers_check_suite(action_env, monkeypatch):
    action_env("pull_request_review", {"action": "submitted", "pull_request": {"number": 42}})
    rerun = []

    async def fake_get_pull(self, repo, pr):
        return {"number": pr, "head": {"sha": "head"}}

    async def fake_check_runs(self, repo, ref, check_name=None):
        return [{"name": "FrontendReviewCheck", "check_suite": {"id": 77}}]

    async def fake_rerun(self, repo, suite_id):
        rerun.append((repo, suite_id))

    monkeypatch.setattr(GitHubClient, "get_pull", fake_get_pull, raising=True)
    monkeypatch.setattr(GitHubClient, "list_check_runs_for_ref", fake_check_runs, raising=True)
    monkeypatch.setattr(GitHubClient, "rerequest_check_suite", fake_rerun, raising=True)

    rc = asyncio.run(cli.main())
    assert rc == 0
    assert rerun == [("octo/web", 77)]


def test_api_error_becomes_failure(action_env, monkeypatch, capsys):
    action_env("pull_request", PR_PAYLOAD)

    async def fake_list_pr_files(self, repo, pr):
        raise httpx.ConnectError("connection refused")

    monkeypatch.setattr(GitHubClient, "list_pr_files", fake_list_pr_files, raising=True)
    rc = asyncio.run(cli.main())
    assert rc == 1
    assert "::error::connection refused" in capsys.readouterr().out

    assert "outcome=FAILED" in action_env.output.read_text("utf-8")
    report = json.loads((action_env.tmp_path / cli.REPORT_FILE).read_text("utf-8"))
    assert report["outcome"] == "FAILED"
    assert report["message"] == "connection refused"
    assert report["pr_number"] == 42


def test_unsupported_event_is_ignored(action_env, capsys):
    action_env("issues", {"action": "opened"})
    rc = asyncio.run(cli.main())
    assert rc == 0
    assert "::debug::Event 'issues' is not handled" in capsys.readouterr().out


def test_config_error_is_reported_not_raised(action_env, monkeypatch, capsys):
    action_env("pull_request", PR_PAYLOAD)

    def broken_config(s):
        raise AttributeError("'list' object has no attribute 'split'")

    monkeypatch.setattr(cli, "gate_config", broken_config)
    rc = asyncio.run(cli.main())
    assert rc == 1
    assert "::error::'list' object has no attribute 'split'" in capsys.readouterr().out
    assert "outcome=FAILED" in action_env.output.read_text("utf-8")
