import asyncio
import json
import os

from review_gate import actions
from review_gate.config_loader import load_event_payload
from review_gate.events import event_kind, parse_event
from review_gate.gate import apply_commands
from review_gate.models import Outcome
from review_gate.router import route_event
from review_gate.services.github import GitHubClient
from review_gate.services.github_reviews import GitHubReviewsClient
from review_gate.settings import gate_config, settings

REPORT_FILE = ".review_gate_report.json"


def _write_report(report: dict):
    try:
        with open(REPORT_FILE, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2)
    except OSError:
        pass


async def main() -> int:
    token = settings.access_token
    org = settings.org
    if not token or not org:
        # misconfigured optional contexts are skipped, never blocked
        actions.debug("Please provide access-token and org")
        return 0

    event_name = settings.github_event_name or os.getenv("GITHUB_EVENT_NAME", "")
    event_path = settings.github_event_path or os.getenv("GITHUB_EVENT_PATH", "")
    repository = settings.github_repository or os.getenv("GITHUB_REPOSITORY")
    payload = load_event_payload(event_path)

    event = parse_event(event_name, payload, repository, settings.github_sha)
    if event is None:
        actions.debug(f"Event '{event_name}' is not handled by the review gate")
        return 0

    gh = GitHubClient(token=token, base_url=settings.github_api_url)
    gh_reviews = GitHubReviewsClient(token=token, base_url=settings.github_api_url)

    try:
        config = gate_config(settings)
        decision = await route_event(event, gh, gh_reviews, config)
        await apply_commands(decision, gh, gh_reviews, event.repository)
    except Exception as e:
        # every API failure ends the run as one generic failure
        message = str(e) or e.__class__.__name__
        _write_report(
            {
                "outcome": Outcome.FAILED.value,
                "passed": False,
                "message": message,
                "pr_number": event.pr_number,
                "reviewers_requested": [],
                "event": event_kind(event),
            }
        )
        actions.set_output("outcome", Outcome.FAILED.value)
        actions.set_output("reviewers", "")
        return actions.set_failed(message)

    report = decision.to_report()
    report["event"] = event_kind(event)
    report["team"] = config.team_label
    _write_report(report)

    actions.set_output("outcome", decision.outcome.value)
    actions.set_output("reviewers", ",".join(decision.reviewers_to_request))

    if not decision.passed:
        return actions.set_failed(decision.message)
    actions.info(decision.message)
    return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
