from typing import Dict, List, Optional, Sequence

from review_gate import actions
from review_gate.file_filters import is_reviewable
from review_gate.models import (
    Decision,
    GateConfig,
    Outcome,
    RequestReviewers,
    RerunCheckSuite,
    ReviewRecord,
    TeamMembership,
)
from review_gate.reconciler import approved_reviewers, is_approved
from review_gate.services.github import GitHubClient
from review_gate.services.github_reviews import GitHubReviewsClient
from review_gate.team_resolver import resolve_members


def reviewers_to_request(core_reviewers: Sequence[str], author: Optional[str]) -> List[str]:
    """
    Core reviewers in configured order, without duplicates or the PR author.
    Logins compare case-insensitively, as GitHub treats them.
    """
    out: List[str] = []
    seen = {author.casefold()} if author else set()
    for r in core_reviewers:
        if r.casefold() in seen:
            continue
        seen.add(r.casefold())
        out.append(r)
    return out


def decide_approval(
    pr_number: int,
    reviews: Sequence[ReviewRecord],
    team: Optional[TeamMembership],
    author: Optional[str],
    head_sha: Optional[str],
    config: GateConfig,
) -> Decision:
    """
    Turn fetched review state into a Decision. No I/O; requesting reviewers is
    returned as a command for the caller to execute.
    """
    label = config.team_label
    if team is not None and not team.members:
        return Decision(Outcome.FAILED, f"{label} has no members", pr_number=pr_number)

    bound_sha = head_sha if config.need_review_on_latest_commit else None
    required = team.members if team is not None else frozenset()
    if is_approved(reviews, required, bound_sha, config.additional_reviewers):
        return Decision(Outcome.APPROVED, f"{label} approved changes.", pr_number=pr_number)

    reviewers = reviewers_to_request(config.core_reviewers, author)
    commands = [RequestReviewers(pr_number, reviewers)] if reviewers else []
    return Decision(
        Outcome.NEEDS_REVIEW,
        f"{label} approval needed",
        reviewers_to_request=reviewers,
        pr_number=pr_number,
        commands=commands,
    )


async def evaluate_pull_request(
    gh: GitHubClient,
    gh_reviews: GitHubReviewsClient,
    repo: str,
    pr_number: Optional[int],
    config: GateConfig,
) -> Decision:
    if not pr_number:
        actions.debug("Could not get pull request number from context")
        return Decision(Outcome.NOT_APPLICABLE, "No pull request to check")

    label = config.team_label
    actions.info(f"PROCESSING: Fetching changed files for pr #{pr_number}")
    files = await gh.list_pr_files(repo, pr_number)
    paths = [f["filename"] for f in files if f.get("filename")]
    if not is_reviewable(paths, config.file_name_match):
        return Decision(
            Outcome.NOT_APPLICABLE, f"No approval needed from {label}", pr_number=pr_number
        )

    actions.info(f"STATUS: Checking {label} approval status")
    pull = await gh.get_pull(repo, pr_number)
    author = (pull.get("user") or {}).get("login")
    head_sha = (pull.get("head") or {}).get("sha")

    raw_reviews = await gh_reviews.list_reviews(repo, pr_number)
    reviews = [r for r in (ReviewRecord.from_api(x) for x in raw_reviews) if r]
    approvers = approved_reviewers(
        reviews, head_sha if config.need_review_on_latest_commit else None
    )
    if approvers:
        actions.info(f"Pull request is approved by {', '.join(approvers)}")

    team = await resolve_members(gh, config.org, config.team_slug)
    if team is None and not config.additional_reviewers:
        actions.warning(
            "No review team and no additional-reviewers configured; nobody can approve this change"
        )
    return decide_approval(pr_number, reviews, team, author, head_sha, config)


def _pick_pull(pulls: List[Dict]) -> Optional[Dict]:
    open_pulls = [p for p in pulls if p.get("state", "open") == "open"]
    if not open_pulls:
        return None
    # lowest number wins; the API makes no ordering promise
    open_pulls.sort(key=lambda p: p["number"])
    if len(open_pulls) > 1:
        numbers = ", ".join(f"#{p['number']}" for p in open_pulls)
        actions.warning(
            f"Commit maps to several open pull requests ({numbers}); using #{open_pulls[0]['number']}"
        )
    return open_pulls[0]


async def evaluate_push(
    gh: GitHubClient,
    gh_reviews: GitHubReviewsClient,
    repo: str,
    head_sha: str,
    config: GateConfig,
) -> Decision:
    pulls = await gh.list_pulls_for_commit(repo, head_sha)
    pull = _pick_pull(pulls)
    if pull is None:
        actions.debug(f"No open pull request for commit {head_sha}")
        return Decision(Outcome.NOT_APPLICABLE, "No open pull request for this push")
    return await evaluate_pull_request(gh, gh_reviews, repo, pull["number"], config)


async def evaluate_review_submitted(
    gh: GitHubClient,
    repo: str,
    pr_number: Optional[int],
    config: GateConfig,
) -> Decision:
    if not pr_number:
        return Decision(Outcome.FAILED, "Pull request not found")

    pull = await gh.get_pull(repo, pr_number)
    head_sha = (pull.get("head") or {}).get("sha")

    actions.info(f"Finding {config.check_name} check")
    runs = await gh.list_check_runs_for_ref(repo, head_sha, config.check_name)
    run = next((r for r in runs if r.get("name") == config.check_name), None)
    if run is None:
        return Decision(Outcome.FAILED, "No matching check found", pr_number=pr_number)

    suite_id = run["check_suite"]["id"]
    return Decision(
        Outcome.RERUN_TRIGGERED,
        f"Re-triggering {config.check_name}",
        pr_number=pr_number,
        commands=[RerunCheckSuite(suite_id)],
    )


async def apply_commands(
    decision: Decision,
    gh: GitHubClient,
    gh_reviews: GitHubReviewsClient,
    repo: str,
):
    for cmd in decision.commands:
        if isinstance(cmd, RequestReviewers):
            actions.info(f"Requesting review from: {', '.join(cmd.reviewers)}")
            await gh_reviews.request_reviewers(repo, cmd.pr_number, cmd.reviewers)
        elif isinstance(cmd, RerunCheckSuite):
            actions.info(f"Re-running check suite {cmd.check_suite_id}")
            await gh.rerequest_check_suite(repo, cmd.check_suite_id)
        else:
            raise TypeError(f"Unknown command: {cmd!r}")
