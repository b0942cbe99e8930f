"""
Change events parsed once from the GitHub Actions context.

    pull_request / pull_request_target   -> PullRequestEvent
    check_suite / check_run (rerequested) -> PullRequestEvent (PR from the suite)
    push                                 -> PushEvent
    pull_request_review                  -> ReviewSubmittedEvent
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

PULL_REQUEST_EVENTS = {"pull_request", "pull_request_target"}
RERUN_EVENTS = {"check_suite", "check_run"}


@dataclass(frozen=True)
class PullRequestEvent:
    owner: str
    repo: str
    head_sha: str
    pr_number: Optional[int] = None
    action: str = ""

    @property
    def repository(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class PushEvent:
    owner: str
    repo: str
    head_sha: str
    pr_number: Optional[int] = None

    @property
    def repository(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class ReviewSubmittedEvent:
    owner: str
    repo: str
    head_sha: str
    pr_number: Optional[int] = None
    action: str = ""

    @property
    def repository(self) -> str:
        return f"{self.owner}/{self.repo}"


ChangeEvent = Union[PullRequestEvent, PushEvent, ReviewSubmittedEvent]


def _split_repository(repository: Optional[str], payload: Dict[str, Any]):
    if not repository:
        repository = (payload.get("repository") or {}).get("full_name") or ""
    owner, _, repo = repository.partition("/")
    return owner, repo


def _rerun_pull_request(event_name: str, payload: Dict[str, Any]) -> Optional[Dict]:
    # re-run invocations carry the PR list on the check suite
    if payload.get("action") != "rerequested":
        return None
    suite = payload.get("check_suite")
    if event_name == "check_run":
        suite = (payload.get("check_run") or {}).get("check_suite")
    pulls = (suite or {}).get("pull_requests") or []
    return pulls[0] if pulls else None


def parse_event(
    event_name: str,
    payload: Dict[str, Any],
    repository: Optional[str] = None,
    sha: str = "",
) -> Optional[ChangeEvent]:
    """Build the ChangeEvent for this run, or None for unsupported events."""
    owner, repo = _split_repository(repository, payload)
    action = payload.get("action") or ""

    if event_name in PULL_REQUEST_EVENTS or event_name in RERUN_EVENTS:
        pull = payload.get("pull_request")
        if not pull and event_name in RERUN_EVENTS:
            pull = _rerun_pull_request(event_name, payload)
        head_sha = ((pull or {}).get("head") or {}).get("sha") or sha
        return PullRequestEvent(
            owner=owner,
            repo=repo,
            head_sha=head_sha,
            pr_number=(pull or {}).get("number"),
            action=action,
        )

    if event_name == "push":
        return PushEvent(owner=owner, repo=repo, head_sha=payload.get("after") or sha)

    if event_name == "pull_request_review":
        pull = payload.get("pull_request") or {}
        return ReviewSubmittedEvent(
            owner=owner,
            repo=repo,
            head_sha=(pull.get("head") or {}).get("sha") or sha,
            pr_number=pull.get("number"),
            action=action,
        )

    return None


def event_kind(event: ChangeEvent) -> str:
    if isinstance(event, PullRequestEvent):
        return "pull_request"
    if isinstance(event, PushEvent):
        return "push"
    if isinstance(event, ReviewSubmittedEvent):
        return "review_submitted"
    raise TypeError(f"Unsupported event: {event!r}")
