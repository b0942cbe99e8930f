from review_gate.events import ChangeEvent, PullRequestEvent, PushEvent, ReviewSubmittedEvent
from review_gate.gate import evaluate_pull_request, evaluate_push, evaluate_review_submitted
from review_gate.models import Decision, GateConfig
from review_gate.services.github import GitHubClient
from review_gate.services.github_reviews import GitHubReviewsClient


async def route_event(
    event: ChangeEvent,
    gh: GitHubClient,
    gh_reviews: GitHubReviewsClient,
    config: GateConfig,
) -> Decision:
    """Run the workflow that matches the event type."""
    repo = event.repository
    if isinstance(event, ReviewSubmittedEvent):
        return await evaluate_review_submitted(gh, repo, event.pr_number, config)
    if isinstance(event, PushEvent):
        return await evaluate_push(gh, gh_reviews, repo, event.head_sha, config)
    if isinstance(event, PullRequestEvent):
        return await evaluate_pull_request(gh, gh_reviews, repo, event.pr_number, config)
    raise TypeError(f"Unsupported event: {event!r}")
