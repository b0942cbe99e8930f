from typing import Iterable, List, Optional, Sequence

from review_gate.models import ReviewRecord

APPROVED = "APPROVED"


def split_identities(value: Optional[str]) -> List[str]:
    """
    Split a comma-separated identity list exactly on ",".
    A value without commas is a single identity. Entries are not trimmed;
    empty entries are dropped.
    """
    if not value:
        return []
    return [v for v in value.split(",") if v]


def approved_reviewers(
    reviews: Sequence[ReviewRecord], head_sha: Optional[str] = None
) -> List[str]:
    """
    Logins with at least one APPROVED review, in first-approval order.
    With `head_sha`, only approvals recorded against that exact commit count.
    """
    out: List[str] = []
    for r in reviews:
        if r.state != APPROVED:
            continue
        if head_sha is not None and r.commit_id != head_sha:
            continue
        if r.reviewer not in out:
            out.append(r.reviewer)
    return out


def is_approved(
    reviews: Sequence[ReviewRecord],
    required_reviewers: Iterable[str],
    head_sha: Optional[str] = None,
    additional_reviewers: Iterable[str] = (),
) -> bool:
    # one approval from anyone in the qualifying set is enough
    approved = set(approved_reviewers(reviews, head_sha))
    qualifying = set(required_reviewers) | set(additional_reviewers)
    return bool(approved & qualifying)
