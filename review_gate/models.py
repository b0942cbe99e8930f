from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Union


class Outcome(str, Enum):
    NOT_APPLICABLE = "NOT_APPLICABLE"
    APPROVED = "APPROVED"
    NEEDS_REVIEW = "NEEDS_REVIEW"
    RERUN_TRIGGERED = "RERUN_TRIGGERED"
    FAILED = "FAILED"


PASSING_OUTCOMES = {Outcome.NOT_APPLICABLE, Outcome.APPROVED, Outcome.RERUN_TRIGGERED}


@dataclass(frozen=True)
class ReviewRecord:
    reviewer: str
    state: str
    commit_id: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> Optional["ReviewRecord"]:
        """
        Build a record from a GitHub review object.
        Returns None for reviews left by deleted accounts (user is null).
        """
        user = data.get("user") or {}
        login = user.get("login")
        if not login:
            return None
        return cls(
            reviewer=login,
            state=str(data.get("state", "")).upper(),
            commit_id=data.get("commit_id"),
        )


@dataclass(frozen=True)
class TeamMembership:
    slug: str
    members: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class RequestReviewers:
    pr_number: int
    reviewers: List[str]


@dataclass(frozen=True)
class RerunCheckSuite:
    check_suite_id: int


Command = Union[RequestReviewers, RerunCheckSuite]


@dataclass
class Decision:
    outcome: Outcome
    message: str
    reviewers_to_request: List[str] = field(default_factory=list)
    pr_number: Optional[int] = None
    commands: List[Command] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.outcome in PASSING_OUTCOMES

    def to_report(self) -> Dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "passed": self.passed,
            "message": self.message,
            "pr_number": self.pr_number,
            "reviewers_requested": list(self.reviewers_to_request),
        }


@dataclass(frozen=True)
class GateConfig:
    org: str
    team_slug: str = ""
    file_name_match: str = "app/modules/Common"
    core_reviewers: List[str] = field(default_factory=list)
    additional_reviewers: List[str] = field(default_factory=list)
    need_review_on_latest_commit: bool = True
    check_name: str = "FrontendReviewCheck"

    @property
    def team_label(self) -> str:
        # "frontend" -> "Frontend-Team"
        if not self.team_slug:
            return "Review-Team"
        return f"{self.team_slug.capitalize()}-Team"
