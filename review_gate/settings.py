from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from review_gate import actions
from review_gate.config_loader import load_repo_config
from review_gate.models import GateConfig
from review_gate.reconciler import split_identities


def _input(name: str, *extra: str):
    # Actions exposes `with:` inputs as INPUT_<NAME> with hyphens kept
    env = name.upper().replace(" ", "_")
    return AliasChoices(f"INPUT_{env}", env.replace("-", "_"), *extra)


class Settings(BaseSettings):
    # --- Action inputs ---
    access_token: str = Field("", validation_alias=_input("access-token", "GITHUB_TOKEN"))
    org: str = Field("", validation_alias=_input("org"))
    review_team_slug: str = Field("", validation_alias=_input("review-team-slug"))
    core_reviewers: str = Field("", validation_alias=_input("core-reviewers"))
    additional_reviewers: str = Field("", validation_alias=_input("additional-reviewers"))
    file_name_match: str = Field(
        "app/modules/Common",
        validation_alias=_input("fileNameMatch", "INPUT_FILE-NAME-MATCH", "FILE_NAME_MATCH"),
    )
    need_review_on_latest_commit: bool = Field(
        True,
        validation_alias=_input(
            "needReviewOnLatestCommit",
            "INPUT_NEED-REVIEW-ON-LATEST-COMMIT",
            "NEED_REVIEW_ON_LATEST_COMMIT",
        ),
    )
    check_name: str = Field("FrontendReviewCheck", validation_alias=_input("check-name"))

    # --- Runner context ---
    github_repository: Optional[str] = None  # e.g., "octo-org/web-app"
    github_event_name: str = ""
    github_event_path: str = ""
    github_sha: str = ""
    github_api_url: str = "https://api.github.com"

    # --- CI summary ---
    enable_job_summary: bool = True
    summary_title: str = "Review Gate"

    # --- Pydantic settings ---
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
        validate_assignment=True,
    )

    @field_validator("file_name_match", "check_name", mode="before")
    @classmethod
    def _blank_uses_default(cls, v, info):
        if v is None or (isinstance(v, str) and not v.strip()):
            return cls.model_fields[info.field_name].default
        return v

    @field_validator("need_review_on_latest_commit", mode="before")
    @classmethod
    def _blank_is_true(cls, v):
        # unset action inputs arrive as empty strings
        if v is None or (isinstance(v, str) and not v.strip()):
            return True
        return v


def gate_config(s: Optional[Settings] = None) -> GateConfig:
    s = s or settings
    return GateConfig(
        org=s.org,
        team_slug=s.review_team_slug or "",
        file_name_match=s.file_name_match,
        core_reviewers=split_identities(s.core_reviewers),
        additional_reviewers=split_identities(s.additional_reviewers),
        need_review_on_latest_commit=s.need_review_on_latest_commit,
        check_name=s.check_name,
    )


# The repo file comes from the checked-out change, so it may only touch
# presentation. Gating inputs come from the workflow alone.
REPO_CONFIG_KEYS = {"summary_title", "enable_job_summary"}


def apply_repo_config(s: Settings, repo_conf: Dict[str, Any]) -> List[str]:
    """Overlay allowed repo-config keys onto `s`; returns the keys applied."""
    applied: List[str] = []
    for k, v in repo_conf.items():
        key = str(k).lower().replace("-", "_")
        if key not in REPO_CONFIG_KEYS:
            if hasattr(s, key):
                actions.warning(f"Ignoring '{k}' from repo config; set it as an action input")
            continue
        try:
            setattr(s, key, v)
        except ValidationError as e:
            actions.warning(f"Invalid value for '{k}' in repo config: {e.errors()[0]['msg']}")
            continue
        applied.append(key)
    return applied


# Initialize with env first
settings = Settings()

# Overlay with repo config if present
apply_repo_config(settings, load_repo_config())
