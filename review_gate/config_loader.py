# review_gate/config_loader.py
import json
import os
from typing import Any, Dict

import yaml

DEFAULT_CONFIG_PATHS = [".review-gate.yml", ".review-gate.yaml"]


def load_repo_config(base_dir: str = ".") -> Dict[str, Any]:
    """
    Load repo-level YAML config if present.
    Returns a dict (empty if not found or invalid).
    """
    for path in DEFAULT_CONFIG_PATHS:
        full = os.path.join(base_dir, path)
        if os.path.exists(full):
            try:
                with open(full, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f)
                if isinstance(data, dict):
                    return data
            except (OSError, yaml.YAMLError):
                # Non-fatal: just ignore malformed files
                return {}
    return {}


def load_event_payload(path: str) -> Dict[str, Any]:
    """
    Load the webhook payload GitHub Actions writes to GITHUB_EVENT_PATH.
    Missing or unreadable files yield an empty payload.
    """
    if not path or not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}
