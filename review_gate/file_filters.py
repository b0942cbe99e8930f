from typing import Sequence


def is_reviewable(paths: Sequence[str], pattern: str) -> bool:
    """
    True when at least one changed path contains `pattern`.

    Plain substring containment: no glob semantics, no anchoring and no
    path-separator awareness ("app/modules/Common" also matches
    "app/modules/CommonUtils/x.ts").
    """
    if not paths:
        return False
    return any(pattern in (path or "") for path in paths)
