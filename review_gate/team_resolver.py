from typing import Optional

import httpx

from review_gate import actions
from review_gate.models import TeamMembership
from review_gate.services.github import GitHubClient


async def resolve_members(
    gh: GitHubClient, org: str, team_slug: str
) -> Optional[TeamMembership]:
    """
    Resolve a team slug to its current members.

    Returns None when no slug is configured (no API call is made) or when the
    organization has no such team. A team that exists but has nobody in it
    comes back as a TeamMembership with an empty member set; callers treat
    that as a misconfiguration, unlike the None case.
    """
    if not team_slug:
        return None

    try:
        team = await gh.get_team_by_slug(org, team_slug)
    except httpx.HTTPStatusError as e:
        if e.response.status_code != 404:
            raise
        actions.warning(f"Team '{team_slug}' not found in {org}; only additional-reviewers can approve")
        return None
    if not team:
        return None

    members = await gh.list_team_members(team["id"])
    logins = frozenset(m["login"] for m in members if m.get("login"))
    return TeamMembership(slug=team_slug, members=logins)
