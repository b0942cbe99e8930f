from typing import Any, Dict, List, Optional
import httpx

DEFAULT_API_URL = "https://api.github.com"


class GitHubClient:
    def __init__(self, token: str, base_url: Optional[str] = None):
        self.token = token
        self.base_url = (base_url or DEFAULT_API_URL).rstrip("/")

    def _headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self.token}",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    async def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        async with httpx.AsyncClient(timeout=30) as client:
            r = await client.get(url, headers=self._headers(), params=params)
            r.raise_for_status()
            return r.json()

    async def _get_paginated(self, url: str) -> List[Dict]:
        items: List[Dict] = []
        async with httpx.AsyncClient(timeout=30) as client:
            page = 1
            while True:
                r = await client.get(
                    url, headers=self._headers(), params={"per_page": 100, "page": page}
                )
                r.raise_for_status()
                chunk = r.json()
                items.extend(chunk)
                if len(chunk) < 100:
                    break
                page += 1
        return items

    async def list_pr_files(self, repo: str, pr_number: int) -> List[Dict]:
        url = f"{self.base_url}/repos/{repo}/pulls/{pr_number}/files"
        return await self._get_paginated(url)

    async def get_pull(self, repo: str, pr_number: int) -> Dict:
        return await self._get(f"{self.base_url}/repos/{repo}/pulls/{pr_number}")

    async def list_pulls_for_commit(self, repo: str, sha: str) -> List[Dict]:
        """Pull requests (open and closed) whose head contains `sha`."""
        url = f"{self.base_url}/repos/{repo}/commits/{sha}/pulls"
        return await self._get_paginated(url)

    async def get_team_by_slug(self, org: str, team_slug: str) -> Dict:
        return await self._get(f"{self.base_url}/orgs/{org}/teams/{team_slug}")

    async def list_team_members(self, team_id: int) -> List[Dict]:
        return await self._get_paginated(f"{self.base_url}/teams/{team_id}/members")

    async def list_check_runs_for_ref(
        self, repo: str, ref: str, check_name: Optional[str] = None
    ) -> List[Dict]:
        url = f"{self.base_url}/repos/{repo}/commits/{ref}/check-runs"
        params: Dict[str, Any] = {"per_page": 100}
        if check_name:
            params["check_name"] = check_name
        data = await self._get(url, params=params)
        return data.get("check_runs", [])

    async def rerequest_check_suite(self, repo: str, check_suite_id: int) -> None:
        """
        POST /repos/{owner}/{repo}/check-suites/{id}/rerequest
        GitHub answers 201 with an empty body; the re-run itself is not awaited.
        """
        url = f"{self.base_url}/repos/{repo}/check-suites/{check_suite_id}/rerequest"
        async with httpx.AsyncClient(timeout=30) as client:
            r = await client.post(url, headers=self._headers())
            r.raise_for_status()
