from typing import Dict, List, Optional
import httpx

from review_gate.services.github import DEFAULT_API_URL


class GitHubReviewsClient:
    """
    Pull request reviews: reading review history and requesting reviewers.
    """
    def __init__(self, token: str, base_url: Optional[str] = None):
        self.token = token
        self.base_url = (base_url or DEFAULT_API_URL).rstrip("/")

    def _headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self.token}",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    async def list_reviews(self, repo: str, pull_number: int) -> List[Dict]:
        """
        GET /repos/{owner}/{repo}/pulls/{pull_number}/reviews
        Reviews come back in chronological order, one entry per submission.
        """
        url = f"{self.base_url}/repos/{repo}/pulls/{pull_number}/reviews"
        reviews: List[Dict] = []
        async with httpx.AsyncClient(timeout=30) as client:
            page = 1
            while True:
                r = await client.get(
                    url, headers=self._headers(), params={"per_page": 100, "page": page}
                )
                r.raise_for_status()
                chunk = r.json()
                reviews.extend(chunk)
                if len(chunk) < 100:
                    break
                page += 1
        return reviews

    async def request_reviewers(
        self, repo: str, pull_number: int, reviewers: List[str]
    ) -> Dict:
        """
        POST /repos/{owner}/{repo}/pulls/{pull_number}/requested_reviewers
        GitHub rejects the request (422) if it names the PR author.
        """
        url = f"{self.base_url}/repos/{repo}/pulls/{pull_number}/requested_reviewers"
        async with httpx.AsyncClient(timeout=30) as client:
            r = await client.post(url, headers=self._headers(), json={"reviewers": reviewers})
            r.raise_for_status()
            return r.json()
