"""
GitHub ingestion client.
Fetches a single issue whose body carries the tracker export as JSON.
"""
import logging
from typing import Any, Dict, Optional

import requests

from .payload import IngestError, extract_records

logger = logging.getLogger(__name__)


class GitHubIssueClient:
    """Fetch the JSON rows stored in one GitHub issue body.

    No retry policy: a failed request surfaces as IngestError and the caller
    decides whether to try again on its next refresh.
    """

    def __init__(self, owner: str, repo: str, issue_number: int, token: Optional[str] = None, base_url: str = None, timeout: float = 30.0):
        self.owner = owner
        self.repo = repo
        self.issue_number = int(issue_number)
        self.token = token
        self.base_url = base_url or "https://api.github.com"
        self.timeout = timeout
        self.headers = {"Accept": "application/vnd.github+json", "Cache-Control": "no-store"}
        if self.token:
            self.headers["Authorization"] = f"Bearer {self.token}"

    @property
    def issue_url(self) -> str:
        return f"{self.base_url}/repos/{self.owner}/{self.repo}/issues/{self.issue_number}"

    def get_issue(self) -> Dict[str, Any]:
        try:
            resp = requests.get(self.issue_url, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as ex:
            logger.warning("GitHub request failed: %s", ex)
            raise IngestError(f"GitHub request failed: {ex}") from ex
        if resp.status_code == 404:
            raise IngestError("Issue not found. Check repository settings.")
        if resp.status_code != 200:
            raise IngestError(f"GitHub API error: {resp.status_code}")
        try:
            return resp.json()
        except ValueError as ex:
            raise IngestError(f"GitHub API returned a non-JSON response: {ex}") from ex

    def get_issue_body(self) -> str:
        return self.get_issue().get('body') or ''

    def fetch_records(self) -> Any:
        """Return the decoded rows from the issue body."""
        return extract_records(self.get_issue_body())
