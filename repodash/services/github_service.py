import base64
import binascii
from typing import Any

import structlog

from repodash.core.client import get_http_client

logger = structlog.get_logger('github_service')


class GitHubService:
    """
    Thin client for the four GitHub REST endpoints a snapshot needs.

    Every method raises requests.RequestException on transport errors and
    non-2xx responses; deciding what a failure means is left to the caller.
    """

    def __init__(
        self,
        token: str | None = None,
        api_base_url: str = 'https://api.github.com',
        per_page: int = 100,
        timeout: int = 20,
    ):
        self.api_base_url = api_base_url.rstrip('/')
        self.per_page = per_page
        self.timeout = timeout
        self.session = get_http_client()
        self.session.headers.update({
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'repodash',
        })
        if token:
            self.session.headers.update({'Authorization': f"Bearer {token}"})

    def _get_json(self, url: str, params: dict | None = None) -> Any:
        response = self.session.get(url, params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def _get_object(self, url: str, params: dict | None = None) -> dict[str, Any]:
        data = self._get_json(url, params=params)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object from {url}, got {type(data).__name__}")
        return data

    def _get_objects(self, url: str, params: dict | None = None, key: str | None = None) -> list[dict[str, Any]]:
        """JSON array of objects, either the whole body or the list under `key`."""
        if key:
            items = self._get_object(url, params=params).get(key) or []
        else:
            items = self._get_json(url, params=params)
        if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
            raise ValueError(f"Expected a JSON array of objects from {url}")
        return items

    def get_repository(self, owner: str, repo: str) -> dict[str, Any]:
        """GET /repos/{owner}/{repo}"""
        return self._get_object(f"{self.api_base_url}/repos/{owner}/{repo}")

    def get_releases(self, owner: str, repo: str) -> list[dict[str, Any]]:
        """First page of releases only; older releases are not followed."""
        url = f"{self.api_base_url}/repos/{owner}/{repo}/releases"
        return self._get_objects(url, params={'per_page': str(self.per_page)})

    def get_workflow_runs(self, owner: str, repo: str) -> list[dict[str, Any]]:
        """First page of completed workflow runs, across all workflows and branches."""
        url = f"{self.api_base_url}/repos/{owner}/{repo}/actions/runs"
        params = {'per_page': str(self.per_page), 'status': 'completed'}
        return self._get_objects(url, params=params, key='workflow_runs')

    def get_file_content(self, owner: str, repo: str, path: str) -> str:
        """Fetch a file through the contents API and decode its base64 payload."""
        url = f"{self.api_base_url}/repos/{owner}/{repo}/contents/{path}"
        # A directory path comes back as a listing, which _get_object rejects
        data = self._get_object(url)
        content = data.get('content')
        if not content or not isinstance(content, str):
            raise ValueError(f"No content returned for {owner}/{repo}/{path}")
        logger.debug(
            'Decoding file content',
            repo=f"{owner}/{repo}", path=path, encoding=data.get('encoding'),
        )
        try:
            return base64.b64decode(content).decode('utf-8')
        except (binascii.Error, UnicodeDecodeError) as e:
            raise ValueError(
                f"Undecodable content for {owner}/{repo}/{path}: {e}",
            )
