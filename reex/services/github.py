import logging
import time
from dataclasses import dataclass
from typing import Dict, List, Optional
from urllib.parse import urlparse

import requests

from reex.core.exceptions import InvalidUrlError, ReadmeNotFoundError

logger = logging.getLogger(__name__)

__all__ = ["GitHubRepoInfo", "GitHubService", "parse_github_url", "README_CANDIDATES", "KEY_FILES"]

GITHUB_HOST = "github.com"

# Order matters: some repositories carry different READMEs on both branches.
README_CANDIDATES = [
    "main/README.md",
    "master/README.md",
    "main/readme.md",
    "master/readme.md",
]

FILE_BRANCHES = ["main", "master"]

# Manifests, lockfiles and build configs worth showing the model
KEY_FILES = [
    "package.json",
    "requirements.txt",
    "pyproject.toml",
    "setup.py",
    "Pipfile",
    "Cargo.toml",
    "go.mod",
    "pom.xml",
    "build.gradle",
    "Gemfile",
    "composer.json",
    "Dockerfile",
    "docker-compose.yml",
    "Makefile",
    "tsconfig.json",
    "vite.config.ts",
    "webpack.config.js",
]


@dataclass(frozen=True)
class GitHubRepoInfo:
    owner: str
    repo: str
    url: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


def parse_github_url(url: str) -> GitHubRepoInfo:
    """
    Extracts owner and repository name from a GitHub repository URL.

    Purely syntactic, no network access. Owner and repo are the first two
    non-empty path segments, returned exactly as written.

    Raises:
        InvalidUrlError: If the URL is malformed, not on github.com, or lacks
            an owner/repo path.
    """
    try:
        parsed = urlparse(url.strip())
        hostname = parsed.hostname
    except (AttributeError, ValueError) as e:
        raise InvalidUrlError() from e

    if parsed.scheme not in ("http", "https") or not hostname:
        raise InvalidUrlError()
    if hostname != GITHUB_HOST:
        raise InvalidUrlError("URL must be from github.com")

    path_parts = [part for part in parsed.path.split("/") if part]
    if len(path_parts) < 2:
        raise InvalidUrlError("Invalid GitHub repository URL format")

    return GitHubRepoInfo(owner=path_parts[0], repo=path_parts[1], url=url)


class GitHubService:
    """
    Best-effort access to GitHub metadata and raw file content.

    Only the README lookup is allowed to fail the request; the existence check
    fails closed, and structure/key-file lookups degrade to empty results.
    """
    def __init__(
        self,
        api_url: str = "https://api.github.com",
        raw_url: str = "https://raw.githubusercontent.com",
        token: Optional[str] = None,
        timeout: float = 10.0,
        max_tree_entries: int = 100,
        max_file_chars: int = 10000,
        key_files_budget: Optional[float] = 20.0,
        session=None,
    ):
        self.api_url = api_url.rstrip("/")
        self.raw_url = raw_url.rstrip("/")
        self.timeout = timeout
        self.max_tree_entries = max_tree_entries
        self.max_file_chars = max_file_chars
        self.key_files_budget = key_files_budget
        # Module-level requests calls open a fresh session each time, so worker threads share nothing
        self.session = session or requests

        self.api_headers = {"Accept": "application/vnd.github+json"}
        if token:
            self.api_headers["Authorization"] = f"Bearer {token}"

        logger.info(f"Initializing GitHubService with api_url='{self.api_url}', raw_url='{self.raw_url}'")

    def check_exists(self, owner: str, repo: str) -> bool:
        """Returns True only when the repository metadata lookup succeeds."""
        url = f"{self.api_url}/repos/{owner}/{repo}"
        try:
            response = self.session.get(url, headers=self.api_headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"Existence check for {owner}/{repo} failed: {e}")
            return False

        if not response.ok:
            logger.info(f"Repository {owner}/{repo} not accessible (status {response.status_code})")
        return response.ok

    def fetch_readme(self, owner: str, repo: str) -> str:
        """
        Returns the first non-empty README found among README_CANDIDATES.

        Raises:
            ReadmeNotFoundError: If every candidate fails or is empty.
        """
        for candidate in README_CANDIDATES:
            content = self._fetch_raw(f"{self.raw_url}/{owner}/{repo}/{candidate}")
            if content is not None and content.strip():
                logger.info(f"Fetched README for {owner}/{repo} from {candidate} ({len(content)} chars)")
                return content
            logger.debug(f"README candidate {candidate} unavailable for {owner}/{repo}")

        logger.warning(f"No README found for {owner}/{repo}")
        raise ReadmeNotFoundError()

    def fetch_structure(self, owner: str, repo: str) -> str:
        """
        Returns up to ``max_tree_entries`` file paths from the recursive tree of
        the default branch, one per line. Empty string on any failure.
        """
        url = f"{self.api_url}/repos/{owner}/{repo}/git/trees/HEAD"
        try:
            response = self.session.get(
                url,
                headers=self.api_headers,
                params={"recursive": "1"},
                timeout=self.timeout,
            )
            if not response.ok:
                logger.info(f"Tree listing for {owner}/{repo} unavailable (status {response.status_code})")
                return ""
            tree = response.json().get("tree", [])
        except (requests.RequestException, ValueError, AttributeError) as e:
            logger.warning(f"Failed to fetch structure for {owner}/{repo}: {e}")
            return ""

        paths: List[str] = [
            entry["path"]
            for entry in tree
            if isinstance(entry, dict) and entry.get("type") == "blob" and entry.get("path")
        ]
        return "\n".join(paths[:self.max_tree_entries])

    def fetch_file(self, owner: str, repo: str, path: str) -> Optional[str]:
        """
        Fetches one file from the main branch, then master. Returns None when
        the file is missing, empty, or longer than ``max_file_chars``.
        """
        for branch in FILE_BRANCHES:
            content = self._fetch_raw(f"{self.raw_url}/{owner}/{repo}/{branch}/{path}")
            if content is None or not content.strip():
                continue
            if len(content) > self.max_file_chars:
                logger.debug(f"Skipping {path} for {owner}/{repo}: {len(content)} chars exceeds limit")
                return None
            return content
        return None

    def fetch_key_files(self, owner: str, repo: str) -> Dict[str, str]:
        """
        Fetches the KEY_FILES allowlist in order. Stops early once
        ``key_files_budget`` seconds have elapsed and returns what was found.
        """
        key_files: Dict[str, str] = {}
        deadline = None
        if self.key_files_budget is not None:
            deadline = time.monotonic() + self.key_files_budget
        for filename in KEY_FILES:
            if deadline is not None and time.monotonic() >= deadline:
                logger.warning(f"Key file budget exhausted for {owner}/{repo} before {filename}")
                break
            content = self.fetch_file(owner, repo, filename)
            if content is not None:
                key_files[filename] = content
        logger.info(f"Fetched {len(key_files)} key files for {owner}/{repo}")
        return key_files

    def _fetch_raw(self, url: str) -> Optional[str]:
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.debug(f"Request to {url} failed: {e}")
            return None
        if not response.ok:
            return None
        return response.text
