"""GitHub user and repository lookups via the public REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union

from arisa.cache.lookup_cache import LookupCache
from arisa.datatypes.lookup_datatypes import GitHubRepo, GitHubUser
from arisa.errors import FetchError, InvalidFormat
from arisa.services.http_client import HttpClient, HttpStatusError

API_URL = "https://api.github.com"
_URL_PREFIXES = ("https://github.com/", "http://github.com/", "github.com/")

GitHubRecord = Union[GitHubUser, GitHubRepo]


def parse_github_input(raw: str) -> Tuple[str, Optional[str]]:
    """Split ``user``, ``user/repo`` or a github.com URL into (user, repo).

    Raises
    ------
    InvalidFormat
        When no user name can be extracted.
    """
    text = raw.strip()
    for prefix in _URL_PREFIXES:
        if text.startswith(prefix):
            text = text[len(prefix):]
            break
    text = text.rstrip("/")

    parts = text.split("/")
    user = parts[0]
    if not user or " " in user:
        raise InvalidFormat("Expected a GitHub username, owner/repository, or github.com URL")
    repo = parts[1] if len(parts) == 2 and parts[1] else None
    return user, repo


def _headers(token: Optional[str]) -> Dict[str, str]:
    headers = {"Accept": "application/vnd.github+json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def parse_user(payload: Dict[str, Any]) -> GitHubUser:
    return GitHubUser(
        login=payload["login"],
        avatar_url=payload.get("avatar_url", ""),
        public_repos=int(payload.get("public_repos") or 0),
        public_gists=int(payload.get("public_gists") or 0),
        followers=int(payload.get("followers") or 0),
        following=int(payload.get("following") or 0),
        created_at=payload.get("created_at"),
        name=payload.get("name"),
        bio=payload.get("bio"),
        company=payload.get("company"),
        location=payload.get("location"),
        blog=payload.get("blog") or None,
    )


def parse_repo(payload: Dict[str, Any]) -> GitHubRepo:
    license_info = payload.get("license") or {}
    return GitHubRepo(
        full_name=payload["full_name"],
        owner=(payload.get("owner") or {}).get("login", payload["full_name"].split("/")[0]),
        html_url=payload.get("html_url", ""),
        default_branch=payload.get("default_branch", "main"),
        description=payload.get("description"),
        language=payload.get("language"),
        license_name=license_info.get("name"),
        stargazers_count=int(payload.get("stargazers_count") or 0),
        forks_count=int(payload.get("forks_count") or 0),
        watchers_count=int(payload.get("watchers_count") or 0),
        open_issues_count=int(payload.get("open_issues_count") or 0),
        size=int(payload.get("size") or 0),
        created_at=payload.get("created_at"),
        updated_at=payload.get("updated_at"),
        topics=tuple(payload.get("topics") or ()),
        is_private=bool(payload.get("private")),
        fork=bool(payload.get("fork")),
        archived=bool(payload.get("archived")),
        disabled=bool(payload.get("disabled")),
    )


async def fetch_user(http: HttpClient, user: str, token: Optional[str] = None) -> GitHubUser:
    try:
        payload = await http.get_json(f"{API_URL}/users/{user}", headers=_headers(token))
    except HttpStatusError as exc:
        if exc.status == 404:
            raise FetchError(f"Could not find GitHub user: {user}") from exc
        raise
    try:
        return parse_user(payload)
    except (KeyError, TypeError, ValueError) as exc:
        raise FetchError(f"Unexpected GitHub response for user {user}") from exc


async def fetch_repo(http: HttpClient, user: str, repo: str, token: Optional[str] = None) -> GitHubRepo:
    try:
        payload = await http.get_json(f"{API_URL}/repos/{user}/{repo}", headers=_headers(token))
    except HttpStatusError as exc:
        if exc.status == 404:
            raise FetchError(f"Could not find repository: {user}/{repo}") from exc
        raise
    try:
        return parse_repo(payload)
    except (KeyError, TypeError, ValueError) as exc:
        raise FetchError(f"Unexpected GitHub response for {user}/{repo}") from exc


async def lookup_github(
    cache: LookupCache[GitHubRecord], http: HttpClient, raw: str, token: Optional[str] = None
) -> GitHubRecord:
    user, repo = parse_github_input(raw)
    if repo:
        return await cache.get_or_fetch(f"repo:{user}/{repo}", lambda: fetch_repo(http, user, repo, token))
    return await cache.get_or_fetch(f"user:{user}", lambda: fetch_user(http, user, token))


# -------------------- Formatting --------------------

def _long_date(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%B %d, %Y")
    except ValueError:
        return None


def format_user(user: GitHubUser) -> Tuple[str, str]:
    lines: List[str] = []
    if user.name:
        lines.append(f"**Name:** {user.name}")
    lines.append(f"**Username:** {user.login}")
    lines.append(f"**Public Repos:** {user.public_repos}")
    lines.append(f"**Followers:** {user.followers} | **Following:** {user.following}")
    lines.append(f"**Public Gists:** {user.public_gists}")
    if user.bio:
        lines.append(f"**Bio:** {user.bio}")
    if user.company:
        lines.append(f"**Company:** {user.company}")
    if user.location:
        lines.append(f"**Location:** {user.location}")
    if user.blog:
        lines.append(f"**Website:** {user.blog}")
    if joined := _long_date(user.created_at):
        lines.append(f"**Joined:** {joined}")
    lines.append(f"**Profile:** https://github.com/{user.login}")
    return f"GitHub User: {user.login}", "\n".join(lines)


def format_repo(repo: GitHubRepo) -> Tuple[str, str]:
    lines: List[str] = [
        f"**Owner:** {repo.owner}",
        f"**Stars:** {repo.stargazers_count} | **Forks:** {repo.forks_count} | **Watchers:** {repo.watchers_count}",
        f"**Open Issues:** {repo.open_issues_count}",
        f"**Size:** {repo.size} KB",
    ]
    if repo.language:
        lines.append(f"**Language:** {repo.language}")
    if repo.license_name:
        lines.append(f"**License:** {repo.license_name}")
    lines.append(f"**Default Branch:** {repo.default_branch}")
    if repo.topics:
        lines.append(f"**Topics:** {', '.join(repo.topics)}")
    if repo.status_flags:
        lines.append(f"**Status:** {' | '.join(repo.status_flags)}")
    if created := _long_date(repo.created_at):
        lines.append(f"**Created:** {created}")
    if updated := _long_date(repo.updated_at):
        lines.append(f"**Last Updated:** {updated}")
    lines.append(f"**Repository:** {repo.html_url}")

    body = "\n".join(lines)
    if repo.description:
        body = f"**Description:** {repo.description}\n\n{body}"
    return f"Repository: {repo.full_name}", body
