"""
GitHub data collection for the generators.

Turns raw REST payloads into the compact context each feature sends to the
model: a user's technology stack, repository analytics for documentation,
the file/dependency view for the visualizer, chat context, and portfolio
profile data. Tree listings are filtered so vendored, generated and binary
files never reach a prompt.
"""

from __future__ import annotations

import logging
from typing import Any

from tools_hub.github_client import GitHubClient

logger = logging.getLogger("tools_hub.collectors")


# ── Files to skip entirely ──────────────────────────────────────
_SKIP_DIRS = {
    "node_modules", "dist", "build", ".venv", "venv", "env",
    "__pycache__", ".git", ".idea", ".vscode", ".tox",
    ".mypy_cache", ".pytest_cache", ".eggs", "vendor",
    ".next", ".nuxt", "target", "out", "bin", "obj",
    "coverage", ".coverage", "htmlcov",
}

_SKIP_EXTENSIONS = {
    ".pyc", ".pyo", ".class", ".o", ".so", ".dll", ".dylib",
    ".exe", ".bin", ".dat", ".db", ".sqlite", ".sqlite3",
    ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".ico", ".svg", ".webp",
    ".mp3", ".mp4", ".avi", ".mov", ".wav", ".flac",
    ".zip", ".tar", ".gz", ".bz2", ".7z", ".rar",
    ".woff", ".woff2", ".ttf", ".eot", ".otf",
    ".min.js", ".min.css", ".map", ".lock",
}

_SKIP_FILES = {
    "package-lock.json", "yarn.lock", "pnpm-lock.yaml",
    "poetry.lock", "Pipfile.lock", "composer.lock",
    "Gemfile.lock", "Cargo.lock", "go.sum",
    ".DS_Store", "Thumbs.db",
}

LARGEST_FILES = 5


def filter_tree(tree: list[dict]) -> list[dict]:
    """Remove irrelevant entries from the tree listing."""
    filtered = []
    for node in tree:
        path: str = node.get("path", "")
        parts = path.split("/")

        if any(p.lower() in _SKIP_DIRS for p in parts):
            continue
        base = parts[-1]
        if base in _SKIP_FILES:
            continue
        if node.get("type") == "blob":
            lower = base.lower()
            if any(lower.endswith(ext) for ext in _SKIP_EXTENSIONS):
                continue

        filtered.append(node)

    return filtered


def largest_files(tree: list[dict], limit: int = LARGEST_FILES) -> list[dict]:
    """The *limit* biggest blobs, largest first."""
    blobs = [n for n in tree if n.get("type") == "blob"]
    blobs.sort(key=lambda n: n.get("size") or 0, reverse=True)
    return [{"path": n["path"], "size": n.get("size", 0)} for n in blobs[:limit]]


def package_dependencies(package: dict | None) -> dict[str, list[list[str]]]:
    """Production/development ``[name, version]`` pairs from a package.json."""
    if not package:
        return {"production": [], "development": []}
    return {
        "production": [[k, str(v)] for k, v in (package.get("dependencies") or {}).items()],
        "development": [[k, str(v)] for k, v in (package.get("devDependencies") or {}).items()],
    }


def summarize_repo(repo: dict) -> dict[str, Any]:
    """Keep only the repository fields a prompt needs."""
    return {
        "name": repo.get("name"),
        "description": repo.get("description"),
        "language": repo.get("language"),
        "size": repo.get("size"),
        "stars": repo.get("stargazers_count", 0),
        "forks": repo.get("forks_count", 0),
        "topics": repo.get("topics", []),
        "url": repo.get("html_url"),
    }


def distinct_languages(repos: list[dict]) -> list[str]:
    """Primary languages in first-seen order."""
    languages: list[str] = []
    for repo in repos:
        lang = repo.get("language")
        if lang and lang not in languages:
            languages.append(lang)
    return languages


# ── Aggregations ───────────────────────────────────────────────
async def analyze_stack(
    github: GitHubClient, token: str, username: str, *, max_repos: int
) -> dict[str, Any]:
    """Languages and npm dependencies across a user's repositories."""
    repos = await github.fetch_user_repos(token, username)

    technologies: list[str] = []
    for repo in repos[:max_repos]:
        package = await github.fetch_package_json(token, username, repo["name"])
        if not package:
            continue
        for dep in package.get("dependencies") or {}:
            if dep not in technologies:
                technologies.append(dep)

    logger.debug(
        "Scanned %d/%d repos of %s: %d dependencies",
        min(len(repos), max_repos), len(repos), username, len(technologies),
    )
    return {
        "languages": distinct_languages(repos),
        "technologies": technologies,
        "repoCount": len(repos),
    }


async def user_profile(github: GitHubClient, token: str, username: str) -> dict[str, Any]:
    """Profile plus compact repository list, for resumes."""
    user = await github.fetch_user(token, username)
    repos = await github.fetch_user_repos(token, username)
    return {
        "name": user.get("name") or user.get("login") or username,
        "bio": user.get("bio"),
        "publicRepos": user.get("public_repos", len(repos)),
        "followers": user.get("followers", 0),
        "languages": distinct_languages(repos),
        "repositories": [summarize_repo(r) for r in repos],
    }


async def portfolio_profile(
    github: GitHubClient, token: str, username: str, *, max_repos: int
) -> dict[str, Any]:
    user = await github.fetch_user(token, username)
    repos = await github.fetch_user_repos(token, username)
    return {
        "name": user.get("name") or user.get("login") or username,
        "bio": user.get("bio") or "",
        "avatar": user.get("avatar_url") or "",
        "repos": [summarize_repo(r) for r in repos[:max_repos]],
        "languages": distinct_languages(repos),
        "contributions": sum(r.get("stargazers_count", 0) for r in repos),
    }


async def analyze_repository(
    github: GitHubClient, token: str, owner: str, repo: str
) -> dict[str, Any]:
    """Repository analytics fed to the documentation generator."""
    info = await github.fetch_repo(token, owner, repo)
    languages = await github.fetch_languages(token, owner, repo)
    tree = await github.fetch_tree(
        token, owner, repo, info.get("default_branch") or "main"
    )
    package = await github.fetch_package_json(token, owner, repo)

    files = filter_tree(tree)
    return {
        "info": {
            "name": info.get("name"),
            "fullName": info.get("full_name"),
            "description": info.get("description"),
            "homepage": info.get("homepage"),
            "topics": info.get("topics", []),
            "defaultBranch": info.get("default_branch"),
        },
        "codeQuality": {
            "openIssues": info.get("open_issues_count", 0),
            "hasWorkflows": any(
                n.get("path", "").startswith(".github/workflows/") for n in tree
            ),
            "hasLicense": bool(info.get("license")),
            "hasDescription": bool(info.get("description")),
        },
        "insights": {
            "stars": info.get("stargazers_count", 0),
            "forks": info.get("forks_count", 0),
            "watchers": info.get("watchers_count", 0),
            "lastUpdate": info.get("updated_at"),
        },
        "dependencies": package_dependencies(package),
        "languages": languages,
        "largestFiles": largest_files(files),
        "fileTree": [n["path"] for n in files if n.get("type") == "blob"],
    }


async def repository_structure(
    github: GitHubClient, token: str, owner: str, repo: str
) -> dict[str, Any]:
    """File list and dependencies for the codebase visualizer."""
    info = await github.fetch_repo(token, owner, repo)
    tree = await github.fetch_tree(
        token, owner, repo, info.get("default_branch") or "main"
    )

    package = None
    if any(n.get("path") == "package.json" for n in tree):
        package = await github.fetch_package_json(token, owner, repo)

    dependencies: dict[str, Any] = {}
    if package:
        dependencies = {
            "dependencies": package.get("dependencies") or {},
            "devDependencies": package.get("devDependencies") or {},
        }

    return {
        "files": [n["path"] for n in filter_tree(tree)],
        "dependencies": dependencies,
        "path": f"{owner}/{repo}",
    }


async def chat_context(
    github: GitHubClient, token: str, owner: str, repo: str, *, commit_count: int
) -> dict[str, Any]:
    """Name, description, languages and recent commits for the chatbot."""
    info = await github.fetch_repo(token, owner, repo)
    languages = await github.fetch_languages(token, owner, repo)
    commits = await github.fetch_commits(token, owner, repo)

    return {
        "name": info.get("name") or repo,
        "description": info.get("description"),
        "languages": languages,
        "lastCommits": [
            {
                "message": c.get("commit", {}).get("message", ""),
                "date": c.get("commit", {}).get("author", {}).get("date"),
            }
            for c in commits[:commit_count]
        ],
    }
