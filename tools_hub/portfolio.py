"""
Static portfolio site generation.

Builds a deployable bundle (``index.html``, ``styles.css``, ``README.md``,
``netlify.toml``) from a GitHub profile and packs it as a zip archive.
All profile text is HTML-escaped before it lands in markup.
"""

from __future__ import annotations

import io
import zipfile
from html import escape
from typing import Any

_STYLES = """\
:root {
  --primary-color: #6d28d9;
  --bg-color: #111827;
  --text-color: #f3f4f6;
  --card-bg: #1f2937;
}

body {
  margin: 0;
  font-family: system-ui, -apple-system, sans-serif;
  background: var(--bg-color);
  color: var(--text-color);
  line-height: 1.6;
}

.container {
  max-width: 1100px;
  margin: 0 auto;
  padding: 0 2rem;
}

header {
  padding: 4rem 0 2rem;
  text-align: center;
}

.profile-image {
  width: 140px;
  height: 140px;
  border-radius: 50%;
  border: 4px solid var(--primary-color);
}

.tags {
  display: flex;
  flex-wrap: wrap;
  gap: 0.5rem;
}

.tag {
  background: var(--primary-color);
  padding: 0.25rem 0.75rem;
  border-radius: 999px;
  font-size: 0.875rem;
}

.project-grid {
  display: grid;
  grid-template-columns: repeat(auto-fill, minmax(300px, 1fr));
  gap: 1.5rem;
}

.project-card {
  background: var(--card-bg);
  padding: 1.5rem;
  border-radius: 0.75rem;
}

.project-footer {
  display: flex;
  justify-content: space-between;
}

.project-footer a {
  color: var(--primary-color);
}

footer {
  padding: 2rem 0;
  text-align: center;
  margin-top: 4rem;
}

@media (max-width: 768px) {
  .container {
    padding: 0 1rem;
  }

  h1 {
    font-size: 2rem;
  }

  .project-grid {
    grid-template-columns: 1fr;
  }
}
"""

_NETLIFY = """\
[build]
  publish = "."

[build.processing]
  skip_processing = false
[build.processing.html]
  pretty_urls = true
[build.processing.css]
  bundle = true
  minify = true
[build.processing.images]
  compress = true
"""

NO_DESCRIPTION = "No description available"


def _project_card(repo: dict[str, Any]) -> str:
    return (
        '        <div class="project-card">\n'
        f"          <h3>{escape(repo['name'] or '')}</h3>\n"
        f"          <p>{escape(repo.get('description') or NO_DESCRIPTION)}</p>\n"
        '          <div class="project-footer">\n'
        f"            <span>{escape(repo.get('language') or '')}</span>\n"
        f'            <a href="{escape(repo.get("url") or "#")}" target="_blank">View Project</a>\n'
        "          </div>\n"
        "        </div>"
    )


def render_html(data: dict[str, Any]) -> str:
    name = escape(data["name"])
    tags = "".join(f'<span class="tag">{escape(lang)}</span>' for lang in data["languages"])
    cards = "\n".join(_project_card(repo) for repo in data["repos"])
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{name}'s Portfolio</title>
  <link rel="stylesheet" href="styles.css">
</head>
<body>
  <header>
    <div class="container">
      <img src="{escape(data['avatar'])}" alt="Profile" class="profile-image">
      <h1>{name}</h1>
      <p class="bio">{escape(data['bio'])}</p>
      <p>{data['contributions']} stars across public projects</p>
    </div>
  </header>

  <main class="container">
    <section class="skills">
      <h2>Technologies</h2>
      <div class="tags">{tags}</div>
    </section>

    <section class="projects">
      <h2>Featured Projects</h2>
      <div class="project-grid">
{cards}
      </div>
    </section>
  </main>

  <footer>
    <div class="container">
      <p>Created with GitHub Tools Hub</p>
    </div>
  </footer>
</body>
</html>
"""


def render_readme(data: dict[str, Any]) -> str:
    lines = [
        f"# {data['name']}'s Portfolio",
        "",
        "This portfolio was generated using GitHub Tools Hub.",
        "",
        "## About Me",
        "",
        data["bio"] or "",
        "",
        "## Technologies",
        "",
        *(f"- {lang}" for lang in data["languages"]),
        "",
        "## Featured Projects",
    ]
    for repo in data["repos"]:
        lines += [
            "",
            f"### {repo['name']}",
            repo.get("description") or NO_DESCRIPTION,
            f"- Language: {repo.get('language') or 'n/a'}",
            f"- [View Project]({repo.get('url') or '#'})",
        ]
    return "\n".join(lines) + "\n"


def build_site(data: dict[str, Any]) -> dict[str, str]:
    """File name -> content for the deployable site."""
    return {
        "index.html": render_html(data),
        "styles.css": _STYLES,
        "README.md": render_readme(data),
        "netlify.toml": _NETLIFY,
    }


def zip_site(files: dict[str, str]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for name, content in sorted(files.items()):
            archive.writestr(name, content)
    return buffer.getvalue()
