"""Tests for tools_hub.portfolio — static site bundle and zip packing."""

import io
import zipfile

from tools_hub.portfolio import build_site, render_html, render_readme, zip_site

PROFILE = {
    "name": "Octo <Cat>",
    "bio": "Builds things & breaks them",
    "avatar": "https://avatars.example/octo.png",
    "repos": [
        {"name": "web", "description": None, "language": "TypeScript", "url": "https://github.com/octo/web"},
        {"name": "api", "description": "Backend <script>", "language": None, "url": None},
    ],
    "languages": ["TypeScript", "Python"],
    "contributions": 12,
}


def test_build_site_files():
    files = build_site(PROFILE)
    assert set(files) == {"index.html", "styles.css", "README.md", "netlify.toml"}
    assert 'publish = "."' in files["netlify.toml"]


def test_html_escapes_profile_text():
    html = render_html(PROFILE)
    assert "Octo &lt;Cat&gt;" in html
    assert "Builds things &amp; breaks them" in html
    assert "<script>" not in html
    assert "Backend &lt;script&gt;" in html


def test_html_lists_projects_and_languages():
    html = render_html(PROFILE)
    assert '<span class="tag">TypeScript</span>' in html
    assert "No description available" in html
    assert 'href="https://github.com/octo/web"' in html
    assert "12 stars across public projects" in html


def test_readme():
    readme = render_readme(PROFILE)
    assert readme.startswith("# Octo <Cat>'s Portfolio")
    assert "- Python" in readme
    assert "### api" in readme
    assert "- Language: n/a" in readme


def test_zip_site_round_trips_files():
    files = build_site(PROFILE)

    with zipfile.ZipFile(io.BytesIO(zip_site(files))) as archive:
        assert sorted(archive.namelist()) == sorted(files)
        assert archive.read("index.html").decode() == files["index.html"]
