"""Shared fixtures for html-content-editor tests."""

from __future__ import annotations

import pytest

from html_content_editor.config import Settings

SAMPLE_DOCUMENT = """\
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <title>Acme Widgets</title>
    <script>var tracking = true;</script>
    <style>body { color: red; }</style>
</head>
<body>
    <main>
        <img src="logo.png">
        <h1>Widgets for everyone</h1>
        <p>Hand made <strong>since</strong> 1999.</p>
        <div class="features">
            <div><h3>Fast</h3><p>Ships in a day</p></div>
            <div><h3>Cheap</h3><p>Half the price</p></div>
        </div>
    </main>
    <footer><p>&copy; 2024 Acme</p></footer>
    <noscript>Please enable JavaScript</noscript>
</body>
</html>
"""

PRODUCT_GRID = """\
<section>
    <h2>Products</h2>
    <div class="grid">
        <article><img src="1.png" alt="One"><h3>First</h3><p>Desc 1</p></article>
        <article><img src="2.png"><p>Desc 2</p><a href="/2">Buy two</a></article>
        <article><p>Only text</p><p>More</p></article>
    </div>
</section>
"""


@pytest.fixture()
def settings() -> Settings:
    """Settings with a short timeout for testing."""
    return Settings(fetch_timeout=5)


@pytest.fixture()
def sample_document() -> str:
    return SAMPLE_DOCUMENT


@pytest.fixture()
def product_grid() -> str:
    return PRODUCT_GRID
