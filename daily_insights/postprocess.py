"""
Clean-up of model output before it is stored and rendered.
"""

import re

DEFAULT_TITLE = "Daily Insight"

_LIST_TAGS = re.compile(r"</?(ul|ol|li)[^>]*>", re.IGNORECASE)
_BULLETS = re.compile(r"^\s*[-•]\s+", re.MULTILINE)
_TAGS = re.compile(r"<[^>]*>")


def sanitize_generated_html(html: str) -> str:
    """Drops list markup, asterisks and leading bullet glyphs."""
    cleaned = _LIST_TAGS.sub("", html)
    cleaned = cleaned.replace("*", "")
    return _BULLETS.sub("", cleaned)


def derive_title(body: str, date: str) -> str:
    """Uses the first non-blank line, without tags, as the article title."""
    first_line = next((line for line in body.split("\n") if line.strip()), "")
    title = _TAGS.sub("", first_line).strip()
    return title or f"{DEFAULT_TITLE} – {date}"


def remove_title_from_body(html: str, title: str) -> str:
    """Strips a leading heading or plain line that repeats the title."""
    if not title or not title.strip():
        return html
    escaped = re.escape(title.strip())

    heading = re.compile(
        rf"^\s*<h[12][^>]*>\s*{escaped}\s*</h[12]>", re.IGNORECASE
    )
    cleaned = heading.sub("", html, count=1)

    # Blank lines before the title are kept
    plain_line = re.compile(
        rf"^(\s*?)[ \t]*{escaped}[ \t]*(\r?\n|$)", re.IGNORECASE
    )
    return plain_line.sub(lambda m: m.group(1), cleaned, count=1)
