"""
Renderer module for article pages and the JSON archive.

This module provides the Renderer class which handles:
- Generating the HTML page for a single article
- Rendering the "recent insights" cards
- Serializing archive listings as JSON
"""

import json
import logging
from typing import List, Sequence

from daily_insights.models import ArchiveItem, StoredArticle
from daily_insights.postprocess import remove_title_from_body

logger = logging.getLogger(__name__)


def escape_html(text: str) -> str:
    """Escapes the five HTML-reserved characters."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#039;")
    )


def render_archive_json(items: Sequence[ArchiveItem]) -> str:
    """Serializes archive entries as indented JSON, preserving order."""
    return json.dumps(
        [{"date": i["date"], "title": i["title"], "topic": i["topic"]} for i in items],
        indent=2,
        ensure_ascii=False,
    )


class Renderer:
    """Builds the public HTML pages."""

    _PAGE_STYLES = """
      :root { color-scheme: dark; }
      body {
        font-family: system-ui, -apple-system, BlinkMacSystemFont, "SF Pro Text", sans-serif;
        margin: 0; padding: 0; line-height: 1.7;
        background: radial-gradient(circle at top, #020617, #020617 55%);
        color: #e5e7eb;
      }
      .page { max-width: 960px; margin: 2.5rem auto 3.5rem; padding: 0 1.5rem 0; }
      .article-body { max-width: 720px; margin: 0 auto; }
      header { margin-bottom: 2.5rem; }
      .site-title { font-size: 0.9rem; text-transform: uppercase; letter-spacing: 0.16em; opacity: 0.75; }
      h1 { font-size: 2.4rem; margin: 0.6rem 0 0.25rem; color: #f9fafb; }
      .meta { font-size: 0.9rem; opacity: 0.8; }
      main h2 { font-size: 1.4rem; margin-top: 2rem; color: #e5e7eb; }
      main p { margin: 0.9rem 0; }
      a { color: #93c5fd; text-decoration: none; }
      a:hover { text-decoration: underline; }
      .nav { display: flex; gap: 1rem; margin-top: 0.5rem; }
      .recent { margin-top: 3rem; padding-top: 2rem; border-top: 1px solid rgba(148, 163, 184, 0.35); }
      .recent-heading { font-size: 1.2rem; margin-bottom: 1rem; }
      .recent-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(220px, 1fr)); gap: 1rem; }
      .recent-card {
        display: block; padding: 0.9rem 1rem; border-radius: 0.75rem;
        background: radial-gradient(circle at top left, #111827, #020617);
        border: 1px solid rgba(148, 163, 184, 0.35);
      }
      .recent-card:hover { border-color: #60a5fa; }
      .recent-date { font-size: 0.8rem; opacity: 0.7; margin-bottom: 0.2rem; }
      .recent-title { font-size: 0.95rem; font-weight: 600; margin-bottom: 0.15rem; color: #e5e7eb; }
      .recent-topic { font-size: 0.85rem; opacity: 0.8; }
    """

    def __init__(self, site_title: str, home_url: str = "", recent_limit: int = 5):
        self.site_title = site_title
        self.home_url = home_url
        self.recent_limit = recent_limit

    def _render_recent(self, current_date: str, items: Sequence[ArchiveItem]) -> str:
        """Renders links to other recent articles, or nothing."""
        others = [i for i in items if i["date"] != current_date][: self.recent_limit]
        if not others:
            return ""

        cards = "".join(
            f"""
          <a class="recent-card" href="/article/{escape_html(item['date'])}">
            <div class="recent-date">{escape_html(item['date'])}</div>
            <div class="recent-title">{escape_html(item['title'])}</div>
            <div class="recent-topic">{escape_html(item['topic'])}</div>
          </a>"""
            for item in others
        )
        return f"""
        <section class="recent">
          <h2 class="recent-heading">Recent insights</h2>
          <div class="recent-grid">{cards}
          </div>
        </section>"""

    def _render_nav(self) -> str:
        links: List[str] = [
            '<a href="/">Latest</a>',
            '<a href="/archive">Archive (JSON)</a>',
        ]
        if self.home_url:
            label = self.home_url.split("//", 1)[-1].rstrip("/")
            links.append(
                f'<a href="{escape_html(self.home_url)}">{escape_html(label)}</a>'
            )
        return "\n          ".join(links)

    def render_article_page(
        self, article: StoredArticle, recent_articles: Sequence[ArchiveItem]
    ) -> str:
        """Generates the full HTML document for an article."""
        title = escape_html(article["title"])
        topic = escape_html(article["topic"])
        site_title = escape_html(self.site_title)
        # Body is model output already restricted at generation time
        body_html = remove_title_from_body(article["bodyHtml"], article["title"])

        return f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>{title} – {site_title}</title>
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <meta name="description" content="Daily insight from {site_title} on {topic}." />
    <style>{self._PAGE_STYLES}</style>
  </head>
  <body>
    <div class="page">
      <header>
        <div class="site-title">{site_title}</div>
        <h1>{title}</h1>
        <div class="meta">
          {escape_html(article['date'])} · Topic: {topic}
        </div>
        <div class="nav">
          {self._render_nav()}
        </div>
      </header>
      <main>
        <div class="article-body">
          {body_html}
        </div>{self._render_recent(article['date'], recent_articles)}
      </main>
    </div>
  </body>
</html>"""
