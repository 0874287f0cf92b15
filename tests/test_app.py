"""Tests for the HTTP routes."""

import datetime
import json
import unittest
from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from daily_insights.app import create_app
from daily_insights.config import DEFAULT_CONFIG, load_settings
from daily_insights.services.kv import InMemoryKVStore


def make_settings():
    config = dict(
        DEFAULT_CONFIG,
        site_title="Test Insights",
        topics=[f"topic {i}" for i in range(8)],
    )
    return load_settings(config=config, environ={"KV_BACKEND": "memory"})


def stored(date, title="Title"):
    return json.dumps(
        {
            "key": f"article:{date}",
            "title": title,
            "bodyHtml": f"<p>Body for {date}</p>",
            "date": date,
            "topic": "topic 1",
        }
    )


class TestRoutesWithoutStore(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(create_app(make_settings(), None, None))

    def test_latest_500(self):
        resp = self.client.get("/")
        self.assertEqual(resp.status_code, 500)
        self.assertIn("Storage is not configured", resp.text)

    def test_archive_500_json(self):
        resp = self.client.get("/archive")
        self.assertEqual(resp.status_code, 500)
        self.assertIn("Storage is not configured", resp.json()["error"])

    def test_article_500(self):
        resp = self.client.get("/article/2024-01-01")
        self.assertEqual(resp.status_code, 500)


class TestRoutes(unittest.TestCase):
    def setUp(self):
        self.kv = InMemoryKVStore()
        self.model = AsyncMock()
        self.model.run.return_value = {
            "response": "<h2>Fresh Article</h2>\n<p>Generated body</p>"
        }

    def client(self, model=None):
        return TestClient(create_app(make_settings(), self.kv, model))

    def test_latest_503_when_generation_unavailable(self):
        resp = self.client().get("/")
        self.assertEqual(resp.status_code, 503)
        self.assertIn("No article generated yet", resp.text)

    def test_latest_generates_on_demand(self):
        resp = self.client(self.model).get("/")
        self.assertEqual(resp.status_code, 200)
        self.assertIn("text/html", resp.headers["content-type"])
        self.assertIn("<h1>Fresh Article</h1>", resp.text)
        self.assertIn("<p>Generated body</p>", resp.text)
        self.assertEqual(self.model.run.await_count, 1)

        today = datetime.datetime.now(datetime.timezone.utc).strftime("%Y-%m-%d")
        self.assertEqual(self.kv.data["latest-key"], f"article:{today}")

    def test_latest_renders_existing_without_generation(self):
        self.kv.data["article:2024-01-02"] = stored("2024-01-02", "Second")
        self.kv.data["article:2024-01-01"] = stored("2024-01-01", "First")
        self.kv.data["latest-key"] = "article:2024-01-02"

        resp = self.client(self.model).get("/")
        self.assertEqual(resp.status_code, 200)
        self.assertIn("<h1>Second</h1>", resp.text)
        self.assertIn('href="/article/2024-01-01"', resp.text)
        self.assertNotIn('href="/article/2024-01-02"', resp.text)
        self.model.run.assert_not_awaited()

    def test_unknown_path_serves_latest(self):
        self.kv.data["article:2024-01-01"] = stored("2024-01-01", "Only")
        self.kv.data["latest-key"] = "article:2024-01-01"
        resp = self.client().get("/some/other/page")
        self.assertEqual(resp.status_code, 200)
        self.assertIn("<h1>Only</h1>", resp.text)

    def test_latest_pointer_to_broken_record(self):
        self.kv.data["latest-key"] = "article:2024-01-01"
        self.kv.data["article:2024-01-01"] = "{broken"
        resp = self.client().get("/")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.text, "Article missing.")

    def test_article_by_date(self):
        self.kv.data["article:2024-01-01"] = stored("2024-01-01", "New Year")
        resp = self.client().get("/article/2024-01-01")
        self.assertEqual(resp.status_code, 200)
        self.assertIn("<h1>New Year</h1>", resp.text)
        self.assertIn("<p>Body for 2024-01-01</p>", resp.text)

    def test_article_not_found(self):
        resp = self.client(self.model).get("/article/2099-01-01")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.text, "Article not found for that date.")
        self.model.run.assert_not_awaited()

    def test_article_empty_or_trailing_slash_not_found(self):
        self.kv.data["article:2024-01-01"] = stored("2024-01-01", "Only")
        self.kv.data["latest-key"] = "article:2024-01-01"
        client = self.client()

        for path in ("/article/", "/article/2099-01-01/", "/article/2024-01-01/extra"):
            resp = client.get(path)
            self.assertEqual(resp.status_code, 404, path)
            self.assertEqual(resp.text, "Article not found for that date.")

    def test_archive(self):
        for date in ("2024-01-01", "2024-01-03", "2024-01-02"):
            self.kv.data[f"article:{date}"] = stored(date, f"T {date}")
        self.kv.data["latest-key"] = "article:2024-01-03"

        resp = self.client().get("/archive")
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.headers["content-type"].startswith("application/json"))
        self.assertEqual(
            [item["date"] for item in resp.json()],
            ["2024-01-03", "2024-01-02", "2024-01-01"],
        )
        self.assertEqual(
            resp.json()[0], {"date": "2024-01-03", "title": "T 2024-01-03", "topic": "topic 1"}
        )

    def test_archive_capped_at_fifty(self):
        start = datetime.date(2024, 1, 1)
        for offset in range(60):
            date = (start + datetime.timedelta(days=offset)).isoformat()
            self.kv.data[f"article:{date}"] = stored(date)

        items = self.client().get("/archive").json()
        self.assertEqual(len(items), 50)
        self.assertEqual(items[0]["date"], "2024-02-29")


if __name__ == "__main__":
    unittest.main()
