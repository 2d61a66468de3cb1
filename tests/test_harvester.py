"""
Tests for discovery providers, the orchestrator and the article fetcher.

Network calls go through httpx.MockTransport; no real requests are made.

Run with: pytest tests/test_harvester.py -v
"""

import httpx
import pytest

from invest_radar.harvester.article_fetcher import ArticleFetcher, extract_article_text
from invest_radar.harvester.base_scraper import merge_discovered, parse_iso_date, window_days
from invest_radar.harvester.orchestrator import discover_all
from invest_radar.harvester.scrapers.gdelt import GdeltProvider
from invest_radar.harvester.scrapers.google_news_rss import GoogleNewsRSSProvider, per_state_cap
from tests.test_helpers import FailingDiscoveryProvider, FakeDiscoveryProvider, make_item


RSS_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Google News</title>
    <item>
      <title>Tata Electronics to invest Rs 2,000 crore in Gujarat unit - The Economic Times</title>
      <link>https://news.google.com/rss/articles/CBMiTmh0dHBzOi8vZWNvbm9taWN0aW1lcw?oc=5</link>
      <pubDate>Fri, 10 Jan 2025 08:00:00 GMT</pubDate>
      <source url="https://economictimes.indiatimes.com">The Economic Times</source>
    </item>
    <item>
      <title>Gujarat election campaign heats up</title>
      <link>https://www.thehindu.com/news/national/gujarat-campaign/article1.ece</link>
      <pubDate>Thu, 09 Jan 2025 10:30:00 GMT</pubDate>
      <source url="https://www.thehindu.com">The Hindu</source>
    </item>
  </channel>
</rss>
"""

ARTICLE_BODY = (
    "Tata Electronics will invest Rs 2,000 crore in a new assembly unit at Sanand in Gujarat. "
    "The facility is expected to employ 1,500 people once fully commissioned, the company said "
    "in a statement on Friday. Construction will begin in the second quarter."
)

ARTICLE_HTML = f"""
<html>
  <head><title>Story</title><script>var tracking = 1;</script></head>
  <body>
    <nav>Home | Markets | Industry</nav>
    <article><p>{ARTICLE_BODY}</p></article>
    <footer>Copyright</footer>
  </body>
</html>
"""


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


# =============================================================================
# Base helpers
# =============================================================================
class TestBaseHelpers:
    @pytest.mark.parametrize("window,days", [("30d", 30), ("7D", 7), ("120d", 90), ("0d", 1), ("bogus", 30), (None, 30)])
    def test_window_days(self, window, days):
        assert window_days(window) == days

    @pytest.mark.parametrize("value,expected", [
        ("Fri, 10 Jan 2025 08:00:00 GMT", "2025-01-10"),
        ("20250112T093000Z", "2025-01-12"),
        ("2025-01-15T10:00:00Z", "2025-01-15"),
        ("not a date", None),
        (None, None),
    ])
    def test_parse_iso_date(self, value, expected):
        assert parse_iso_date(value) == expected

    def test_merge_unions_states(self):
        first = make_item("A", url="https://www.example.com/story/", states=("Gujarat",))
        second = make_item("A again", url="http://example.com/story?utm_source=x", states=("Odisha",))
        other = make_item("B", url="https://example.com/other", states=("Kerala",))

        merged = merge_discovered([first, other], [second])

        assert len(merged) == 2
        assert merged[0].title == "A"
        assert merged[0].tagged_states == ("Gujarat", "Odisha")


# =============================================================================
# Google News RSS
# =============================================================================
class TestGoogleNewsRSS:
    def test_feed_url(self):
        url = GoogleNewsRSSProvider().build_feed_url("Gujarat", "15d")
        assert url.startswith("https://news.google.com/rss/search?")
        assert "Gujarat" in url
        assert "when%3A15d" in url
        assert "ceid=IN%3Aen" in url

    def test_parse_feed(self):
        items = GoogleNewsRSSProvider().parse_feed(RSS_FEED, "Gujarat", cap=10)

        assert len(items) == 2
        first = items[0]
        assert first.source == "economictimes.indiatimes.com"
        assert first.iso_date == "2025-01-10"
        assert first.tagged_states == ("Gujarat",)
        assert items[1].source == "thehindu.com"

    def test_strict_titles(self):
        items = GoogleNewsRSSProvider(strict_titles=True).parse_feed(RSS_FEED, "Gujarat", cap=10)
        assert [i.source for i in items] == ["economictimes.indiatimes.com"]

    def test_cap(self):
        assert len(GoogleNewsRSSProvider().parse_feed(RSS_FEED, "Gujarat", cap=1)) == 1
        assert per_state_cap(10) == 15
        assert per_state_cap(40) == 20
        assert per_state_cap(100) == 25

    @pytest.mark.asyncio
    async def test_discover_skips_failed_state(self):
        def handler(request):
            if "Odisha" in str(request.url):
                return httpx.Response(503)
            return httpx.Response(200, text=RSS_FEED)

        async with mock_client(handler) as client:
            items = await GoogleNewsRSSProvider(client=client).discover(["Gujarat", "Odisha"], 20, "30d")

        assert len(items) == 2
        assert all(i.tagged_states == ("Gujarat",) for i in items)


# =============================================================================
# GDELT
# =============================================================================
class TestGdelt:
    def test_build_url(self):
        url = GdeltProvider(max_records_cap=10).build_url("Tamil Nadu", 50, "7d")
        assert url.startswith("https://api.gdeltproject.org/api/v2/doc/doc?")
        assert "timespan=7d" in url
        assert "maxrecords=10" in url
        assert "format=json" in url
        assert "sourceCountry%3AIN" in url

    def test_parse_articles(self):
        payload = {
            "articles": [
                {
                    "url": "https://www.business-standard.com/article/tata-chip-plant",
                    "title": "Tata to set up semiconductor plant in Gujarat",
                    "seendate": "20250112T093000Z",
                },
                {"url": "https://example.com/poll", "title": "Gujarat election results announced"},
                {"url": "https://example.com/weather", "title": "Heavy rain lashes Gujarat coast"},
                {"url": "", "title": "No link"},
                "garbage",
            ]
        }
        items = GdeltProvider(max_records_cap=10).parse_articles(payload, "Gujarat")

        assert len(items) == 1
        assert items[0].iso_date == "2025-01-12"
        assert items[0].source == "business-standard.com"
        assert items[0].tagged_states == ("Gujarat",)

    def test_parse_non_dict(self):
        assert GdeltProvider(max_records_cap=10).parse_articles(["not", "a", "dict"], "Gujarat") == []

    @pytest.mark.asyncio
    async def test_text_error_is_empty(self):
        def handler(request):
            return httpx.Response(200, text="Please limit requests to one every 5 seconds")

        provider = GdeltProvider(max_records_cap=10)
        async with mock_client(handler) as client:
            outcome = await provider.fetch_state(client, "Gujarat", 10, "30d")

        assert not outcome.ok
        assert outcome.reason.startswith("gdelt-text-error")

    @pytest.mark.asyncio
    async def test_discover_json(self):
        payload = {"articles": [{
            "url": "https://www.livemint.com/industry/jsw-steel-expansion",
            "title": "JSW Steel expansion gets nod in Odisha",
            "seendate": "20250111T120000Z",
        }]}

        def handler(request):
            return httpx.Response(200, json=payload)

        async with mock_client(handler) as client:
            items = await GdeltProvider(max_records_cap=10, client=client).discover(["Odisha", "Gujarat"], 10, "30d")

        assert len(items) == 1
        assert items[0].tagged_states == ("Odisha", "Gujarat")


# =============================================================================
# Orchestrator
# =============================================================================
class TestDiscoverAll:
    @pytest.mark.asyncio
    async def test_failing_provider_isolated(self):
        good = FakeDiscoveryProvider([make_item("Acme plant in Gujarat")], name="fake")
        result = await discover_all(["Gujarat"], 20, "30d", providers=[FailingDiscoveryProvider(), good])

        assert len(result.items) == 1
        assert result.per_provider == {"broken": 0, "fake": 1}
        assert len(result.errors) == 1
        assert good.calls == 1

    @pytest.mark.asyncio
    async def test_results_merged_across_providers(self):
        a = FakeDiscoveryProvider([make_item("X", url="https://example.com/x", states=("Gujarat",))], name="a")
        b = FakeDiscoveryProvider([make_item("X", url="https://www.example.com/x/", states=("Kerala",))], name="b")
        result = await discover_all(["Gujarat", "Kerala"], 20, "30d", providers=[a, b])

        assert len(result.items) == 1
        assert result.items[0].tagged_states == ("Gujarat", "Kerala")


# =============================================================================
# Article fetcher
# =============================================================================
class TestArticleFetcher:
    def test_extract_article_text(self):
        text = extract_article_text(ARTICLE_HTML, max_chars=5000)
        assert text.startswith("Tata Electronics will invest")
        assert "tracking" not in text
        assert "Markets" not in text

    def test_extract_truncates(self):
        assert len(extract_article_text(ARTICLE_HTML, max_chars=50)) == 50

    @pytest.mark.asyncio
    async def test_fetch_outcomes(self):
        def handler(request):
            path = request.url.path
            if path == "/story":
                return httpx.Response(200, html=ARTICLE_HTML)
            if path == "/pdf":
                return httpx.Response(200, content=b"%PDF", headers={"content-type": "application/pdf"})
            return httpx.Response(404)

        async with mock_client(handler) as client:
            fetcher = ArticleFetcher(client=client, max_concurrent=2, max_chars=5000)
            ok = await fetcher.fetch("https://example.com/story")
            missing = await fetcher.fetch("https://example.com/gone")
            pdf = await fetcher.fetch("https://example.com/pdf")

        assert ok.ok and ok.value.startswith("Tata Electronics")
        assert missing.reason == "http-404"
        assert pdf.reason.startswith("not-html")

    @pytest.mark.asyncio
    async def test_fetch_all_keeps_order(self):
        def handler(request):
            if request.url.path == "/gone":
                return httpx.Response(404)
            return httpx.Response(200, html=ARTICLE_HTML)

        items = [
            make_item("first", url="https://example.com/story"),
            make_item("second", url="https://example.com/gone"),
            make_item("third", url="https://example.com/other"),
        ]
        async with mock_client(handler) as client:
            fetched = await ArticleFetcher(client=client, max_concurrent=1, max_chars=5000).fetch_all(items)

        assert [i.title for i in fetched] == ["first", "second", "third"]
        assert fetched[0].text.startswith("Tata Electronics")
        assert fetched[1].text == ""
        assert fetched[2].text
