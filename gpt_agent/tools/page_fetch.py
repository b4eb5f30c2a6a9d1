"""
Page Fetch Tool
===============

Loads a web page in headless Chromium (Playwright) and returns its visible
text, so the model can read pages found with web_search.

Loading is tuned for text:
- images, stylesheets, fonts and media are blocked
- navigation only waits for DOMContentLoaded, with a 20 second timeout

Very long pages (over 45,000 characters of visible text) are run through
readability-lxml to keep only the main article content.

The browser and the readability step sit behind two small interfaces,
PageRenderer and ContentExtractor, so they can be swapped out (tests use
in-memory fakes).

Setup:
    pip install playwright
    playwright install chromium
"""

from dataclasses import dataclass, field
from typing import Protocol

from bs4 import BeautifulSoup
from playwright.async_api import Route, async_playwright
from readability import Document

from gpt_agent.tools import ToolDefinition, create_tool_schema
from gpt_agent.utils.logger import Logger

logger = Logger("Tools").child("PageFetch")

NAVIGATION_TIMEOUT_MS = 20_000
READABILITY_THRESHOLD = 45_000
BLOCKED_RESOURCE_TYPES = frozenset({"image", "stylesheet", "font", "media"})
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120 Safari/537.36"
)

_CANONICAL_SCRIPT = """() => {
    const link = document.querySelector('link[rel="canonical"]');
    return link && link.href ? link.href : location.href;
}"""

_TEXT_SCRIPT = "() => document.body ? document.body.innerText.trim() : ''"


@dataclass(frozen=True)
class RenderedPage:
    """What a renderer extracted from a loaded page."""
    url: str    # canonical URL, or the final URL when none is declared
    title: str
    text: str   # visible text
    html: str   # raw markup, for re-extraction


class PageRenderer(Protocol):
    async def render(self, url: str) -> RenderedPage:
        """Load url and return its rendered content."""
        ...


class ContentExtractor(Protocol):
    def extract(self, html: str) -> str:
        """Return the main readable text of an HTML document."""
        ...


class PlaywrightRenderer:
    """Renders pages with a fresh headless Chromium per call."""

    def __init__(self, timeout_ms: int = NAVIGATION_TIMEOUT_MS, user_agent: str = USER_AGENT):
        self.timeout_ms = timeout_ms
        self.user_agent = user_agent

    @staticmethod
    async def _block_heavy_resources(route: Route) -> None:
        if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
            await route.abort()
        else:
            await route.continue_()

    async def render(self, url: str) -> RenderedPage:
        async with async_playwright() as playwright:
            browser = await playwright.chromium.launch(headless=True)
            try:
                context = await browser.new_context(user_agent=self.user_agent)
                await context.route("**/*", self._block_heavy_resources)

                page = await context.new_page()
                await page.goto(url, wait_until="domcontentloaded", timeout=self.timeout_ms)

                text = await page.evaluate(_TEXT_SCRIPT)
                title = await page.title()
                canonical = await page.evaluate(_CANONICAL_SCRIPT)
                html = await page.content()
            finally:
                await browser.close()

        return RenderedPage(url=canonical or url, title=title, text=text or "", html=html)


class ReadabilityExtractor:
    """Main-content extraction with readability-lxml, flattened to text."""

    def extract(self, html: str) -> str:
        article_html = Document(html).summary(html_partial=True)
        soup = BeautifulSoup(article_html, "lxml")
        return soup.get_text(separator="\n").strip()


@dataclass(frozen=True)
class GetPageParams:
    url: str

    @classmethod
    def from_params(cls, params: dict) -> "GetPageParams":
        url = params.get("url")
        if not url or not isinstance(url, str):
            raise TypeError("URL is required and must be a string")
        return cls(url=url)


@dataclass
class GetPageResult:
    """Result of get: the page URL and its extracted text (in "html")."""
    url: str
    html: str
    meta: dict = field(default_factory=dict)
    error: str | None = None

    def to_dict(self) -> dict:
        data = {"url": self.url, "html": self.html}
        if self.meta:
            data["meta"] = self.meta
        if self.error is not None:
            data["error"] = self.error
        return data


class PageFetcher:
    """
    The get tool handler.

    Example:
        fetch = PageFetcher()
        result = await fetch({"url": "https://example.com"})
        print(result.url, len(result.html))
    """

    def __init__(
        self,
        renderer: PageRenderer | None = None,
        extractor: ContentExtractor | None = None,
        threshold: int = READABILITY_THRESHOLD
    ):
        self.renderer = renderer or PlaywrightRenderer()
        self.extractor = extractor or ReadabilityExtractor()
        self.threshold = threshold

    async def __call__(self, params: dict) -> GetPageResult:
        args = GetPageParams.from_params(params)
        logger.debug(f"Connecting to {args.url}")

        try:
            page = await self.renderer.render(args.url)

            text = page.text
            if len(text) > self.threshold:
                logger.debug(f"Page text is {len(text)} chars, extracting main content")
                text = self.extractor.extract(page.html)

            preview = " ".join(text[:200].split())
            logger.debug(f"Extracted {len(text) / 1024:.1f} KB text -> {preview}...")

            return GetPageResult(url=page.url, html=text, meta={"title": page.title})

        except Exception as e:
            logger.error(f"Failed to fetch {args.url}", e)
            return GetPageResult(url=args.url, html="", error=str(e) or type(e).__name__)


get_page = PageFetcher()


get_tool = ToolDefinition(
    name="get",
    description=(
        "Fetch a web page using a headless browser and return its readable text content. "
        "Input a URL and receive the page's canonical URL and text."
    ),
    parameters=create_tool_schema(
        {
            "url": {
                "type": "string",
                "description": "The URL of the web page to fetch."
            }
        },
        required=["url"]
    )
)
