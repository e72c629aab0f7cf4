"""Headless-browser renderer: mermaid.js in Chromium via Playwright."""

from __future__ import annotations

import asyncio
import html
import logging

from mermaid2png.errors.exceptions import RenderError
from mermaid2png.render.base import validate_png
from mermaid2png.types import DimensionPlan

logger = logging.getLogger(__name__)

_MERMAID_JS_URL = "https://cdn.jsdelivr.net/npm/mermaid@10/dist/mermaid.min.js"
_DEFAULT_TIMEOUT = 60.0
_SETTLE_MS = 500

_PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <script src="{script_url}"></script>
  <style>
    body {{ margin: 0; padding: 0; background: white;
            width: {width}px; height: {height}px; overflow: hidden; }}
    #diagram {{ width: 100%; height: 100%; display: flex;
               align-items: center; justify-content: center; }}
    .mermaid {{ display: inline-block; }}
  </style>
</head>
<body>
  <div id="diagram"><div class="mermaid">
{code}
  </div></div>
  <script>
    mermaid.initialize({{
      startOnLoad: true,
      theme: 'default',
      gantt: {{ axisFormat: '%Y-%m-%d', fontSize: 14 }},
      useMaxWidth: false,
      highResolution: true
    }});
  </script>
</body>
</html>"""


def build_page(mermaid_syntax: str, plan: DimensionPlan, script_url: str = _MERMAID_JS_URL) -> str:
    """HTML page that renders the diagram on load."""
    return _PAGE_TEMPLATE.format(
        script_url=script_url,
        width=plan.width,
        height=plan.height,
        code=html.escape(mermaid_syntax, quote=False),
    )


class BrowserRenderer:
    """Loads mermaid.js in headless Chromium and screenshots the viewport."""

    name = "browser"

    def __init__(
        self,
        script_url: str = _MERMAID_JS_URL,
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> None:
        self._script_url = script_url
        self._timeout = timeout

    async def render(self, mermaid_syntax: str, plan: DimensionPlan) -> bytes:
        logger.info("Using browser fallback for rendering")
        try:
            data = await asyncio.wait_for(self._screenshot(mermaid_syntax, plan), self._timeout)
        except asyncio.TimeoutError as e:
            raise RenderError(
                f"Browser render timed out after {self._timeout:.0f}s", renderer=self.name
            ) from e
        return validate_png(data, self.name)

    async def _screenshot(self, mermaid_syntax: str, plan: DimensionPlan) -> bytes:
        from playwright.async_api import Error as PlaywrightError
        from playwright.async_api import async_playwright

        page_html = build_page(mermaid_syntax, plan, self._script_url)
        timeout_ms = self._timeout * 1000
        try:
            async with async_playwright() as p:
                browser = await p.chromium.launch(
                    headless=True,
                    args=["--no-sandbox", "--disable-setuid-sandbox"],
                )
                try:
                    page = await browser.new_page(
                        viewport={"width": plan.width, "height": plan.height},
                        device_scale_factor=plan.scale_factor,
                    )
                    await page.set_content(page_html, wait_until="networkidle", timeout=timeout_ms)
                    await page.wait_for_selector(".mermaid svg", timeout=timeout_ms)
                    await page.wait_for_timeout(_SETTLE_MS)
                    return await page.screenshot(type="png")
                finally:
                    await browser.close()
        except PlaywrightError as e:
            raise RenderError(f"Browser error: {e}", renderer=self.name) from e
