import asyncio
import io
import time

import pytest
from PIL import Image

from mermaid2png.errors.exceptions import RenderError


@pytest.fixture
def sample_png_bytes():
    """Minimal valid PNG for testing (1x1 white pixel)."""
    buf = io.BytesIO()
    Image.new("RGB", (1, 1), "white").save(buf, "PNG")
    return buf.getvalue()


class FakeClock:
    """Controllable replacement for time.time."""

    def __init__(self, start: float) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRenderer:
    """Renderer double that records calls and can fail or stall."""

    def __init__(self, name: str, image: bytes = b"", fail: bool = False, delay: float = 0.0):
        self.name = name
        self.image = image
        self.fail = fail
        self.delay = delay
        self.calls: list[tuple[str, object]] = []

    async def render(self, mermaid_syntax, plan):
        self.calls.append((mermaid_syntax, plan))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise RenderError(f"{self.name} failed", renderer=self.name)
        return self.image


@pytest.fixture
def clock():
    return FakeClock(time.time())


@pytest.fixture
def make_renderer(sample_png_bytes):
    def _make(name: str = "fake", **kwargs) -> FakeRenderer:
        kwargs.setdefault("image", sample_png_bytes)
        return FakeRenderer(name, **kwargs)
    return _make


@pytest.fixture
def flowchart_wide_complex():
    """LR flowchart with 16 bracketed-node lines."""
    lines = ["flowchart LR"]
    for i in range(16):
        lines.append(f"    N{i}[Step {i}] --> N{i + 1}[Step {i + 1}]")
    return "\n".join(lines)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the user's global config and environment out of every test."""
    from mermaid2png.config import hierarchy

    monkeypatch.setattr(
        hierarchy, "_GLOBAL_CONFIG_PATH", tmp_path / ".mermaid2png" / "config.yaml"
    )
    for env_key in hierarchy._ENV_MAP:
        monkeypatch.delenv(env_key, raising=False)
