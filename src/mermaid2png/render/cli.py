"""mermaid-cli (``mmdc``) renderer run as an async subprocess."""

from __future__ import annotations

import asyncio
import logging
import shlex
import tempfile
from pathlib import Path

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from mermaid2png.errors.exceptions import RenderError, RendererTimeoutError
from mermaid2png.render.base import validate_png
from mermaid2png.types import DimensionPlan

logger = logging.getLogger(__name__)

_DEFAULT_COMMAND = "npx mmdc"
_DEFAULT_TIMEOUT = 120.0
_BACKGROUND = "#ffffff"


def build_mmdc_command(
    command: str,
    input_file: Path,
    output_file: Path,
    plan: DimensionPlan,
    puppeteer_config: Path | None = None,
    mermaid_config: Path | None = None,
    background: str = _BACKGROUND,
) -> list[str]:
    """Build the argv for one mmdc invocation."""
    argv = shlex.split(command) + [
        "-i", str(input_file),
        "-o", str(output_file),
        "-w", str(plan.width),
        "-H", str(plan.height),
        "-b", background,
        "-s", f"{plan.scale_factor:g}",
    ]
    if puppeteer_config:
        argv += ["-p", str(puppeteer_config)]
    if mermaid_config:
        argv += ["-c", str(mermaid_config)]
    return argv


class MermaidCliRenderer:
    """Renders via mermaid-cli. Timeouts are retried; other failures are not."""

    name = "mmdc"

    def __init__(
        self,
        command: str = _DEFAULT_COMMAND,
        temp_dir: Path | None = None,
        puppeteer_config: Path | None = None,
        mermaid_config: Path | None = None,
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> None:
        self._command = command
        self._temp_dir = temp_dir
        self._puppeteer_config = puppeteer_config
        self._mermaid_config = mermaid_config
        self._timeout = timeout

    @retry(
        retry=retry_if_exception_type(RendererTimeoutError),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        stop=stop_after_attempt(3),
        reraise=True,
    )
    async def render(self, mermaid_syntax: str, plan: DimensionPlan) -> bytes:
        if self._temp_dir is not None:
            self._temp_dir.mkdir(parents=True, exist_ok=True)
        with tempfile.TemporaryDirectory(dir=self._temp_dir, prefix="mmdc-") as tmp:
            input_file = Path(tmp) / "diagram.mmd"
            output_file = Path(tmp) / "diagram.png"
            input_file.write_text(mermaid_syntax, encoding="utf-8")

            argv = build_mmdc_command(
                self._command,
                input_file,
                output_file,
                plan,
                puppeteer_config=self._puppeteer_config,
                mermaid_config=self._mermaid_config,
            )
            logger.info(
                "Rendering with mmdc at %dx%d, scale %g",
                plan.width, plan.height, plan.scale_factor,
            )
            logger.debug("Running command: %s", shlex.join(argv))
            stderr = await self._run(argv)

            if not output_file.exists():
                raise RenderError(
                    f"Output file not found after mmdc run: {output_file.name}",
                    renderer=self.name,
                    stderr=stderr,
                )
            data = output_file.read_bytes()

        return validate_png(data, self.name)

    async def _run(self, argv: list[str]) -> str:
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise RenderError(f"Cannot start mmdc: {e}", renderer=self.name) from e

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self._timeout)
        except asyncio.TimeoutError as e:
            proc.kill()
            await proc.wait()
            raise RendererTimeoutError(
                f"mmdc timed out after {self._timeout:.0f}s",
                renderer=self.name,
            ) from e

        err_text = stderr.decode("utf-8", "replace").strip()
        if stdout:
            logger.debug("mmdc output: %s", stdout.decode("utf-8", "replace").strip())
        if proc.returncode != 0:
            raise RenderError(
                f"mmdc exited with status {proc.returncode}: {err_text[:500]}",
                renderer=self.name,
                stderr=err_text,
            )
        if err_text:
            logger.warning("mmdc stderr: %s", err_text[:500])
        return err_text
