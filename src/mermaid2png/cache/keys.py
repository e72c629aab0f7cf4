"""Cache key generation over diagram text and requested dimensions."""

from __future__ import annotations

import hashlib

from mermaid2png.types import RenderOptions

_DEFAULT_SENTINEL = "default"


def generate_cache_key(
    mermaid_syntax: str,
    width: int | None = None,
    height: int | None = None,
) -> str:
    """Generate an MD5 cache key from diagram text and requested dimensions.

    Absent (or zero) dimensions are encoded as the literal ``default`` so an
    unspecified size never collides with a numeric one. The scale factor is a
    rendering hint and does not participate.
    """
    combined = (
        f"{mermaid_syntax}"
        f"|w:{width or _DEFAULT_SENTINEL}"
        f"|h:{height or _DEFAULT_SENTINEL}"
    )
    return hashlib.md5(combined.encode("utf-8", "surrogatepass")).hexdigest()


def options_key(mermaid_syntax: str, options: RenderOptions | None = None) -> str:
    """Cache key for a diagram rendered with the given options."""
    options = options or RenderOptions()
    return generate_cache_key(mermaid_syntax, options.width, options.height)
