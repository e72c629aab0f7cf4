"""mermaid2png: Mermaid diagram to PNG conversion service with a render cache."""

from mermaid2png.core import Mermaid2Png, convert

__version__ = "0.1.0"

__all__ = ["Mermaid2Png", "convert", "__version__"]
