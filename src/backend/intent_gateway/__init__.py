"""
HTTP gateway forwarding transcription and intent classification to OpenAI.
"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("intent-gateway")
except PackageNotFoundError:  # pragma: no cover - package metadata optional
    __version__ = "0.0.0"

__all__ = ["__version__"]
