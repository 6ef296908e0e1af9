"""Page fetching and clip orchestration."""

from .clipper import Clipper, clip_blocking
from .page_fetcher import PageFetcher, extract_title

__all__ = ["Clipper", "PageFetcher", "clip_blocking", "extract_title"]
