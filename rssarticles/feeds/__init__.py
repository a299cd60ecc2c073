from .fetcher import FeedFetcher
from .validator import FeedValidator
from .models import FeedEntry, FeedImage, FeedResult

__all__ = ["FeedFetcher", "FeedValidator", "FeedEntry", "FeedImage", "FeedResult"]
