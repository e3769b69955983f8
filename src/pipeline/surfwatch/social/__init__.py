"""Social media content collection."""

from surfwatch.social.youtube import (
    SubwaySurfingPost,
    YouTubeClient,
    YouTubeVideo,
    collect_subway_surfing_posts,
    format_duration,
)

__all__ = [
    "YouTubeClient",
    "YouTubeVideo",
    "SubwaySurfingPost",
    "collect_subway_surfing_posts",
    "format_duration",
]
