"""YouTube search for subway surfing content."""

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx
import structlog

from surfwatch.analytics.analyzer import Classifier
from surfwatch.config import get_config
from surfwatch.db.records import parse_timestamp

logger = structlog.get_logger()

DEFAULT_QUERIES = [
    "subway surfing NYC",
    "subway surfing challenge",
    "subway surfing incident",
    "subway surfing promotion",
    "subway surfing safety",
    "MTA subway surfing",
    "train surfing NYC",
    "subway surfing danger",
]

_DURATION_RE = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")


def format_duration(duration: str) -> str:
    """Convert an ISO 8601 duration such as ``PT4M13S`` to ``4:13``."""
    match = _DURATION_RE.fullmatch(duration or "")
    if not match:
        return "0:00"

    hours, minutes, seconds = (int(g or 0) for g in match.groups())
    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


@dataclass
class YouTubeVideo:
    """A video search hit combined with its statistics."""

    id: str
    title: str
    description: str
    channel_title: str
    published_at: datetime | None
    view_count: int = 0
    like_count: int = 0
    comment_count: int = 0
    thumbnail_url: str = ""
    duration: str = "PT0S"

    @classmethod
    def from_api(cls, item: dict[str, Any], details: dict[str, Any] | None) -> "YouTubeVideo":
        """Build from a search item and its optional ``videos`` record."""
        snippet = item.get("snippet", {})
        statistics = (details or {}).get("statistics", {})
        content_details = (details or {}).get("contentDetails", {})

        return cls(
            id=item["id"]["videoId"],
            title=snippet.get("title", ""),
            description=snippet.get("description", ""),
            channel_title=snippet.get("channelTitle", ""),
            published_at=parse_timestamp(snippet.get("publishedAt")),
            view_count=int(statistics.get("viewCount", 0)),
            like_count=int(statistics.get("likeCount", 0)),
            comment_count=int(statistics.get("commentCount", 0)),
            thumbnail_url=snippet.get("thumbnails", {}).get("medium", {}).get("url", ""),
            duration=content_details.get("duration", "PT0S"),
        )


@dataclass
class SubwaySurfingPost:
    """A classified video ready for the risk feed."""

    id: str
    content: str
    title: str
    author: str
    timestamp: datetime | None
    engagement: dict[str, int]
    metadata: dict[str, str]
    risk_score: float
    classification: str
    keywords: list[str] = field(default_factory=list)
    platform: str = "youtube"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "platform": self.platform,
            "content": self.content,
            "title": self.title,
            "author": self.author,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "engagement": dict(self.engagement),
            "metadata": dict(self.metadata),
            "riskScore": self.risk_score,
            "classification": self.classification,
            "keywords": list(self.keywords),
        }


class YouTubeClient:
    """Client for the YouTube Data API v3."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        lookback_days: int | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            api_key: YouTube Data API key.
            base_url: API base URL.
            lookback_days: Only return videos published this many days back.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).

        Raises:
            ValueError: If no API key is configured.
        """
        config = get_config()
        self.api_key = api_key or config.youtube.api_key
        if not self.api_key:
            raise ValueError("YOUTUBE_API_KEY is required")

        self.base_url = (base_url or config.youtube.base_url).rstrip("/")
        self.lookback_days = lookback_days if lookback_days is not None else config.youtube.lookback_days
        self.timeout = timeout or config.youtube.timeout
        self.transport = transport

        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self) -> "YouTubeClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _published_after(self) -> str:
        since = datetime.now(timezone.utc) - timedelta(days=self.lookback_days)
        return since.isoformat().replace("+00:00", "Z")

    def search_videos(self, query: str, max_results: int = 50) -> list[YouTubeVideo]:
        """Search recent videos and attach their statistics.

        Args:
            query: Search terms.
            max_results: Maximum number of videos (API cap is 50).

        Returns:
            Videos in relevance order.
        """
        response = self.client.get(
            "/search",
            params={
                "part": "snippet",
                "q": query,
                "type": "video",
                "maxResults": max_results,
                "order": "relevance",
                "publishedAfter": self._published_after(),
                "key": self.api_key,
            },
        )
        response.raise_for_status()
        items = response.json().get("items", [])
        if not items:
            return []

        video_ids = [item["id"]["videoId"] for item in items]
        response = self.client.get(
            "/videos",
            params={
                "part": "statistics,contentDetails",
                "id": ",".join(video_ids),
                "key": self.api_key,
            },
        )
        response.raise_for_status()
        details = {d["id"]: d for d in response.json().get("items", [])}

        videos = [YouTubeVideo.from_api(item, details.get(item["id"]["videoId"])) for item in items]
        logger.info("YouTube search complete", query=query, num_results=len(videos))
        return videos


def collect_subway_surfing_posts(
    client: YouTubeClient,
    classify: Classifier,
    queries: list[str] | None = None,
    per_query: int = 10,
    limit: int = 100,
) -> list[SubwaySurfingPost]:
    """Search, classify and rank subway surfing videos.

    Queries that fail are logged and skipped. Posts are ordered by risk score
    rounded to one decimal, newest first within the same rounded score.

    Args:
        client: YouTube client.
        classify: Content classifier taking (content, platform).
        queries: Search queries. Defaults to DEFAULT_QUERIES.
        per_query: Videos requested per query.
        limit: Maximum number of posts returned.

    Returns:
        Ranked posts.
    """
    posts = []
    seen = set()

    for query in queries or DEFAULT_QUERIES:
        try:
            videos = client.search_videos(query, per_query)
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.warning("YouTube query failed", query=query, error=str(e))
            continue

        for video in videos:
            if video.id in seen:
                continue
            seen.add(video.id)

            analysis = classify(f"{video.title} {video.description}", "youtube")
            posts.append(SubwaySurfingPost(
                id=f"youtube_{video.id}",
                content=video.description,
                title=video.title,
                author=video.channel_title,
                timestamp=video.published_at,
                engagement={
                    "views": video.view_count,
                    "likes": video.like_count,
                    "comments": video.comment_count,
                },
                metadata={
                    "duration": format_duration(video.duration),
                    "thumbnailUrl": video.thumbnail_url,
                    "videoId": video.id,
                },
                risk_score=analysis.risk_score,
                classification=analysis.classification,
                keywords=analysis.keywords,
            ))

    return _rank_posts(posts)[:limit]


def _rank_posts(posts: list[SubwaySurfingPost]) -> list[SubwaySurfingPost]:
    # Stable two-pass sort: recency first, then score buckets of 0.1
    epoch = datetime.min.replace(tzinfo=timezone.utc)
    by_recency = sorted(posts, key=lambda p: p.timestamp or epoch, reverse=True)
    return sorted(by_recency, key=lambda p: round(p.risk_score, 1), reverse=True)
