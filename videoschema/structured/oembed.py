"""Rewrite video-host page URLs into embeddable player URLs."""

from __future__ import annotations

import dataclasses as dc
import re

from videoschema.logging import get_logger, log_debug

logger = get_logger(__name__)


@dc.dataclass(frozen=True, slots=True)
class EmbedProvider:
    """A video host and how to derive its player URL.

    Attributes
    ----------
    name : str
        Short provider label used in logs.
    host_pattern : re.Pattern[str]
        Recognises URLs belonging to the provider.
    id_pattern : re.Pattern[str]
        Extracts the video identifier as its first group.
    embed_template : str
        Player URL with an ``{video_id}`` placeholder.
    """

    name: str
    host_pattern: re.Pattern[str]
    id_pattern: re.Pattern[str]
    embed_template: str

    def rewrite(self, url: str) -> str:
        """Return the player URL, or ``url`` when no identifier is found."""
        match = self.id_pattern.search(url)
        if match is None:
            log_debug(logger, "No %s video id in %s; passing through.", self.name, url)
            return url
        return self.embed_template.format(video_id=match.group(1))


EMBED_PROVIDERS: tuple[EmbedProvider, ...] = (
    EmbedProvider(
        name="youtube",
        host_pattern=re.compile(r"(?:youtube\.com|youtu\.be)", re.IGNORECASE),
        id_pattern=re.compile(r"(?:v=|/embed/|youtu\.be/)([A-Za-z0-9_-]{6,})"),
        embed_template="https://www.youtube.com/embed/{video_id}",
    ),
    EmbedProvider(
        name="vimeo",
        host_pattern=re.compile(r"vimeo\.com", re.IGNORECASE),
        id_pattern=re.compile(r"vimeo\.com/(?:.*?/)?([0-9]+)"),
        embed_template="https://player.vimeo.com/video/{video_id}",
    ),
)


def to_embed_url(
    raw_url: object,
    providers: tuple[EmbedProvider, ...] = EMBED_PROVIDERS,
) -> str | None:
    """Return the canonical player URL for a video page URL.

    Unknown hosts and URLs without an extractable id pass through trimmed.
    Empty input yields ``None``.

    Examples
    --------
    >>> to_embed_url("https://youtu.be/dQw4w9WgXcQ")
    'https://www.youtube.com/embed/dQw4w9WgXcQ'
    >>> to_embed_url("https://vimeo.com/channels/staff/123456")
    'https://player.vimeo.com/video/123456'
    """
    if raw_url is None or raw_url is False:
        return None
    url = str(raw_url).strip()
    if not url:
        return None
    for provider in providers:
        if provider.host_pattern.search(url):
            return provider.rewrite(url)
    return url


__all__ = ["EMBED_PROVIDERS", "EmbedProvider", "to_embed_url"]
