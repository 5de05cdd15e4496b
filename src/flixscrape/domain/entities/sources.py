"""Domain entities for playback source extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .catalog import ServerItem


@dataclass(frozen=True)
class SourceLink:
    """Payload of the upstream sources endpoint for one server."""

    kind: str  # upstream "type", e.g. "iframe"
    link: str


@dataclass(frozen=True)
class VideoSource:
    url: str
    quality: str = "auto"
    is_m3u8: bool = True


@dataclass(frozen=True)
class Candidate:
    """A validated manifest URL found by one matcher strategy."""

    url: str
    matcher: str
    score: int = 0


@dataclass
class ExtractionTrace:
    """Diagnostics collected during a source extraction.

    Always collected; only exposed to callers when debugging is enabled.
    """

    iframe_url: str = ""
    iframe_status: int | None = None
    iframe_sample: str = ""
    patterns_tried: list[str] = field(default_factory=list)
    candidates: list[dict[str, Any]] = field(default_factory=list)
    probes: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def record_candidate(
        self,
        *,
        matcher: str,
        raw: str,
        url: str | None,
        score: int | None,
        reason: str | None,
    ) -> None:
        self.candidates.append(
            {
                "matcher": matcher,
                "raw": raw[:200],
                "url": url,
                "score": score,
                "accepted": reason is None,
                "reason": reason,
            }
        )


@dataclass(frozen=True)
class ExtractionResult:
    manifest_url: str | None
    sources: list[VideoSource] = field(default_factory=list)
    trace: ExtractionTrace = field(default_factory=ExtractionTrace)


@dataclass(frozen=True)
class EpisodeSources:
    """Resolved playback data for one server (null manifest is a valid outcome)."""

    server_id: str
    link: str | None
    kind: str | None
    manifest_url: str | None
    sources: list[VideoSource] = field(default_factory=list)
    server: ServerItem | None = None
    episode_id: str | None = None
    trace: ExtractionTrace | None = None

    @property
    def success(self) -> bool:
        return self.kind == "iframe" and bool(self.link)
