from .catalog import (
    ContentType,
    DetailStat,
    EpisodeItem,
    HomePage,
    ListingItem,
    MovieDetails,
    MovieStats,
    SeasonItem,
    ServerItem,
    SpotlightItem,
    TvSeriesStats,
)
from .sources import (
    Candidate,
    EpisodeSources,
    ExtractionResult,
    ExtractionTrace,
    SourceLink,
    VideoSource,
)

__all__ = [
    "Candidate",
    "ContentType",
    "DetailStat",
    "EpisodeItem",
    "EpisodeSources",
    "ExtractionResult",
    "ExtractionTrace",
    "HomePage",
    "ListingItem",
    "MovieDetails",
    "MovieStats",
    "SeasonItem",
    "ServerItem",
    "SourceLink",
    "SpotlightItem",
    "TvSeriesStats",
    "VideoSource",
]
