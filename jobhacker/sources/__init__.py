from .base import FALLBACK, LENIENT, STRICT, JobSource, parse_rss_items
from .cryptojobslist import CryptoJobsListSource
from .hnhiring import HNHiringSource
from .jobicy import JobicySource
from .remoteok import RemoteOKSource
from .remotive import RemotiveSource
from .web3career import Web3CareerSource
from .weworkremotely import WeWorkRemotelySource
from .workingnomads import WorkingNomadsSource

from jobhacker.log import get_logger

log = get_logger(__name__)

__all__ = [
    "JobSource", "STRICT", "LENIENT", "FALLBACK", "parse_rss_items",
    "RemoteOKSource", "WeWorkRemotelySource", "Web3CareerSource",
    "HNHiringSource", "JobicySource", "CryptoJobsListSource",
    "WorkingNomadsSource", "RemotiveSource",
    "SOURCE_CLASSES", "get_sources",
]

# Registration order is also the merge order of fetched jobs.
SOURCE_CLASSES: tuple[type[JobSource], ...] = (
    RemoteOKSource,          # strict
    WeWorkRemotelySource,    # strict
    Web3CareerSource,        # fallback
    HNHiringSource,          # lenient
    JobicySource,            # lenient
    CryptoJobsListSource,    # lenient
    WorkingNomadsSource,     # lenient
    RemotiveSource,          # lenient
)


def get_sources(enabled: list[str] | None = None) -> list[JobSource]:
    """Instantiate every registered source, or only the ``enabled`` names."""
    sources: list[JobSource] = []
    for cls in SOURCE_CLASSES:
        if enabled is not None and cls.name not in enabled:
            continue
        sources.append(cls())
        log.debug("Registered source: %s (%s)", cls.display_name, cls.policy)
    return sources
