"""Server feature gating.

Maps optional PostgreSQL capabilities to the first server version that
provides them.
"""

from enum import Enum


class Feature(Enum):
    """Capabilities that depend on the connected server version."""

    COMMENT = "comment"


# (major, minor) of the first release supporting each feature.
# pg_shdescription (shared object comments) appeared in 8.0.
FEATURE_MIN_VERSIONS: dict[Feature, tuple[int, int]] = {
    Feature.COMMENT: (8, 0),
}


def parse_server_version(server_version: int) -> tuple[int, int]:
    """Split a libpq server version number into (major, minor).

    From 10 onwards the number is major * 10000 + minor (e.g. 150002 -> 15.2);
    before that it was major * 10000 + minor * 100 + patch (90624 -> 9.6).
    """
    if server_version >= 100000:
        return server_version // 10000, server_version % 10000
    return server_version // 10000, (server_version // 100) % 100


def format_server_version(server_version: int) -> str:
    major, minor = parse_server_version(server_version)
    if server_version >= 100000:
        return f"{major}.{minor}"
    return f"{major}.{minor}.{server_version % 100}"


def feature_supported(feature: Feature, server_version: int) -> bool:
    """Check whether a server version provides the given feature."""
    return parse_server_version(server_version) >= FEATURE_MIN_VERSIONS[feature]
