"""Map per-platform build outputs to the platforms they install on."""

from release_matrix.collect import Artifact, ArtifactCollection, CollectionOptions
from release_matrix.errors import (
    DiscoveryError,
    MetadataParseError,
    MetadataReadError,
    MissingArtifactError,
    ReleaseMatrixError,
)

__all__ = [
    "Artifact",
    "ArtifactCollection",
    "CollectionOptions",
    "DiscoveryError",
    "MetadataParseError",
    "MetadataReadError",
    "MissingArtifactError",
    "ReleaseMatrixError",
]
