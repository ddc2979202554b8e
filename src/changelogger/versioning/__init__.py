"""
Version inference for changelog entries.

See :mod:`changelogger.versioning.inferencer` for the inference chain
and :mod:`changelogger.versioning.semver` for tag parsing.
"""

from .inferencer import VersionInferencer, version_from_tags  # noqa: F401
from .project_metadata import MetadataError, ProjectMetadataReader  # noqa: F401
from .semver import SemanticVersion  # noqa: F401
