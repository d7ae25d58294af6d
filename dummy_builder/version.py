"""Version info for the dummy builder."""

from importlib.metadata import PackageNotFoundError, version

BUILDER_NAME = "dummy-builder"


def get_version() -> str:
    """Get the installed builder version."""
    try:
        return version(BUILDER_NAME)
    except PackageNotFoundError:
        return "unknown"


def get_version_string() -> str:
    """Get the `name/vX.Y.Z` identifier logged at startup."""
    return f"{BUILDER_NAME}/v{get_version()}"
