"""Package metadata for shipyard."""

__app_name__ = "shipyard"
__version__ = "0.4.0"
__author__ = "shipyard maintainers"
__description__ = "Release automation: source archives, artifact registry and multi-target publishing."

__all__ = [
    "__app_name__",
    "__author__",
    "__description__",
    "__version__",
]
