"""label-switcher: GitHub App that keeps PR labels and WIP titles in sync."""

__version__ = "0.1.0"

from .rules import CHANGES_REQUESTED_LABEL, REVIEW_REQUIRED_LABEL, WIP_LABEL, WIP_MARKER

__all__ = [
    "CHANGES_REQUESTED_LABEL",
    "REVIEW_REQUIRED_LABEL",
    "WIP_LABEL",
    "WIP_MARKER",
    "__version__",
]
