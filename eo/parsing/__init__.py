"""Input classification: raw text → FormatKind."""

from eo.parsing.format_classifier import classify  # noqa: F401
from eo.parsing.models import FormatKind, TableGrid  # noqa: F401

__all__ = ["FormatKind", "TableGrid", "classify"]
