# -*- coding: utf-8 -*-
"""Error kinds raised by the record and summary layers.

Every error carries a message that is safe to show to the user as-is.
"""

from __future__ import annotations


class CareSynapseError(Exception):
    """Base class for all user-facing failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ImportParseError(CareSynapseError):
    """The uploaded workbook could not be read."""


class ValidationError(CareSynapseError):
    """Local input check failed before anything was sent to the summarizer."""


class RecordFieldError(ValidationError):
    """An edit named a field that the record item does not have."""


class RecordItemNotFound(CareSynapseError):
    def __init__(self, section: str, item_id: str) -> None:
        super().__init__(f"No item {item_id!r} in {section}")
        self.section = section
        self.item_id = item_id


class SummaryInProgress(CareSynapseError):
    def __init__(self) -> None:
        super().__init__("Summaries are already being generated. Please wait.")


class SummarizerError(CareSynapseError):
    """Transport or provider failure while calling the summarizer."""


class RemoteAuthError(SummarizerError):
    """The summarizer rejected (or was never given) a valid credential."""


class MalformedResponse(SummarizerError):
    """The summarizer returned text that is not a single JSON value."""

    def __init__(self, message: str, excerpt: str) -> None:
        super().__init__(message)
        self.excerpt = excerpt


class UnexpectedResponseShape(SummarizerError):
    """The summarizer returned JSON without the three expected keys/types."""
