# exceptions.py
# Error taxonomy for the analysis pipeline

from typing import Optional


class DetectorError(Exception):
    """Base class for every error raised by the detector."""


class InputError(DetectorError):
    """Submitted content is empty, too short or not meaningful text."""


class FetchError(DetectorError):
    """A submitted URL could not be fetched."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AdapterError(DetectorError):
    """An optional remote call failed. Never escapes an adapter."""

    def __init__(self, adapter: str, reason: str, status_code: Optional[int] = None):
        super().__init__(f"{adapter}: {reason}")
        self.adapter = adapter
        self.reason = reason
        self.status_code = status_code


class PipelineError(DetectorError):
    """Unexpected failure while scoring or fusing results."""
