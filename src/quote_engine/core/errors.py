"""
Error taxonomy for quote rendering.

ValidationError is raised before anything is drawn, AssetError never leaves the
renderer (the image is skipped), RenderError aborts the whole document.
"""


class QuoteEngineError(Exception):
    """Base class for all quote engine errors."""


class ValidationError(QuoteEngineError):
    """Input quote or settings are arithmetically inconsistent or malformed."""


class AssetError(QuoteEngineError):
    """A logo or signature image could not be looked up or decoded."""


class RenderError(QuoteEngineError):
    """The canvas or output stream failed; no document is produced."""
