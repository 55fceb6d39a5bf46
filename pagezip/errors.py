# pagezip/errors.py
# ============================================================
# Conversion Errors
# ============================================================
# Every failure surfaced by the converter is a ConversionError.
# Subclasses let callers tell the stage apart when they care;
# the CLI only ever catches the base class.
# ============================================================


class ConversionError(Exception):
    """A conversion failed. The message is meant for humans."""


class DocumentDecodeError(ConversionError):
    """The input bytes could not be parsed as a PDF document."""


class PageRenderError(ConversionError):
    """A page could not be rasterized."""

    def __init__(self, page_number: int, message: str):
        super().__init__(f"Page {page_number}: {message}")
        self.page_number = page_number


class PageEncodeError(ConversionError):
    """A rendered page encoded to no data and the policy is 'abort'."""

    def __init__(self, page_number: int):
        super().__init__(f"Page {page_number}: image encoder produced no data")
        self.page_number = page_number


class ConversionCancelled(ConversionError):
    """The caller cancelled the conversion between two pages."""
