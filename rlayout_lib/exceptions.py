"""Exceptions raised by the layout engine and its PDF source adapter."""


class LayoutError(Exception):
    """Base class for every error raised by rlayout_lib."""


class LayoutInputError(LayoutError, ValueError):
    """
    Raised for programmer errors in the analyzer's input, such as a page
    list that is not a sequence or a page with negative dimensions.
    Partial or missing data inside a page never raises.
    """


class PdfDecodeError(LayoutError):
    """
    Raised when the PDF decoder cannot read a file.

    Attributes:
        pdf_path: The file that failed to decode.
    """

    def __init__(self, message: str, pdf_path: str = None):
        self.pdf_path = pdf_path
        super().__init__(f"{message} ({pdf_path})" if pdf_path else message)
