"""
Error types raised by the budget document core.

The core never logs or swallows these; the HTTP layer decides how to
present them.
"""


class BudgetError(Exception):
    """Base class for budget document errors."""


class LabelTableError(BudgetError):
    """The bilingual label table is missing keys or has unexpected ones."""


class UnsupportedLanguageError(BudgetError):
    """A language outside the label table was requested."""

    def __init__(self, lang):
        super().__init__(f"Unsupported language: {lang!r}")
        self.lang = lang


class UnsupportedFormatError(BudgetError):
    """A document format with no serializer was requested."""

    def __init__(self, fmt):
        super().__init__(f"Unsupported document format: {fmt!r}")
        self.fmt = fmt


class DocumentGenerationError(BudgetError):
    """Building or serializing the document failed. Nothing was delivered."""
