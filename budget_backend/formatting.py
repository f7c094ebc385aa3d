"""Display helpers shared by the document builder and the serializers."""

import re

from .config import settings

PLACEHOLDER = "---"

_WHITESPACE = re.compile(r"\s+")


def fmt_money(amount) -> str:
    """Format a number as $X.XX, two decimals, no thousands separator."""
    return f"${float(amount):.2f}"


def fmt_quantity(value) -> str:
    """Render a quantity the way it was typed: 3 not 3.0, 2.5 stays 2.5."""
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def or_placeholder(text) -> str:
    """Blank text renders as the placeholder dash-string."""
    if text is None or not str(text).strip():
        return PLACEHOLDER
    return str(text)


def derive_file_name(project_name: str, lang: str, extension: str) -> str:
    """
    Suggested download name: whitespace runs become "_", a blank project
    name falls back to FILE_NAME_FALLBACK, then "_{lang}.{extension}".

        derive_file_name("Cocina Nueva", "es", "docx") -> "Cocina_Nueva_es.docx"
    """
    if not project_name or not project_name.strip():
        stem = settings.FILE_NAME_FALLBACK
    else:
        stem = _WHITESPACE.sub("_", project_name)
    return f"{stem}_{lang}.{extension}"
