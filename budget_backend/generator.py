"""
Budget document generation entry point.

Pipeline: totals -> document tree -> serialized bytes -> save primitive.

Everything up to the tree runs synchronously; serialization is the one
awaited step (it runs in a worker thread). Any failure while building or
serializing surfaces as DocumentGenerationError and nothing is handed to
the save primitive.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from fastapi.concurrency import run_in_threadpool

from . import docx_renderer, pdf_generator
from .config import settings
from .document_builder import BudgetDocument, build_budget_document
from .errors import DocumentGenerationError, UnsupportedFormatError
from .formatting import derive_file_name
from .labels import get_labels
from .schemas import Budget

logger = logging.getLogger(__name__)

# save(content, file_name)
SaveFn = Callable[[bytes, str], None]


@dataclass(frozen=True)
class Serializer:
    render: Callable[[BudgetDocument, str], bytes]
    media_type: str
    extension: str


SERIALIZERS = {
    "docx": Serializer(docx_renderer.render_docx, docx_renderer.MEDIA_TYPE, docx_renderer.EXTENSION),
    "pdf": Serializer(pdf_generator.generate_budget_pdf, pdf_generator.MEDIA_TYPE, pdf_generator.EXTENSION),
}


@dataclass(frozen=True)
class RenderedDocument:
    content: bytes
    file_name: str
    media_type: str


def get_serializer(fmt: str) -> Serializer:
    try:
        return SERIALIZERS[fmt]
    except KeyError:
        raise UnsupportedFormatError(fmt) from None


def document_title(budget: Budget, lang: str) -> str:
    """Metadata title: label title plus the project name when there is one."""
    title = get_labels(lang)["title"]
    name = budget.project.project_name.strip()
    return f"{title} - {name}" if name else title


def _prepare(budget: Budget, lang: str, fmt: str):
    """Build the tree and pick the serializer. Raises DocumentGenerationError."""
    try:
        serializer = get_serializer(fmt)
        tree = build_budget_document(budget, lang)
        title = document_title(budget, lang)
    except Exception as e:
        raise DocumentGenerationError(f"Could not build the budget document: {e}") from e
    file_name = derive_file_name(budget.project.project_name, lang, serializer.extension)
    return serializer, tree, title, file_name


def _serialize(serializer: Serializer, tree: BudgetDocument, title: str) -> bytes:
    try:
        return serializer.render(tree, title)
    except Exception as e:
        raise DocumentGenerationError(f"Could not serialize the budget document: {e}") from e


def render_document(budget: Budget, lang: str, fmt: str = None) -> RenderedDocument:
    """Build and serialize a budget document without saving it."""
    fmt = fmt or settings.DEFAULT_FORMAT
    serializer, tree, title, file_name = _prepare(budget, lang, fmt)
    content = _serialize(serializer, tree, title)
    return RenderedDocument(content=content, file_name=file_name, media_type=serializer.media_type)


async def generate_document(
    budget: Budget,
    lang: str,
    save: SaveFn,
    fmt: str = None,
) -> RenderedDocument:
    """
    Generate the budget document and hand it to the save primitive.

    Args:
        budget: immutable budget snapshot
        lang: "es" or "en"
        save: called once as save(content, file_name) after a successful render
        fmt: "docx" (default) or "pdf"

    Returns:
        The rendered document that was passed to save()

    Raises:
        DocumentGenerationError: build or serialization failed; save() was not called
    """
    fmt = fmt or settings.DEFAULT_FORMAT
    serializer, tree, title, file_name = _prepare(budget, lang, fmt)
    content = await run_in_threadpool(_serialize, serializer, tree, title)
    rendered = RenderedDocument(content=content, file_name=file_name, media_type=serializer.media_type)
    save(rendered.content, rendered.file_name)
    logger.info("Generated %s (%d bytes)", rendered.file_name, len(rendered.content))
    return rendered


def save_to_directory(directory: Optional[str] = None) -> SaveFn:
    """Save primitive that writes documents into a folder (created if missing)."""
    target = Path(directory or settings.OUTPUT_DIR)

    def save(content: bytes, file_name: str) -> None:
        target.mkdir(parents=True, exist_ok=True)
        (target / file_name).write_bytes(content)

    return save
