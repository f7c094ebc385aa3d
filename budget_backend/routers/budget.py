"""
Budget API: totals and document download.

POST /api/budget/totals          : materials, labor, meals and grand total
POST /api/budget/document        : download the budget summary (?lang=es|en&format=docx|pdf)
GET  /api/budget/units           : unit codes offered by the materials form
GET  /api/budget/labels/{lang}   : label table for one language
"""

import logging
import unicodedata
from urllib.parse import quote

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import Response

from ..config import settings
from ..errors import DocumentGenerationError, UnsupportedLanguageError
from ..generator import generate_document
from ..labels import UNITS, get_labels
from ..schemas import Budget, DocumentFormat, Language, Totals, UnitOption
from ..totals import compute_totals

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/budget", tags=["budget"])

GENERATION_ERROR = "Error generating the document. Please try again."


class ResponseSaver:
    """Save primitive for HTTP: keeps the document so it can be sent as an attachment."""

    def __init__(self):
        self.content = None
        self.file_name = None

    def __call__(self, content: bytes, file_name: str) -> None:
        self.content = content
        self.file_name = file_name

    def response(self, media_type: str) -> Response:
        return Response(
            content=self.content,
            media_type=media_type,
            headers={"Content-Disposition": content_disposition(self.file_name)},
        )


def content_disposition(file_name: str) -> str:
    """attachment header with an ASCII fallback plus the UTF-8 name."""
    fallback = unicodedata.normalize("NFKD", file_name).encode("ascii", "ignore").decode("ascii")
    fallback = fallback.replace('"', "") or "document"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(file_name)}"


@router.post("/totals", response_model=Totals)
def budget_totals(budget: Budget):
    """Subtotals and grand total for the current budget."""
    return compute_totals(budget.materials, budget.labor, budget.diet)


@router.post("/document")
async def download_document(
    budget: Budget,
    lang: Language = Query(settings.DEFAULT_LANGUAGE),
    fmt: DocumentFormat = Query(settings.DEFAULT_FORMAT, alias="format"),
):
    """
    Generate and download the budget summary.

    Returns: the .docx (or .pdf) as an attachment named after the project.
    """
    saver = ResponseSaver()
    try:
        rendered = await generate_document(budget, lang, saver, fmt=fmt)
    except DocumentGenerationError:
        logger.exception("Budget document generation failed (lang=%s, format=%s)", lang, fmt)
        raise HTTPException(status_code=500, detail=GENERATION_ERROR)
    return saver.response(rendered.media_type)


@router.get("/units", response_model=list[UnitOption])
def list_units():
    return UNITS


@router.get("/labels/{lang}")
def read_labels(lang: str):
    try:
        return get_labels(lang)
    except UnsupportedLanguageError as e:
        raise HTTPException(status_code=404, detail=str(e))
