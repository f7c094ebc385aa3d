"""
PDF serializer tests: same tree, alternate format.
"""

import re
import zlib

import pytest

from budget_backend.document_builder import build_budget_document, labeled_line
from budget_backend.labels import TRANSLATIONS
from budget_backend.pdf_generator import BudgetPDF, _safe, generate_budget_pdf

from conftest import empty_budget, sample_budget

LONG_DESCRIPTION = "Bloques de hormigon de 15 cm para el muro perimetral del patio y castillo"


def _pdf_text(pdf_bytes: bytes) -> str:
    """Text shown on the pages: every string drawn with Tj, one per line."""
    shown = []
    for stream in re.findall(rb"stream\r?\n(.*?)\r?\nendstream", pdf_bytes, re.S):
        try:
            content = zlib.decompress(stream)
        except zlib.error:
            continue  # not a page stream
        shown.extend(re.findall(rb"\(((?:\\.|[^\\)])*)\)\s*Tj", content))
    return "\n".join(s.decode("latin-1") for s in shown)


def test_pdf_generates_valid_bytes():
    pdf_bytes = generate_budget_pdf(build_budget_document(sample_budget(), "es"), "Cocina Nueva")
    assert isinstance(pdf_bytes, bytes)
    assert len(pdf_bytes) > 1000
    assert pdf_bytes[:5] == b"%PDF-"


def test_pdf_for_empty_budget():
    pdf_bytes = generate_budget_pdf(build_budget_document(empty_budget(), "en"))
    assert pdf_bytes[:5] == b"%PDF-"


def test_pdf_is_repeatable():
    tree = build_budget_document(sample_budget(), "en")
    assert generate_budget_pdf(tree, "x") == generate_budget_pdf(tree, "x")


def test_safe_keeps_spanish_and_replaces_smart_quotes():
    assert _safe("Albañil “Principal” m²") == 'Albañil "Principal" m²'
    assert _safe("") == ""


# ============================================================
# Language isolation
# ============================================================

@pytest.mark.parametrize("lang,other", [("es", "en"), ("en", "es")])
def test_pdf_language_isolation(lang, other):
    text = _pdf_text(generate_budget_pdf(build_budget_document(sample_budget(), lang)))
    mine, theirs = TRANSLATIONS[lang], TRANSLATIONS[other]
    own_text = " ".join(mine.values())
    for key, label in theirs.items():
        # Short labels can occur inside ordinary words
        if label != mine[key] and len(label) > 4 and label not in own_text:
            assert label not in text, key
    assert mine["title"] in text
    assert mine["beneficiary"] in text
    assert mine["signature"] in text


def test_pdf_footer_has_no_words():
    text = _pdf_text(generate_budget_pdf(build_budget_document(sample_budget(), "es")))
    assert "Page" not in text


# ============================================================
# Wrapping
# ============================================================

def test_wrap_splits_long_text_without_losing_words():
    pdf = BudgetPDF(margin_mm=12.7)
    pdf.add_page()
    pdf.set_font("Helvetica", "", 10)
    lines = pdf.wrap(LONG_DESCRIPTION, 40)
    assert len(lines) > 1
    assert " ".join(lines).split() == LONG_DESCRIPTION.split()


def test_wrap_of_empty_text_is_one_blank_line():
    pdf = BudgetPDF(margin_mm=12.7)
    pdf.add_page()
    pdf.set_font("Helvetica", "", 10)
    assert pdf.wrap("", 40) == [""]


def test_pdf_table_cells_wrap_instead_of_truncating():
    budget = sample_budget(materials=[
        {"description": LONG_DESCRIPTION, "quantity": 10, "unit": "unidad", "unitPrice": 1.25},
    ])
    text = _pdf_text(generate_budget_pdf(build_budget_document(budget, "es")))
    assert "castillo" in text
    assert "..." not in text
    for word in LONG_DESCRIPTION.split():
        assert word in text


def test_pdf_handles_long_rows_and_many_items():
    materials = [
        {"description": f"{LONG_DESCRIPTION} {i}", "quantity": i, "unitPrice": 1.5}
        for i in range(80)
    ]
    labor = [{"description": LONG_DESCRIPTION * 3, "cost": 10}]
    budget = sample_budget(materials=materials, labor=labor)
    pdf_bytes = generate_budget_pdf(build_budget_document(budget, "es"))
    assert pdf_bytes[:5] == b"%PDF-"
    text = _pdf_text(pdf_bytes)
    assert text.count("castillo") >= 80
    assert "..." not in text


def test_wrapped_paragraph_keeps_bold_label(monkeypatch):
    drawn = []
    original = BudgetPDF.write

    def recording_write(self, h, text, *args, **kwargs):
        drawn.append((self.font_style, text))
        return original(self, h, text, *args, **kwargs)

    monkeypatch.setattr(BudgetPDF, "write", recording_write)
    pdf = BudgetPDF(margin_mm=12.7)
    pdf.add_page()
    pdf.text_block(labeled_line("Beneficiario:", "Cooperativa de Vivienda Las Palmas " * 6))

    assert drawn[0] == ("B", "Beneficiario: ")
    assert drawn[1][0] == ""
    assert drawn[1][1].startswith("Cooperativa")


def test_long_beneficiary_line_is_fully_drawn():
    beneficiary = "Cooperativa de Vivienda Las Palmas " * 6 + "Norte"
    budget = sample_budget(project={"projectName": "Patio", "beneficiary": beneficiary})
    text = _pdf_text(generate_budget_pdf(build_budget_document(budget, "es")))
    assert "Beneficiario:" in text
    assert "Norte" in text
