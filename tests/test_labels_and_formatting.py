"""
Label table, unit enumeration, display formatting and file names.
"""

import pytest

from budget_backend.errors import LabelTableError, UnsupportedLanguageError
from budget_backend.formatting import PLACEHOLDER, derive_file_name, fmt_money, fmt_quantity, or_placeholder
from budget_backend.labels import LABEL_KEYS, TRANSLATIONS, UNITS, get_labels, validate_label_table
from budget_backend.schemas import Budget, MaterialItem, coerce_number, coerce_text


# ============================================================
# Label table
# ============================================================

@pytest.mark.parametrize("lang", ["es", "en"])
def test_label_table_fully_populated(lang):
    labels = get_labels(lang)
    assert set(labels) == set(LABEL_KEYS)
    assert all(value.strip() for value in labels.values())


def test_label_table_validates_cleanly():
    validate_label_table()


def test_missing_label_fails_fast():
    broken = {"es": dict(TRANSLATIONS["es"]), "en": dict(TRANSLATIONS["en"])}
    del broken["en"]["signature"]
    with pytest.raises(LabelTableError, match="signature"):
        validate_label_table(broken)


def test_extra_label_fails_fast():
    broken = {"es": dict(TRANSLATIONS["es"], subtitle="x")}
    with pytest.raises(LabelTableError, match="subtitle"):
        validate_label_table(broken)


def test_blank_label_fails_fast():
    broken = {"es": dict(TRANSLATIONS["es"], title="  ")}
    with pytest.raises(LabelTableError, match="title"):
        validate_label_table(broken)


def test_unknown_language_rejected():
    with pytest.raises(UnsupportedLanguageError):
        get_labels("fr")


def test_labels_differ_by_language():
    assert get_labels("es")["title"] == "RESUMEN DE PRESUPUESTO"
    assert get_labels("en")["title"] == "BUDGET SUMMARY"
    assert get_labels("es")["currency"] == get_labels("en")["currency"] == "MN"


def test_units_are_closed_set_in_form_order():
    codes = [u["value"] for u in UNITS]
    assert codes == ["unidad", "bolsa", "kg", "m", "m2", "m3", "l", "juego", "caja", "otro"]
    assert {u["value"]: u["label"] for u in UNITS}["m2"] == "m²"


# ============================================================
# Formatting
# ============================================================

@pytest.mark.parametrize("amount,expected", [
    (0, "$0.00"),
    (36.5, "$36.50"),
    (1234567.891, "$1234567.89"),
    (-5, "$-5.00"),
])
def test_fmt_money(amount, expected):
    assert fmt_money(amount) == expected


def test_fmt_money_rejects_non_numbers():
    with pytest.raises(ValueError):
        fmt_money("abc")


@pytest.mark.parametrize("value,expected", [(3, "3"), (3.0, "3"), (2.5, "2.5"), (0, "0")])
def test_fmt_quantity(value, expected):
    assert fmt_quantity(value) == expected


@pytest.mark.parametrize("text", ["", "   ", None])
def test_blank_text_uses_placeholder(text):
    assert or_placeholder(text) == PLACEHOLDER == "---"


def test_non_blank_text_kept():
    assert or_placeholder("María") == "María"


# ============================================================
# File names
# ============================================================

def test_file_name_replaces_whitespace_runs():
    assert derive_file_name("Cocina Nueva", "es", "docx") == "Cocina_Nueva_es.docx"
    assert derive_file_name("Baño   y\tpatio", "en", "docx") == "Baño_y_patio_en.docx"


def test_file_name_falls_back_when_blank():
    assert derive_file_name("", "en", "docx") == "presupuesto_en.docx"
    assert derive_file_name("   ", "es", "pdf") == "presupuesto_es.pdf"


# ============================================================
# Numeric coercion
# ============================================================

@pytest.mark.parametrize("raw,expected", [
    ("12.5", 12.5), ("", 0.0), ("abc", 0.0), (None, 0.0), ("nan", 0.0), ("inf", 0.0), (7, 7.0), (-3, -3.0),
])
def test_coerce_number(raw, expected):
    assert coerce_number(raw) == expected


def test_malformed_numbers_become_zero_on_the_model():
    item = MaterialItem.model_validate({"quantity": "abc", "unitPrice": None})
    assert item.quantity == 0.0
    assert item.unit_price == 0.0


# ============================================================
# Null text
# ============================================================

@pytest.mark.parametrize("raw,expected", [(None, ""), ("", ""), ("Arena", "Arena")])
def test_coerce_text(raw, expected):
    assert coerce_text(raw) == expected


def test_null_text_becomes_empty_on_the_model():
    budget = Budget.model_validate({
        "project": {"beneficiary": None, "projectName": None, "observations": None},
        "workers": [{"name": None, "role": None}],
        "materials": [{"description": None, "unit": None, "quantity": 2, "unitPrice": 3}],
        "labor": [{"description": None, "cost": 5}],
    })
    assert budget.project.beneficiary == ""
    assert budget.project.project_name == ""
    assert budget.workers[0].name == ""
    assert budget.materials[0].description == ""
    assert budget.materials[0].unit == ""
    assert budget.labor[0].description == ""


def test_null_sections_use_defaults():
    budget = Budget.model_validate({"project": None, "diet": None, "materials": None})
    assert budget == Budget()
