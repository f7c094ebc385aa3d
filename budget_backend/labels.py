"""
Bilingual label table and unit enumeration.

Labels are looked up verbatim by the document builder; there is no
runtime translation and no fallback language. The table is checked when
this module is imported so a missing key fails at startup instead of in
the middle of a document.
"""

from .errors import LabelTableError, UnsupportedLanguageError

LABEL_KEYS = (
    "title", "beneficiary", "mainWorker", "otherWorkers",
    "materials", "labor", "diets",
    "materialsTotal", "laborTotal", "dietsTotal", "finalTotal",
    "approvedBy", "date",
    "description", "quantity", "unit", "unitPrice", "total",
    "workDescription", "cost",
    "workers", "days", "perMeal", "currency", "signature",
)

TRANSLATIONS = {
    "es": {
        "title": "RESUMEN DE PRESUPUESTO",
        "beneficiary": "Beneficiario:",
        "mainWorker": "Albañil Principal:",
        "otherWorkers": "Otros Trabajadores:",
        "materials": "MATERIALES UTILIZADOS",
        "labor": "TRABAJOS REALIZADOS",
        "diets": "DIETAS",
        "materialsTotal": "TOTAL MATERIALES:",
        "laborTotal": "TOTAL MANO DE OBRA:",
        "dietsTotal": "TOTAL DIETAS:",
        "finalTotal": "PRESUPUESTO TOTAL:",
        "approvedBy": "Aprobado por:",
        "date": "Fecha:",
        "description": "Descripción",
        "quantity": "Cant.",
        "unit": "Unidad",
        "unitPrice": "P. Unit.",
        "total": "Total",
        "workDescription": "Descripción del Trabajo",
        "cost": "Costo",
        "workers": "trabajadores",
        "days": "días",
        "perMeal": "c/u",
        "currency": "MN",
        "signature": "Firma",
    },
    "en": {
        "title": "BUDGET SUMMARY",
        "beneficiary": "Beneficiary:",
        "mainWorker": "Main Worker:",
        "otherWorkers": "Other Workers:",
        "materials": "MATERIALS USED",
        "labor": "WORK PERFORMED",
        "diets": "MEALS / DIETS",
        "materialsTotal": "TOTAL MATERIALS:",
        "laborTotal": "TOTAL LABOR:",
        "dietsTotal": "TOTAL MEALS:",
        "finalTotal": "TOTAL BUDGET:",
        "approvedBy": "Approved by:",
        "date": "Date:",
        "description": "Description",
        "quantity": "Qty",
        "unit": "Unit",
        "unitPrice": "U. Price",
        "total": "Total",
        "workDescription": "Work Description",
        "cost": "Cost",
        "workers": "workers",
        "days": "days",
        "perMeal": "ea",
        "currency": "MN",
        "signature": "Signature",
    },
}

# Same text in both documents
OBSERVATIONS_LABEL = "Observaciones / Observations:"

PRINCIPAL_ROLE = "Principal"
HELPER_ROLE = "Ayudante"

UNITS = [
    {"value": "unidad", "label": "Unidad"},
    {"value": "bolsa", "label": "Bolsa"},
    {"value": "kg", "label": "Kg"},
    {"value": "m", "label": "m"},
    {"value": "m2", "label": "m²"},
    {"value": "m3", "label": "m³"},
    {"value": "l", "label": "Litro"},
    {"value": "juego", "label": "Juego"},
    {"value": "caja", "label": "Caja"},
    {"value": "otro", "label": "Otro"},
]


def validate_label_table(table: dict = None) -> None:
    """Raise LabelTableError unless every language has exactly LABEL_KEYS, none blank."""
    table = TRANSLATIONS if table is None else table
    expected = set(LABEL_KEYS)
    for lang, labels in table.items():
        missing = expected - set(labels)
        extra = set(labels) - expected
        if missing or extra:
            raise LabelTableError(
                f"Label table for {lang!r} is inconsistent: "
                f"missing={sorted(missing)} extra={sorted(extra)}"
            )
        blank = sorted(k for k, v in labels.items() if not isinstance(v, str) or not v.strip())
        if blank:
            raise LabelTableError(f"Label table for {lang!r} has blank labels: {blank}")


def get_labels(lang: str) -> dict:
    """Label table for one language."""
    try:
        return TRANSLATIONS[lang]
    except KeyError:
        raise UnsupportedLanguageError(lang) from None


validate_label_table()
