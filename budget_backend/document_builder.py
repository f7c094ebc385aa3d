"""
Budget document tree.

Builds the ordered list of blocks (paragraphs and tables) that make up a
budget summary, independent of the output format. Serializers in
docx_renderer.py and pdf_generator.py walk the same tree.

Sections, in order:
1. Title + project name
2. Beneficiary
3. Main worker / other workers
4. Materials table + subtotal        (only when there are materials)
5. Labor table + subtotal            (only when there is labor)
6. Meals line + subtotal             (only when workers > 0 and days > 0)
7. Separator + grand total
8. Observations                      (only when not blank)
9. Signature block

Sizes are in half-points and spacing in twips, the units Word uses.
"""

from dataclasses import dataclass, field
from typing import Optional

from .config import settings
from .formatting import fmt_money, fmt_quantity, or_placeholder
from .labels import OBSERVATIONS_LABEL, PRINCIPAL_ROLE, get_labels
from .schemas import Budget, Totals
from .totals import compute_totals, line_total

# Alignment
LEFT = "left"
CENTER = "center"
RIGHT = "right"

# Paragraph styles
TITLE = "title"
HEADING_2 = "heading2"

# Colors (hex, no #)
HEADER_FILL = "3498db"
HEADER_TEXT = "FFFFFF"
BORDER_COLOR = "CCCCCC"
GRAND_TOTAL_COLOR = "2c3e50"

LARGE_TEXT = 28  # 14pt
CELL_MARGIN = 100
RULE = "_" * 60
SIGNATURE_LINE = "_" * 26


@dataclass(frozen=True)
class Run:
    text: str
    bold: bool = False
    size: Optional[int] = None
    color: Optional[str] = None


@dataclass(frozen=True)
class Paragraph:
    runs: tuple
    align: str = LEFT
    style: Optional[str] = None
    space_before: int = 0
    space_after: int = 0

    @property
    def text(self) -> str:
        return "".join(r.text for r in self.runs)


@dataclass(frozen=True)
class Border:
    color: str = BORDER_COLOR
    size_pt: float = 1


@dataclass(frozen=True)
class Cell:
    paragraphs: tuple
    width_pct: Optional[int] = None
    fill: Optional[str] = None
    border: Optional[Border] = None
    vertical_center: bool = False
    margin: Optional[int] = None

    @property
    def text(self) -> str:
        return "\n".join(p.text for p in self.paragraphs)


@dataclass(frozen=True)
class Row:
    cells: tuple


@dataclass(frozen=True)
class Table:
    rows: tuple
    name: str = ""
    width_pct: int = 100
    borderless: bool = False

    @property
    def column_count(self) -> int:
        return max((len(r.cells) for r in self.rows), default=0)


@dataclass
class BudgetDocument:
    """Ordered blocks plus the page setup they are laid out on."""
    lang: str
    totals: Totals
    blocks: list = field(default_factory=list)
    margin_twips: int = 720

    def paragraphs(self) -> list:
        return [b for b in self.blocks if isinstance(b, Paragraph)]

    def tables(self) -> list:
        return [b for b in self.blocks if isinstance(b, Table)]

    def headings(self) -> list:
        return [p.text for p in self.paragraphs() if p.style == HEADING_2]

    def text_lines(self) -> list:
        """Every piece of text in reading order, table cells one per line."""
        lines = []
        for block in self.blocks:
            if isinstance(block, Paragraph):
                lines.append(block.text)
            else:
                for row in block.rows:
                    for cell in row.cells:
                        lines.extend(p.text for p in cell.paragraphs)
        return lines


def para(*runs, **kwargs) -> Paragraph:
    return Paragraph(runs=tuple(runs), **kwargs)


def header_cell(text: str, width_pct: int) -> Cell:
    """Blue header cell with white bold centered text."""
    return Cell(
        paragraphs=(para(Run(text, bold=True, color=HEADER_TEXT), align=CENTER),),
        width_pct=width_pct,
        fill=HEADER_FILL,
        border=Border(),
    )


def body_cell(text, align: str = LEFT) -> Cell:
    return Cell(
        paragraphs=(para(Run(str(text)), align=align),),
        border=Border(),
        vertical_center=True,
        margin=CELL_MARGIN,
    )


def labeled_line(label: str, value: str, space_after: int = 100) -> Paragraph:
    """'{label} {value}' with the label in bold."""
    return para(Run(f"{label} ", bold=True), Run(value), space_after=space_after)


def subtotal_line(label: str, amount: float, currency: str, space_before: int = 200) -> Paragraph:
    return para(
        Run(f"{label} ", bold=True),
        Run(f"{fmt_money(amount)} {currency}", bold=True),
        align=RIGHT,
        space_before=space_before,
    )


class BudgetDocumentBuilder:
    """
    Assembles a BudgetDocument from a budget snapshot.

    The budget is never modified. Labels come only from the table of the
    requested language.
    """

    def __init__(self, budget: Budget, lang: str, totals: Totals = None):
        self.budget = budget
        self.lang = lang
        self.t = get_labels(lang)
        self.totals = totals or compute_totals(budget.materials, budget.labor, budget.diet)
        self.blocks = []

    def build(self) -> BudgetDocument:
        self.blocks = []
        self._add_header()
        self._add_workers()
        self._add_materials()
        self._add_labor()
        self._add_diets()
        self._add_grand_total()
        self._add_observations()
        self._add_signatures()
        return BudgetDocument(
            lang=self.lang,
            totals=self.totals,
            blocks=list(self.blocks),
            margin_twips=settings.PAGE_MARGIN_TWIPS,
        )

    # --- Header ---

    def _add_header(self):
        project = self.budget.project
        self.blocks.append(para(Run(self.t["title"]), style=TITLE, align=CENTER, space_after=200))
        self.blocks.append(para(
            Run(or_placeholder(project.project_name), bold=True, size=LARGE_TEXT),
            align=CENTER,
            space_after=400,
        ))
        self.blocks.append(labeled_line(self.t["beneficiary"], or_placeholder(project.beneficiary)))

    def _add_workers(self):
        workers = self.budget.workers
        main = next((w for w in workers if w.role == PRINCIPAL_ROLE), None)
        self.blocks.append(labeled_line(self.t["mainWorker"], or_placeholder(main.name if main else "")))

        others = [w.name for w in workers if w.role != PRINCIPAL_ROLE and w.name.strip()]
        if others:
            self.blocks.append(labeled_line(self.t["otherWorkers"], ", ".join(others), space_after=400))

    # --- Cost sections ---

    def _add_materials(self):
        materials = self.budget.materials
        if not materials:
            return
        t = self.t
        self.blocks.append(para(Run(t["materials"]), style=HEADING_2, space_before=200, space_after=200))

        rows = [Row(cells=(
            header_cell(t["description"], 40),
            header_cell(t["quantity"], 10),
            header_cell(t["unit"], 15),
            header_cell(t["unitPrice"], 15),
            header_cell(t["total"], 20),
        ))]
        for m in materials:
            rows.append(Row(cells=(
                body_cell(or_placeholder(m.description)),
                body_cell(fmt_quantity(m.quantity), CENTER),
                body_cell(or_placeholder(m.unit), CENTER),
                body_cell(fmt_money(m.unit_price), RIGHT),
                body_cell(fmt_money(line_total(m)), RIGHT),
            )))
        self.blocks.append(Table(rows=tuple(rows), name="materials"))
        self.blocks.append(subtotal_line(t["materialsTotal"], self.totals.materials_total, t["currency"]))

    def _add_labor(self):
        labor = self.budget.labor
        if not labor:
            return
        t = self.t
        self.blocks.append(para(Run(t["labor"]), style=HEADING_2, space_before=400, space_after=200))

        rows = [Row(cells=(header_cell(t["workDescription"], 75), header_cell(t["cost"], 25)))]
        for item in labor:
            rows.append(Row(cells=(
                body_cell(or_placeholder(item.description)),
                body_cell(fmt_money(item.cost), RIGHT),
            )))
        self.blocks.append(Table(rows=tuple(rows), name="labor"))
        self.blocks.append(subtotal_line(t["laborTotal"], self.totals.labor_total, t["currency"]))

    def _add_diets(self):
        diet = self.budget.diet
        if not (diet.workers_count > 0 and diet.days > 0):
            return
        t = self.t
        detail = (
            f"{fmt_quantity(diet.workers_count)} {t['workers']} x "
            f"{fmt_quantity(diet.days)} {t['days']} @ "
            f"{fmt_money(diet.cost_per_day)} {t['perMeal']}"
        )
        self.blocks.append(para(Run(t["diets"]), style=HEADING_2, space_before=400, space_after=200))
        self.blocks.append(para(Run(detail), align=RIGHT))
        self.blocks.append(subtotal_line(t["dietsTotal"], self.totals.diet_total, t["currency"], space_before=100))

    # --- Closing ---

    def _add_grand_total(self):
        t = self.t
        self.blocks.append(para(Run(RULE, color=BORDER_COLOR), align=CENTER, space_before=400, space_after=200))
        self.blocks.append(para(
            Run(f"{t['finalTotal']} ", bold=True, size=LARGE_TEXT),
            Run(f"{fmt_money(self.totals.grand_total)} {t['currency']}",
                bold=True, size=LARGE_TEXT, color=GRAND_TOTAL_COLOR),
            align=CENTER,
            space_after=600,
        ))

    def _add_observations(self):
        observations = self.budget.project.observations
        if not observations or not observations.strip():
            return
        self.blocks.append(para(Run(OBSERVATIONS_LABEL, bold=True)))
        self.blocks.append(para(Run(observations), space_after=400))

    def _add_signatures(self):
        t = self.t
        project = self.budget.project
        approver = Cell(
            paragraphs=(
                para(Run(f"{t['approvedBy']} {or_placeholder(project.approver_name)}", bold=True)),
                para(Run(f"\n\n{SIGNATURE_LINE}")),
                para(Run(t["signature"])),
            ),
            width_pct=50,
        )
        date = Cell(
            paragraphs=(
                para(Run(f"{t['date']} {or_placeholder(project.approval_date)}", bold=True), align=RIGHT),
            ),
            width_pct=50,
        )
        self.blocks.append(Table(rows=(Row(cells=(approver, date)),), name="signatures", borderless=True))


def build_budget_document(budget: Budget, lang: str, totals: Totals = None) -> BudgetDocument:
    """Build the document tree for one budget in one language."""
    return BudgetDocumentBuilder(budget, lang, totals).build()
