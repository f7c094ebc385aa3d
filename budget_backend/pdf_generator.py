"""
PDF budget generator.

Renders the same BudgetDocument tree as the DOCX serializer, with fpdf2
(pure Python, no system dependencies). Built-in Helvetica only covers
latin-1, which is enough for Spanish text and the m²/m³ unit labels.
"""

from datetime import datetime, timezone

from fpdf import FPDF

from .document_builder import CENTER, HEADING_2, RIGHT, TITLE, BudgetDocument, Paragraph, Table

MEDIA_TYPE = "application/pdf"
EXTENSION = "pdf"

FIXED_TIMESTAMP = datetime(2000, 1, 1, tzinfo=timezone.utc)

TWIP_MM = 25.4 / 1440
BODY_SIZE = 10
LINE_H = 5.5

_ALIGN = {CENTER: "C", RIGHT: "R"}


def _safe(text: str) -> str:
    """Replace Unicode chars that can't be rendered by built-in PDF fonts (latin-1)."""
    if not text:
        return ""
    return (
        text
        .replace("\u2022", "-")    # bullet
        .replace("\u2014", " - ")  # em dash
        .replace("\u2013", "-")    # en dash
        .replace("\u201c", '"')    # left double quote
        .replace("\u201d", '"')    # right double quote
        .replace("\u2018", "'")    # left single quote
        .replace("\u2019", "'")    # right single quote
        .encode("latin-1", errors="replace")
        .decode("latin-1")
    )


def _rgb(hex_color: str) -> tuple:
    h = hex_color.lstrip("#")
    return tuple(int(h[i:i + 2], 16) for i in (0, 2, 4))


class BudgetPDF(FPDF):
    """PDF canvas for budget summaries."""

    def __init__(self, margin_mm: float):
        super().__init__()
        self.set_margins(margin_mm, margin_mm, margin_mm)
        self.set_auto_page_break(auto=True, margin=max(margin_mm, 15))

    def header(self):
        pass  # Title is part of the document body

    def footer(self):
        self.set_y(-12)
        self.set_font("Helvetica", "I", 8)
        self.set_text_color(150, 150, 150)
        # Numbers only, so the footer reads the same in every language
        self.cell(0, 8, f"{self.page_no()}/{{nb}}", align="C")
        self.set_text_color(0, 0, 0)

    @property
    def printable_width(self) -> float:
        return self.w - self.l_margin - self.r_margin

    def use_run_font(self, run):
        style = "B" if run.bold else ""
        self.set_font("Helvetica", style, run.size / 2 if run.size else BODY_SIZE)
        self.set_text_color(*(_rgb(run.color) if run.color else (0, 0, 0)))

    def wrap(self, text: str, width: float) -> list:
        """Split text into the lines multi_cell would draw in the given width, current font."""
        text = _safe(text)
        if not text:
            return [""]
        return self.multi_cell(width, LINE_H, text, dry_run=True, output="LINES")

    def title_block(self, block: Paragraph):
        self.set_font("Helvetica", "B", 20)
        self.set_text_color(0, 0, 0)
        self.cell(0, 11, _safe(block.text), align="C", new_x="LMARGIN", new_y="NEXT")

    def section_header(self, title: str):
        """Render a section header bar."""
        self.set_font("Helvetica", "B", 11)
        self.set_fill_color(45, 55, 72)
        self.set_text_color(255, 255, 255)
        self.cell(0, 8, f"  {_safe(title)}", fill=True, new_x="LMARGIN", new_y="NEXT")
        self.set_text_color(0, 0, 0)

    def text_block(self, block: Paragraph):
        """One line of mixed runs, or a wrapped block when it doesn't fit."""
        pw = self.printable_width
        widths = []
        height = LINE_H
        for run in block.runs:
            self.use_run_font(run)
            widths.append(self.get_string_width(_safe(run.text)))
            height = max(height, self.font_size * 1.4)

        if sum(widths) > pw or any("\n" in r.text for r in block.runs):
            # Flowing text keeps each run's font; wrapped lines start at the left margin
            self.set_x(self.l_margin)
            for run in block.runs:
                self.use_run_font(run)
                self.write(height, _safe(run.text))
            self.ln(height)
            self.set_text_color(0, 0, 0)
            return

        x = self.l_margin
        if block.align == RIGHT:
            x += pw - sum(widths)
        elif block.align == CENTER:
            x += (pw - sum(widths)) / 2
        self.set_x(x)
        for run, width in zip(block.runs, widths):
            self.use_run_font(run)
            self.cell(width, height, _safe(run.text))
        self.ln(height)
        self.set_text_color(0, 0, 0)

    def budget_table(self, spec: Table):
        pw = self.printable_width * spec.width_pct / 100
        columns = spec.column_count
        widths = [
            pw * (cell.width_pct or 100 / columns) / 100
            for cell in spec.rows[0].cells
        ]
        for row in spec.rows:
            lines = []
            for cell, width in zip(row.cells, widths):
                cell_lines = []
                for p in cell.paragraphs:
                    run = p.runs[0] if p.runs else None
                    if run is not None:
                        self.use_run_font(run)
                    for text in p.text.split("\n"):
                        for line in self.wrap(text, width - 2):
                            cell_lines.append((line, p.align, run))
                lines.append(cell_lines)
            row_h = max(len(c) for c in lines) * LINE_H + 2
            if self.get_y() + row_h > self.page_break_trigger:
                self.add_page()

            y = self.get_y()
            x = self.l_margin
            for cell, cell_lines, width in zip(row.cells, lines, widths):
                if cell.fill or cell.border:
                    style = ""
                    if cell.fill:
                        self.set_fill_color(*_rgb(cell.fill))
                        style += "F"
                    if cell.border:
                        self.set_draw_color(*_rgb(cell.border.color))
                        self.set_line_width(cell.border.size_pt * 25.4 / 72)
                        style += "D"
                    self.rect(x, y, width, row_h, style=style)
                self.set_xy(x, y + 1)
                for text, align, run in cell_lines:
                    if run is not None:
                        self.use_run_font(run)
                    self.set_x(x + 1)
                    self.cell(width - 2, LINE_H, text, align=_ALIGN.get(align, "L"),
                              new_x="LEFT", new_y="NEXT")
                x += width
            self.set_xy(self.l_margin, y + row_h)
        self.set_text_color(0, 0, 0)
        self.set_draw_color(0, 0, 0)


def generate_budget_pdf(document: BudgetDocument, title: str = "") -> bytes:
    """
    Render a BudgetDocument to PDF.

    Args:
        document: tree from build_budget_document()
        title: PDF metadata title

    Returns:
        PDF bytes
    """
    pdf = BudgetPDF(margin_mm=document.margin_twips * TWIP_MM)
    pdf.set_creation_date(FIXED_TIMESTAMP)
    pdf.set_title(_safe(title))
    pdf.set_lang(document.lang)
    pdf.alias_nb_pages()
    pdf.add_page()

    for block in document.blocks:
        if isinstance(block, Table):
            pdf.budget_table(block)
            continue
        if block.space_before:
            pdf.ln(block.space_before * TWIP_MM)
        if block.style == TITLE:
            pdf.title_block(block)
        elif block.style == HEADING_2:
            pdf.section_header(block.text)
        else:
            pdf.text_block(block)
        if block.space_after:
            pdf.ln(block.space_after * TWIP_MM)

    # bytearray -> bytes for Response compatibility
    return bytes(pdf.output())
