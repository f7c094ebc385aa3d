"""
DOCX serializer for BudgetDocument trees.

Uses python-docx. Word features python-docx has no API for (cell
shading, per-cell borders, percentage widths, cell margins) are set on
the underlying OOXML elements.

Output is reproducible: core properties are pinned and the zip entries
are rewritten with a fixed timestamp, so the same budget gives the same
bytes every time.
"""

import zipfile
from datetime import datetime
from io import BytesIO

from docx import Document
from docx.enum.table import WD_ALIGN_VERTICAL
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, RGBColor, Twips

from .document_builder import CENTER, HEADING_2, RIGHT, TITLE, BudgetDocument, Cell, Paragraph, Table

MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
EXTENSION = "docx"

FIXED_TIMESTAMP = datetime(2000, 1, 1)
_ZIP_DATE = (1980, 1, 1, 0, 0, 0)

_ALIGN = {
    CENTER: WD_ALIGN_PARAGRAPH.CENTER,
    RIGHT: WD_ALIGN_PARAGRAPH.RIGHT,
}

_STYLES = {
    TITLE: "Title",
    HEADING_2: "Heading 2",
}

_EDGES = ("top", "left", "bottom", "right")


def _pct(value: int) -> str:
    """OOXML percentages are in fiftieths of a percent."""
    return str(int(value * 50))


def _set_table_width_pct(table, pct: int) -> None:
    tbl_pr = table._tbl.tblPr
    tbl_w = tbl_pr.find(qn("w:tblW"))
    if tbl_w is None:
        tbl_w = OxmlElement("w:tblW")
        tbl_pr.append(tbl_w)
    tbl_w.set(qn("w:type"), "pct")
    tbl_w.set(qn("w:w"), _pct(pct))


def _remove_table_borders(table) -> None:
    tbl_pr = table._tbl.tblPr
    borders = tbl_pr.find(qn("w:tblBorders"))
    if borders is None:
        borders = OxmlElement("w:tblBorders")
        look = tbl_pr.find(qn("w:tblLook"))
        if look is not None:
            look.addprevious(borders)
        else:
            tbl_pr.append(borders)
    for edge in _EDGES + ("insideH", "insideV"):
        element = OxmlElement(f"w:{edge}")
        element.set(qn("w:val"), "nil")
        borders.append(element)


def _set_cell_width_pct(cell, pct: int) -> None:
    tc_pr = cell._tc.get_or_add_tcPr()
    tc_w = tc_pr.find(qn("w:tcW"))
    if tc_w is None:
        tc_w = OxmlElement("w:tcW")
        tc_pr.append(tc_w)
    tc_w.set(qn("w:type"), "pct")
    tc_w.set(qn("w:w"), _pct(pct))


def _set_cell_shading(cell, fill: str) -> None:
    tc_pr = cell._tc.get_or_add_tcPr()
    shd = OxmlElement("w:shd")
    shd.set(qn("w:val"), "solid")
    shd.set(qn("w:color"), fill)
    shd.set(qn("w:fill"), fill)
    tc_pr.append(shd)


def _set_cell_border(cell, color: str, size_pt: float) -> None:
    tc_pr = cell._tc.get_or_add_tcPr()
    tc_borders = tc_pr.find(qn("w:tcBorders"))
    if tc_borders is None:
        tc_borders = OxmlElement("w:tcBorders")
        tc_pr.append(tc_borders)
    for edge in _EDGES:
        element = OxmlElement(f"w:{edge}")
        element.set(qn("w:val"), "single")
        element.set(qn("w:sz"), str(int(size_pt * 8)))
        element.set(qn("w:space"), "0")
        element.set(qn("w:color"), color)
        tc_borders.append(element)


def _set_cell_margins(cell, twips: int) -> None:
    tc_pr = cell._tc.get_or_add_tcPr()
    tc_mar = OxmlElement("w:tcMar")
    for edge in _EDGES:
        element = OxmlElement(f"w:{edge}")
        element.set(qn("w:w"), str(twips))
        element.set(qn("w:type"), "dxa")
        tc_mar.append(element)
    tc_pr.append(tc_mar)


def _fill_paragraph(paragraph, block: Paragraph) -> None:
    if block.align in _ALIGN:
        paragraph.alignment = _ALIGN[block.align]
    fmt = paragraph.paragraph_format
    if block.space_before:
        fmt.space_before = Twips(block.space_before)
    if block.space_after:
        fmt.space_after = Twips(block.space_after)
    for r in block.runs:
        run = paragraph.add_run(r.text)
        if r.bold:
            run.bold = True
        if r.size:
            run.font.size = Pt(r.size / 2)
        if r.color:
            run.font.color.rgb = RGBColor.from_string(r.color.upper())


def _fill_cell(cell, spec: Cell) -> None:
    for i, block in enumerate(spec.paragraphs):
        # A new cell already holds one empty paragraph
        paragraph = cell.paragraphs[0] if i == 0 else cell.add_paragraph()
        _fill_paragraph(paragraph, block)
    if spec.width_pct:
        _set_cell_width_pct(cell, spec.width_pct)
    # tcPr children must stay in schema order: tcW, tcBorders, shd, tcMar, vAlign
    if spec.border:
        _set_cell_border(cell, spec.border.color, spec.border.size_pt)
    if spec.fill:
        _set_cell_shading(cell, spec.fill)
    if spec.margin:
        _set_cell_margins(cell, spec.margin)
    if spec.vertical_center:
        cell.vertical_alignment = WD_ALIGN_VERTICAL.CENTER


def _add_table(doc, spec: Table) -> None:
    table = doc.add_table(rows=len(spec.rows), cols=spec.column_count)
    _set_table_width_pct(table, spec.width_pct)
    if spec.borderless:
        _remove_table_borders(table)
    for row_idx, row in enumerate(spec.rows):
        for col_idx, cell_spec in enumerate(row.cells):
            _fill_cell(table.cell(row_idx, col_idx), cell_spec)


def _normalize_zip(data: bytes) -> bytes:
    """Rewrite every zip entry with a fixed date so output is byte-stable."""
    out = BytesIO()
    with zipfile.ZipFile(BytesIO(data)) as src, zipfile.ZipFile(out, "w", zipfile.ZIP_DEFLATED) as dst:
        for info in src.infolist():
            entry = zipfile.ZipInfo(info.filename, date_time=_ZIP_DATE)
            entry.compress_type = zipfile.ZIP_DEFLATED
            dst.writestr(entry, src.read(info.filename))
    return out.getvalue()


def render_docx(document: BudgetDocument, title: str = "") -> bytes:
    """Serialize a BudgetDocument to .docx bytes."""
    doc = Document()

    for section in doc.sections:
        margin = Twips(document.margin_twips)
        section.top_margin = margin
        section.bottom_margin = margin
        section.left_margin = margin
        section.right_margin = margin

    props = doc.core_properties
    props.title = title
    props.language = document.lang
    props.author = ""
    props.last_modified_by = ""
    props.revision = 1
    props.created = FIXED_TIMESTAMP
    props.modified = FIXED_TIMESTAMP
    props.last_printed = FIXED_TIMESTAMP

    for block in document.blocks:
        if isinstance(block, Table):
            _add_table(doc, block)
        else:
            paragraph = doc.add_paragraph(style=_STYLES.get(block.style))
            _fill_paragraph(paragraph, block)

    buf = BytesIO()
    doc.save(buf)
    return _normalize_zip(buf.getvalue())
