import os
import re
from itertools import groupby

from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont, TTFError
from reportlab.platypus import (
    SimpleDocTemplate, Paragraph, Spacer,
    HRFlowable
)
from xml.sax.saxutils import escape

DEFAULT_FONT_PATH = "fonts/DejaVuSans.ttf"

SEVERITY_COLORS = {
    "ERROR": "#b91c1c",    # red
    "WARNING": "#b45309",  # amber
    "INFO": "#1d4ed8",     # blue
}


def register_fonts():
    if os.path.exists(DEFAULT_FONT_PATH):
        try:
            pdfmetrics.registerFont(TTFont('DejaVuSans', DEFAULT_FONT_PATH))
        except TTFError:
            pass


def generate_pdf(run_meta: dict, result, out_path: str):
    """Render a ReviewResult: run metadata, summary counts, advice by line."""
    register_fonts()
    styles = getSampleStyleSheet()

    # Use DejaVu if installed
    base_font = (
        'DejaVuSans'
        if 'DejaVuSans' in pdfmetrics.getRegisteredFontNames()
        else 'Helvetica'
    )

    title_style = ParagraphStyle(
        "Title",
        parent=styles['Heading1'],
        fontName=base_font,
        fontSize=18,
        spaceAfter=10,
        textColor="#003566"
    )

    header_style = ParagraphStyle(
        "Header",
        parent=styles['Normal'],
        fontName=base_font,
        fontSize=11,
        leading=14,
    )

    section_title_style = ParagraphStyle(
        "SectionTitle",
        parent=styles['Heading3'],
        fontName=base_font,
        fontSize=13,
        spaceBefore=8,
        spaceAfter=4,
        textColor="#03045E"
    )

    normal_style = ParagraphStyle(
        "NormalFixed",
        parent=styles['Normal'],
        fontName=base_font,
        fontSize=10,
        leading=14,
    )

    doc = SimpleDocTemplate(
        out_path,
        pagesize=A4,
        rightMargin=15 * mm,
        leftMargin=15 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm
    )

    flow = []

    # -------------------------
    # TITLE
    # -------------------------
    flow.append(Paragraph("SQL Review Report", title_style))
    flow.append(Spacer(1, 6))

    # -------------------------
    # META BLOCK
    # -------------------------
    meta_text = (
        f"<b>Source:</b> {escape(str(run_meta.get('source', '-')))}<br/>"
        f"<b>Dialect:</b> {escape(str(run_meta.get('dialect', '-')))}<br/>"
        f"<b>Generated At:</b> {escape(str(run_meta.get('generated_at', '')))}"
    )
    flow.append(Paragraph(meta_text, header_style))
    flow.append(Spacer(1, 10))

    # -------------------------
    # SUMMARY
    # -------------------------
    summary = result.summary
    summary_text = (
        f"<b>Total Advice:</b> {summary.get('total', 0)} &nbsp;&nbsp; "
        f"<b>Errors:</b> <font color='{SEVERITY_COLORS['ERROR']}'>{summary.get('errors', 0)}</font> &nbsp;&nbsp; "
        f"<b>Warnings:</b> <font color='{SEVERITY_COLORS['WARNING']}'>{summary.get('warnings', 0)}</font> &nbsp;&nbsp; "
        f"<b>Infos:</b> <font color='{SEVERITY_COLORS['INFO']}'>{summary.get('infos', 0)}</font>"
    )
    flow.append(Paragraph(summary_text, header_style))
    flow.append(Spacer(1, 14))

    if result.rule_errors:
        flow.append(Paragraph("Rule Failures", section_title_style))
        for error in result.rule_errors:
            flow.append(Paragraph(escape(_insert_soft_breaks(str(error), 200)), normal_style))
        flow.append(Spacer(1, 10))

    flow.append(HRFlowable(width="100%", thickness=1, color="#cccccc"))
    flow.append(Spacer(1, 10))

    if not result.advices:
        flow.append(Paragraph("<font color='green'>No advice: the script passed every enabled rule.</font>",
                              normal_style))

    # -------------------------
    # ADVICE BY LINE
    # -------------------------
    ordered = sorted(result.advices, key=lambda a: a.line)
    for line, advices in groupby(ordered, key=lambda a: a.line):
        flow.append(Paragraph(f"Line {line}", section_title_style))
        for advice in advices:
            color = SEVERITY_COLORS.get(advice.severity.name, "#333333")
            message = escape(_insert_soft_breaks(advice.message, 200))
            flow.append(Paragraph(
                f"<font color='{color}'><b>[{advice.severity.name}]</b></font> "
                f"<b>{escape(advice.title)}</b> ({int(advice.code)}): {message}",
                normal_style,
            ))

        flow.append(Spacer(1, 10))
        flow.append(HRFlowable(width="100%", thickness=0.8, color="#e0e0e0"))
        flow.append(Spacer(1, 10))

    doc.build(flow)
    return out_path


def _insert_soft_breaks(text, max_len):
    """Prevents long lines from breaking the entire PDF layout."""

    def repl(m):
        s = m.group(0)
        if len(s) > max_len:
            parts = [s[i:i + max_len] for i in range(0, len(s), max_len)]
            return "\u200b".join(parts)
        return s

    return re.sub(r'\S{' + str(max_len + 1) + r',}', repl, text)
