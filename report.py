# report.py
# PDF export of the recorded shifts plus the summary box.
from __future__ import annotations

import io
from typing import Iterable, List

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from domain import ContractConfig, ShiftEntry, Summary
from services import format_duration, format_money
from utils import entries_to_dataframe

REPORT_TITLE = "Resumen de Horas Trabajadas"
REPORT_FILENAME = "horas_trabajadas.pdf"


def _fmt_number(x: float) -> str:
    return f"{x:g}"


def summary_lines(summary: Summary, config: ContractConfig) -> List[str]:
    return [
        f"Contrato mensual: {_fmt_number(config.contract_hours_per_month)} horas.",
        f"Días trabajados: {summary.unique_days_worked} días",
        f"Horas trabajadas en total: {format_duration(summary.total_hours)}",
        f"Horas regulares: {format_duration(summary.regular_hours)} ({format_money(summary.regular_pay)})",
        f"Horas extras: {format_duration(summary.extra_hours)} ({format_money(summary.extra_pay)})",
        f"Total extras: {format_money(summary.extra_pay)}",
        f"Total a cobrar: {format_money(summary.total_pay)}",
    ]


def report_dataframe(entries: Iterable[ShiftEntry]):
    return entries_to_dataframe(entries).rename(columns={"Horas": "Horas Trabajadas"})


def build_pdf(entries: Iterable[ShiftEntry], summary: Summary, config: ContractConfig,
              title: str = REPORT_TITLE) -> bytes:
    df = report_dataframe(entries)

    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=A4, topMargin=24, bottomMargin=24, leftMargin=24, rightMargin=24)
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(name="TitleCentered", parent=styles["Title"], alignment=TA_CENTER)
    summary_style = ParagraphStyle(
        name="Resumen", parent=styles["Normal"], textColor=colors.black,
        fontSize=11, leading=14, spaceBefore=0, spaceAfter=0
    )

    story = [Paragraph(title, title_style), Spacer(1, 8)]
    if df.empty:
        story.append(Paragraph("Sin datos para mostrar.", styles["Normal"]))
    else:
        data = [list(df.columns)] + df.values.tolist()
        table = Table(data, repeatRows=1, hAlign="CENTER")
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#F5F5F7")),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.black),
            ("ALIGN", (0, 0), (-1, -1), "CENTER"),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 10),
            ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#E0E0E0")),
            ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.whitesmoke, colors.white]),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ]))
        story.append(table)

    story += [Spacer(1, 12), Paragraph("<b>Resumen:</b>", styles["Normal"]), Spacer(1, 4)]
    cells = [[Paragraph(line, summary_style)] for line in summary_lines(summary, config)]
    box = Table(cells, colWidths=[min(420, 0.8 * doc.width)], hAlign="LEFT")
    box.setStyle(TableStyle([
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("BACKGROUND", (0, 0), (-1, -1), colors.white),
        ("BOX", (0, 0), (-1, -1), 0.6, colors.HexColor("#C7CCD6")),
    ]))
    story.append(box)

    def draw_page_border(canvas, doc_obj):
        canvas.saveState()
        w, h = doc_obj.pagesize
        canvas.setStrokeColor(colors.HexColor("#C7CCD6"))
        canvas.setLineWidth(0.8)
        margin = 12
        canvas.rect(margin, margin, w - 2*margin, h - 2*margin)
        canvas.restoreState()

    doc.build(story, onFirstPage=draw_page_border, onLaterPages=draw_page_border)
    return buf.getvalue()
