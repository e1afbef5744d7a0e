# core/report.py

from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, PageBreak, Image
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.enums import TA_LEFT, TA_CENTER
import matplotlib.pyplot as plt
from datetime import datetime
from xml.sax.saxutils import escape
import numpy as np

from core.logger import get_logger
from core.state import InterviewState

logger = get_logger("report")

styles = getSampleStyleSheet()
title_style = ParagraphStyle(
    'TitleStyle',
    parent=styles['Heading1'],
    fontSize=22,
    alignment=TA_CENTER,
    spaceAfter=20
)
section_style = ParagraphStyle(
    'SectionStyle',
    parent=styles['Heading2'],
    fontSize=16,
    alignment=TA_LEFT,
    spaceBefore=14,
    spaceAfter=8
)
normal_style = styles["BodyText"]

CHANGE_LABELS = {1: "Comprar menos", 2: "Mantener", 3: "Comprar más"}


def create_recommendations_chart(recommendations, out_path="recommendations_chart.png"):
    """
    Grouped bars per product: last week's purchases vs suggested purchase.
    Returns the image path, or None when there is nothing to plot.
    """
    if not recommendations:
        return None

    labels = [r.get("producto_nombre", "?") for r in recommendations]
    current = [float(r.get("orden_actual") or 0) for r in recommendations]
    suggested = [float(r.get("compra_sugerida") or 0) for r in recommendations]

    x = np.arange(len(labels))
    width = 0.38

    fig, ax = plt.subplots(figsize=(max(6, len(labels) * 0.9), 3.5))
    ax.bar(x - width / 2, current, width, label="Compras última semana")
    ax.bar(x + width / 2, suggested, width, label="Compra sugerida")
    ax.set_xticks(x)
    ax.set_xticklabels(labels, rotation=30, ha="right")
    ax.set_ylabel("Unidades")
    ax.set_title("Recomendaciones de compra")
    ax.legend()
    fig.tight_layout()
    fig.savefig(out_path, dpi=150)
    plt.close(fig)
    return out_path


def export_pdf(state: InterviewState, summary=None, recommendations=None, filename="interview_report.pdf"):
    """
    state: InterviewState (answers per question + transcript)
    summary: narrative text from summarize_conversation, optional
    recommendations: list of recommendation dicts, optional
    """
    doc = SimpleDocTemplate(filename, pagesize=letter)
    story = []

    # Title page
    story.append(Paragraph("Reporte de actividad comercial", title_style))
    story.append(Paragraph(datetime.now().strftime("%Y-%m-%d %H:%M"), normal_style))
    story.append(Spacer(1, 30))

    # Answers per topic
    story.append(Paragraph("Respuestas", section_style))
    for i, question in enumerate(state.questions):
        answer = state.answers[i] if i < len(state.answers) else None
        story.append(Paragraph(f"<b>{i + 1}. {escape(question)}</b>", normal_style))
        story.append(Paragraph(escape(answer) if answer else "<i>(sin respuesta)</i>", normal_style))
        story.append(Spacer(1, 10))

    if summary:
        story.append(Paragraph("Resumen", section_style))
        for paragraph in str(summary).split("\n"):
            if paragraph.strip():
                story.append(Paragraph(escape(paragraph), normal_style))
        story.append(Spacer(1, 12))

    if recommendations:
        story.append(PageBreak())
        story.append(Paragraph("Recomendaciones de compra", section_style))
        chart_path = create_recommendations_chart(recommendations, out_path=f"{filename}.chart.png")
        if chart_path:
            story.append(Image(chart_path, width=450, height=260))
            story.append(Spacer(1, 16))
        for rec in recommendations:
            change = CHANGE_LABELS.get(rec.get("cambio_de_compra"), "-")
            story.append(Paragraph(
                f"<b>{escape(str(rec.get('producto_nombre', '')))}</b>: {change}, "
                f"sugerido {rec.get('compra_sugerida')} (actual {rec.get('orden_actual')})",
                normal_style,
            ))
            if rec.get("justificacion"):
                story.append(Paragraph(f"<i>{escape(rec['justificacion'])}</i>", normal_style))
            story.append(Spacer(1, 8))

    # Transcript
    story.append(PageBreak())
    story.append(Paragraph("Transcripción", section_style))
    story.append(Spacer(1, 12))
    for turn in state.transcript:
        speaker = "Usuario" if turn["role"] == "user" else "Asistente"
        story.append(Paragraph(f"<b>{speaker}:</b> {escape(turn['content'])}", normal_style))
        story.append(Spacer(1, 6))

    doc.build(story)
    logger.info("PDF report written to %s", filename)
    return filename
