import io
from datetime import date
from typing import List, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from steptrack.domain.Group import Group
from steptrack.domain.Individual import Individual


def _styled_table(data):
    table = Table(data, repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0,0), (-1,0), colors.HexColor("#4CAF50")),
        ("TEXTCOLOR", (0,0), (-1,0), colors.whitesmoke),
        ("ALIGN", (0,0), (-1,-1), "CENTER"),
        ("FONTNAME", (0,0), (-1,0), "Helvetica-Bold"),
        ("FONTSIZE", (0,0), (-1,0), 12),
        ("BOTTOMPADDING", (0,0), (-1,0), 10),
        ("GRID", (0,0), (-1,-1), 0.5, colors.grey),
    ]))
    return table


def generate_leaderboard_pdf(ranked_groups: List[Tuple[Group, int]], top_individuals: List[Individual]) -> bytes:
    """Generate a PDF with the group leaderboard and today's top daily achievers."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=A4,
        rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20
    )

    styles = getSampleStyleSheet()
    elements = [
        Paragraph(f"Step Leaderboard – {date.today().strftime('%d.%m.%Y')}", styles["Title"]),
        Spacer(1, 16),
        Paragraph("Groups", styles["Heading2"]),
    ]

    data = [["Rank", "Group", "Members", "Weekly Goal", "Total Steps"]]
    for rank, (group, total) in enumerate(ranked_groups, start=1):
        data.append([rank, f"{group.group_name} ({group.group_id})", len(group.member_ids),
                     group.weekly_group_goal, total])
    elements.append(_styled_table(data))

    elements.extend([Spacer(1, 16), Paragraph("Top Daily Goal Achievers", styles["Heading2"])])
    if top_individuals:
        data = [["Rank", "Name", "ID", "Steps Today", "Daily Goal"]]
        for rank, ind in enumerate(top_individuals, start=1):
            data.append([rank, ind.name, ind.id, ind.today_steps, ind.daily_step_goal])
        elements.append(_styled_table(data))
    else:
        elements.append(Paragraph("No individuals met their daily goal today.", styles["Normal"]))

    doc.build(elements)
    return buf.getvalue()
