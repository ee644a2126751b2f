# ===========================================================
# reports/utils_export.py
# ===========================================================
import io

from django.http import HttpResponse
from django.utils import timezone
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from evaluations.calculator import calculate_annual_reward, get_reward_display

HEADER_COLOR = "1976D2"


def _score(value):
    return "-" if value is None else round(value, 2)


# ===========================================================
# Excel Export (monthly evaluations)
# ===========================================================
def generate_monthly_excel(evaluations, year, month, filename=None):
    wb = Workbook()
    ws = wb.active
    ws.title = f"{year}-{month:02d}"

    headers = [
        "Staff Name", "Email", "Department", "Position", "Period", "Status",
        "Performance", "Behavior", "Growth", "Total Score", "Rank",
    ]
    ws.append(headers)

    for col in range(1, len(headers) + 1):
        cell = ws.cell(row=1, column=col)
        cell.font = Font(bold=True, color="FFFFFF")
        cell.fill = PatternFill("solid", fgColor=HEADER_COLOR)
        cell.alignment = Alignment(horizontal="center")

    for e in evaluations:
        ws.append([
            e.staff.full_name,
            e.staff.email,
            e.staff.department or "-",
            e.staff.position or "-",
            e.evaluation_period,
            e.get_status_display(),
            _score(e.performance_score),
            _score(e.behavior_score),
            _score(e.growth_score),
            _score(e.total_score),
            e.rank or "-",
        ])

    for column in ws.columns:
        width = max(len(str(cell.value or "")) for cell in column)
        ws.column_dimensions[column[0].column_letter].width = min(width + 2, 40)

    filename = filename or f"evaluations_{year}_{month:02d}.xlsx"
    response = HttpResponse(content_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    wb.save(response)
    return response


# ===========================================================
# PDF Export (single staff member, one year)
# ===========================================================
def generate_annual_pdf(staff, year, evaluations, annual=None):
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4),
        title=f"{staff.full_name} {year} Evaluation Report",
    )

    styles = getSampleStyleSheet()
    story = [
        Paragraph(f"<b>Annual Evaluation Report {year}</b>", styles["Title"]),
        Spacer(1, 12),
        Paragraph(f"<b>Staff:</b> {staff.full_name} ({staff.email})", styles["Normal"]),
        Paragraph(f"<b>Department:</b> {staff.department or '-'}", styles["Normal"]),
        Paragraph(f"<b>Company:</b> {staff.company.company_name}", styles["Normal"]),
        Paragraph(f"<b>Generated on:</b> {timezone.now().strftime('%d %b %Y, %H:%M')}", styles["Normal"]),
    ]

    if annual is not None:
        reward = calculate_annual_reward(annual.rank) if annual.rank else 0
        story.append(Paragraph(
            f"<b>Annual average:</b> {annual.average_score} &nbsp; <b>Rank:</b> {annual.rank or '-'} "
            f"&nbsp; <b>Annual reward:</b> {get_reward_display(reward)}",
            styles["Normal"],
        ))
    story.append(Spacer(1, 12))

    data = [["Period", "Performance", "Behavior", "Growth", "Total Score", "Rank"]]
    for e in evaluations:
        data.append([
            e.evaluation_period,
            _score(e.performance_score),
            _score(e.behavior_score),
            _score(e.growth_score),
            _score(e.total_score),
            e.rank or "-",
        ])

    table = Table(data, repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor(f"#{HEADER_COLOR}")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("ALIGN", (0, 0), (-1, -1), "CENTER"),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ]))

    story.append(table)
    doc.build(story)
    buffer.seek(0)

    response = HttpResponse(buffer, content_type="application/pdf")
    filename = f"evaluation_{staff.id}_{year}.pdf"
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response
