from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from datetime import datetime, timezone
import logging
import io

from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib import colors

from propman.api.deps import get_store
from propman.core.config import settings
from propman.core.stats import compute_stats, portfolio_rollups
from propman.core.store import DataStore

router = APIRouter()
logger = logging.getLogger(__name__)

HEADER_STYLE = TableStyle([
    ('BACKGROUND', (0, 0), (-1, 0), colors.navy),
    ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
    ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
    ('GRID', (0, 0), (-1, -1), 0.5, colors.grey)
])

def _money(amount: float) -> str:
    return f"${amount:,.0f}"

@router.get("/reports/portfolio/pdf")
def get_portfolio_pdf_report(store: DataStore = Depends(get_store)):
    properties, tenants = store.snapshot()
    stats = compute_stats(properties, tenants)
    rollups = portfolio_rollups(properties, tenants)
    generated_at = datetime.now(timezone.utc)

    logger.info(f"Portfolio PDF requested: {len(properties)} properties")

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4)
    styles = getSampleStyleSheet()
    elements = []

    # 1. Header
    elements.append(Paragraph(f"{settings.PROJECT_NAME}: Portfolio Report", styles['Title']))
    elements.append(Spacer(1, 12))
    elements.append(Paragraph(f"<b>Generated:</b> {generated_at.strftime('%Y-%m-%d %H:%M:%S')} UTC", styles['Normal']))
    elements.append(Spacer(1, 24))

    # 2. Portfolio summary
    elements.append(Paragraph("Portfolio Summary", styles['Heading2']))
    summary_data = [
        ["Metric", "Value"],
        ["Properties", str(stats.total_properties)],
        ["Active Tenants", str(stats.total_tenants)],
        ["Monthly Rent", _money(stats.total_monthly_rent)],
        ["Occupancy", f"{stats.occupancy_rate:.0f}%"],
        ["Late Payments", str(stats.late_payments)],
    ]
    summary_table = Table(summary_data, colWidths=[200, 150])
    summary_table.setStyle(HEADER_STYLE)
    elements.append(summary_table)
    elements.append(Spacer(1, 24))

    # 3. Per-property rollups
    elements.append(Paragraph("Properties", styles['Heading2']))
    if properties:
        rows = [["Property", "Type", "City", "Tenants", "Monthly Rent"]]
        for prop, rollup in zip(properties, rollups):
            occupied = str(rollup.active_tenants)
            if prop.units:
                occupied = f"{occupied} / {prop.units}"
            rows.append([
                prop.name,
                prop.type.value.replace("_", " "),
                f"{prop.city}, {prop.state}",
                occupied,
                _money(rollup.monthly_rent),
            ])
        property_table = Table(rows, colWidths=[150, 80, 120, 60, 90], repeatRows=1)
        property_table.setStyle(HEADER_STYLE)
        elements.append(property_table)
    else:
        elements.append(Paragraph("No properties yet.", styles['Normal']))

    elements.append(Spacer(1, 48))
    footer_text = "Figures count active tenants only. Properties without a unit count are treated as one unit."
    elements.append(Paragraph(footer_text, ParagraphStyle(name='Footer', fontSize=8, textColor=colors.grey, alignment=1)))

    try:
        doc.build(elements)
    except Exception as e:
        logger.error(f"PDF Build Failed: {str(e)}")
        raise HTTPException(status_code=500, detail="PDF generation failed during document build.")

    pdf_bytes = buffer.getvalue()
    buffer.seek(0)
    return StreamingResponse(
        buffer,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"attachment; filename=Portfolio_Report_{generated_at.strftime('%Y%m%d')}.pdf",
            "Content-Length": str(len(pdf_bytes))
        }
    )
