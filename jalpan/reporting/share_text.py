"""
Share text

Plain-text digest of a finalized report for messaging apps
"""
from typing import Optional
from urllib.parse import quote

from jalpan.core.config import settings
from jalpan.domain.inspection.schemas import DailyReport, Status, format_display_date

SHARE_BASE_URL = "https://wa.me/?text="

STATUS_GLYPHS = {
    Status.PERFECT: "🌟",
    Status.GOOD: "✅",
    Status.NOT_GOOD: "❌",
    Status.PENDING: "❓",
}


def status_glyph(status: Status) -> str:
    return STATUS_GLYPHS.get(status, "❓")


def build_share_text(
    report: DailyReport,
    organization_name: Optional[str] = None,
    default_inspector: Optional[str] = None
) -> str:
    """
    Line-oriented digest: header, one line per category, actions block

    Args:
        report: finalized report
        organization_name: heading name (defaults to ORGANIZATION_NAME)
        default_inspector: fallback inspector name

    Returns:
        message text
    """
    organization = organization_name or settings.ORGANIZATION_NAME
    fallback = settings.INITIAL_INSPECTOR if default_inspector is None else default_inspector
    first_item = report.items[0].inspector_name if report.items else ""
    inspector = report.inspector_name or first_item or fallback

    message = f"🚀 *{organization.upper()} QUALITY REPORT*\n"
    message += f"📅 *Date:* {format_display_date(report.date)}\n"
    message += f"🕒 *Time:* {report.completion_time or 'Recorded'}\n"
    message += f"👨‍🍳 *Sewadar:* {inspector}\n\n"

    for item in report.items:
        sub_item = f" ({item.sub_item})" if item.sub_item else ""
        message += f"{status_glyph(item.status)} *{item.category}*{sub_item}\n"
        message += f"   👤 _Incharge: {item.counter_incharge or 'N/A'}_\n"
        if item.status == Status.NOT_GOOD and item.remark:
            message += f"   ⚠️ _Issue: {item.remark}_\n"

    if report.actions_taken:
        message += f"\n🛠️ *ACTIONS TAKEN:*\n{report.actions_taken}\n"

    message += "\n_Digital inspection generated via Jalpan App_"
    return message


def build_share_url(text: str) -> str:
    """Share target link with the message pre-filled"""
    return SHARE_BASE_URL + quote(text, safe="")
