"""
AI report summary

Formats a finalized report into a prompt and asks the chat model for a
short summary for the kitchen staff. Never raises: missing credentials and
API failures come back as fixed messages.
"""
from typing import Optional

from jalpan.core.logging import get_logger
from jalpan.domain.inspection.schemas import DailyReport
from jalpan.llm.client import LLMClient, get_llm

logger = get_logger(__name__)

MISSING_KEY_MESSAGE = "Error: API Key is missing. Please set it in settings."
FAILURE_MESSAGE = "Failed to analyze report. Please check your API key and connection."
EMPTY_MESSAGE = "No analysis generated."

SYSTEM_PROMPT = """You are the Quality Control Manager for Jalpan Services canteen.
Review the daily food quality check report you are given.

The rating system is:
- PERFECT (Exceptional quality)
- GOOD (Standard acceptable quality)
- NOT_GOOD (Quality failure, requires action)

Generate a concise, professional summary for the kitchen staff.
1. Mention what specific items were cooked (e.g. which subzi, which snack) if listed.
2. Highlight any items marked NOT_GOOD.
3. Mention items marked PERFECT as "Highlights" to encourage the team.
4. Acknowledge the "Actions Taken" if any were recorded.
5. Give a 1-sentence action item if there are pending issues.

Keep it brief (max 120 words)."""


def format_report_for_prompt(report: DailyReport) -> str:
    """Report data block for the prompt"""
    lines = [
        f"Date: {report.date}",
        f"Sewadar on Duty: {report.inspector_name or 'Unknown'}",
        "",
    ]
    for item in report.items:
        line = f"- {item.category}"
        if item.sub_item:
            line += f" ({item.sub_item})"
        line += f": {item.status.value} ({item.remark or 'No remark'})"
        lines.append(line)

    text = "\n".join(lines) + "\n"
    if report.actions_taken:
        text += f"\nActions Taken: {report.actions_taken}\n"
    return text


def analyze_report(report: DailyReport, llm: Optional[LLMClient] = None) -> str:
    """
    Summarize a report

    Args:
        report: finalized report
        llm: client to use (defaults to one built from settings)

    Returns:
        summary text or a fixed failure message
    """
    llm = llm or get_llm()
    if not llm.has_api_key:
        return MISSING_KEY_MESSAGE

    user_prompt = f"REPORT DATA:\n{format_report_for_prompt(report)}"
    try:
        summary = llm.complete(SYSTEM_PROMPT, user_prompt)
    except Exception as e:
        logger.error(f"LLM summary error for {report.date}: {e}")
        return FAILURE_MESSAGE

    return summary.strip() or EMPTY_MESSAGE
