import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from .ai_provider import AIProvider
from .canvas_api import CanvasAPI
from .models.assignment import Assignment
from .notion_api import NotionAPI
from .urgency import Urgency, categorize_by_urgency
from .utils.config import Config
from .utils.dates import format_date

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful academic planning assistant. Your role is to analyze student "
    "assignments and create clear, actionable weekly plans."
)

DEFAULT_PLAN = 'Focus on completing tasks in order of urgency.'


@dataclass
class WeeklyReview:
    week: str
    summary: str
    plan: str
    categories: Dict[Urgency, List[Assignment]]


def build_plan_prompt(formatted_assignments: List[Dict]) -> str:
    return f"""Here are my upcoming assignments:

{json.dumps(formatted_assignments, indent=2)}

Please provide:
1. A brief summary of my workload for the week (2-3 sentences)
2. A strategic weekly plan with specific daily recommendations

Format your response as:
SUMMARY:
[your summary here]

WEEKLY PLAN:
[your plan here - be specific about which tasks to tackle which days]"""


def parse_plan_response(response: str):
    """Splits a SUMMARY/WEEKLY PLAN reply into (summary, plan)."""
    summary, _, plan = response.partition('WEEKLY PLAN:')
    summary = summary.replace('SUMMARY:', '').strip()
    return summary, plan.strip() or DEFAULT_PLAN


def week_label(today: datetime, tz) -> str:
    return f"{format_date(today, tz)} - {format_date(today + timedelta(days=7), tz)}"


def run_weekly_review(config: Config, canvas_api: CanvasAPI, notion_api: NotionAPI,
                      ai: AIProvider, now: Optional[datetime] = None) -> Optional[WeeklyReview]:
    logger.info("Starting Weekly Review...")
    now = now or datetime.now(timezone.utc)
    try:
        logger.info("Fetching assignments from Canvas...")
        assignments = canvas_api.get_upcoming_assignments(config.upcoming_days, now=now)

        if not assignments:
            logger.info("No upcoming assignments found!")
            return None

        logger.info(f"Found {len(assignments)} upcoming assignments")

        categories = categorize_by_urgency(assignments, now)
        logger.info(
            f"Categorized: {len(categories[Urgency.OVERDUE])} overdue, "
            f"{len(categories[Urgency.URGENT])} urgent, "
            f"{len(categories[Urgency.THIS_WEEK])} this week, "
            f"{len(categories[Urgency.UPCOMING])} upcoming"
        )

        logger.info("Generating AI summary and weekly plan...")
        prompt = build_plan_prompt(canvas_api.format_assignments_for_ai(assignments))
        summary, plan = parse_plan_response(ai.generate_completion(SYSTEM_PROMPT, prompt))

        review = WeeklyReview(week_label(now, config.tz), summary, plan, categories)

        logger.info("Saving to Notion...")
        notion_api.create_weekly_review(review.week, review.summary, review.plan, review.categories)
    except Exception as e:
        logger.error(f"Error running weekly review: {e}")
        raise

    logger.info("Weekly review completed successfully!")
    logger.info(f"Summary: {summary}")
    logger.info(f"Plan: {plan}")
    return review
