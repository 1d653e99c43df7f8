import logging
import re

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

# Notion rejects rich text objects longer than this
NOTION_TEXT_LIMIT = 2000


def clean_html(html_content: str, limit: int = NOTION_TEXT_LIMIT) -> str:
    """
    Converts HTML content to plain text and truncates it.

    Args:
        html_content: HTML string to clean
        limit: Maximum number of characters to keep

    Returns:
        Cleaned and truncated plain text
    """
    if not html_content:
        return ""
    try:
        soup = BeautifulSoup(html_content, 'html.parser')
        text = soup.get_text()
        text = re.sub(r'\s+', ' ', text).strip()
        return text[:limit]
    except Exception as e:
        logger.warning(f"Error cleaning HTML content: {e}")
        return html_content[:limit]


def chunk_text(text: str, size: int = NOTION_TEXT_LIMIT):
    """Splits text into pieces Notion accepts as separate rich text objects."""
    if not text:
        return [""]
    return [text[i:i + size] for i in range(0, len(text), size)]
