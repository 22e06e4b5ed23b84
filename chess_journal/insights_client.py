"""
LLM pattern summaries over journaled mistakes.

The model only sees what the player wrote (tag, description, reflection and
a little game context) and must answer with a JSON array of patterns.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Optional, Sequence

import httpx

from chess_journal.config import Settings
from chess_journal.db.models import Mistake
from chess_journal.errors import JournalError
from chess_journal.formatting import format_time_control
from chess_journal.move_index import format_move_display

logger = logging.getLogger(__name__)

_JSON_ARRAY_RE = re.compile(r"\[[\s\S]*\]")


class InsightsNotConfigured(JournalError):
    """No API key is configured for the LLM provider."""


class InsightsServiceError(JournalError):
    """The LLM call failed or returned something we could not parse."""


SYSTEM_PROMPT = """You are a chess coach reading a player's own mistake journal.
Identify recurring patterns based ONLY on what the player explicitly wrote.

Rules:
1. Only synthesize what they explicitly mentioned - do not invent problems
2. Quote their own words when relevant
3. Look for emotional patterns, thought process issues, or subtle themes they might not see
4. Be specific but concise
5. Focus on actionable insights"""


def build_prompt(mistakes: Sequence[Mistake]) -> str:
    """Numbered list of mistakes followed by the output contract."""
    lines = []
    for idx, m in enumerate(mistakes, start=1):
        game = m.game
        if game is not None:
            opponent = game.opponent_rating or "opponent"
            tc = format_time_control(game.time_control) or "unknown time control"
            context = f"{game.player_color} vs {opponent}, {tc}"
        else:
            context = "unknown game"
        lines.append(
            f"{idx}. [{m.primary_tag}] {m.brief_description} ({format_move_display(m.ply_index)})\n"
            f"   Game: {context}\n"
            f"   Reflection: {m.detailed_reflection or 'No detailed reflection'}"
        )

    summary = "\n\n".join(lines)
    return f"""Below are {len(mistakes)} recent mistakes the player has recorded:

{summary}

Identify 3-5 recurring patterns or themes.

Return your analysis as a JSON array of insight objects with this structure:
[
  {{
    "title": "Brief pattern name (5-8 words)",
    "description": "Detailed explanation with quotes (2-3 sentences)",
    "mistakeCount": number of mistakes showing this pattern
  }}
]

Return ONLY the JSON array, no other text."""


def parse_insights(text: str) -> list[dict]:
    """Pull the JSON array out of the reply (models like to wrap it in markdown)."""
    match = _JSON_ARRAY_RE.search(text or "")
    if not match:
        logger.warning("No JSON array in LLM response: %r", text)
        raise InsightsServiceError("Failed to parse insights from AI response")

    try:
        raw = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        logger.warning("Invalid JSON in LLM response: %r", text)
        raise InsightsServiceError("Failed to parse insights from AI response") from exc

    if not isinstance(raw, list):
        raise InsightsServiceError("Failed to parse insights from AI response")

    insights = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("title"):
            continue
        try:
            count = int(item.get("mistakeCount", 0))
        except (TypeError, ValueError):
            count = 0
        insights.append({
            "title": str(item["title"]),
            "description": str(item.get("description", "")),
            "mistakeCount": count,
        })
    return insights


async def generate_pattern_summary(
    mistakes: Sequence[Mistake],
    settings: Settings,
    client: Optional[httpx.AsyncClient] = None,
) -> list[dict]:
    """Ask the LLM for recurring patterns across ``mistakes``."""
    if not settings.openai_api_key:
        raise InsightsNotConfigured("AI insights are not configured (missing OpenAI API key)")

    payload = {
        "model": settings.openai_model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_prompt(mistakes)},
        ],
        "temperature": 0.3,
        "max_tokens": 1500,
    }
    headers = {
        "Authorization": f"Bearer {settings.openai_api_key}",
        "Content-Type": "application/json",
    }
    url = f"{settings.openai_base_url.rstrip('/')}/chat/completions"

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=60) as own_client:
                resp = await own_client.post(url, headers=headers, json=payload)
        else:
            resp = await client.post(url, headers=headers, json=payload)
    except httpx.HTTPError as exc:
        logger.error("LLM request failed: %s", exc)
        raise InsightsServiceError("AI insights service error") from exc

    if resp.status_code != 200:
        logger.error("LLM returned %s: %s", resp.status_code, resp.text[:500])
        raise InsightsServiceError("AI insights service error")

    try:
        text = resp.json()["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        logger.error("Unexpected LLM response shape: %s", resp.text[:500])
        raise InsightsServiceError("AI insights service error") from exc

    return parse_insights(text)
