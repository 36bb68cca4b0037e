"""Heuristic free-text -> task draft parser.

Used when no LLM is configured or the LLM's structured output is unusable.
Field rules are evaluated in list order and the first rule that matches a
field sets it; later rules for the same field are skipped. Order matters:
the HIGHEST priority keywords are checked before the HIGH ones.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple

from better_projects_ai.models.domain import ParsedTaskDraft, TaskPriority, truncate_title

logger = logging.getLogger(__name__)

UNTITLED = "Untitled task"

TAG_VOCABULARY = [
    "bug",
    "feature",
    "ui",
    "api",
    "documentation",
    "testing",
    "design",
    "frontend",
    "backend",
]

_HOURS_PATTERNS = [
    re.compile(r"(?<![\d.])(\d+)\s*hours?\b", re.IGNORECASE),
    re.compile(r"\btakes\s+(\d+)\s+hours\b", re.IGNORECASE),
]

_DUE_PHRASE = re.compile(
    r"\b(?:due|by|on)\s+(?:on\s+|by\s+)?([A-Za-z0-9,/\- ]+?)(?=[.;!?\n]|$)",
    re.IGNORECASE,
)

_DATE_FORMATS = [
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%B %d %Y",
    "%b %d %Y",
    "%d %B %Y",
    "%d %b %Y",
]
# Formats without a year resolve to the next occurrence of that day
_YEARLESS_FORMATS = ["%B %d", "%b %d", "%d %B", "%d %b", "%m/%d"]

_WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
_ORDINAL = re.compile(r"(\d+)(st|nd|rd|th)\b", re.IGNORECASE)


def parse_date(phrase: str, today: Optional[date] = None) -> Optional[date]:
    """Parse a loose date phrase, returning None when it is not a date."""
    today = today or date.today()
    cleaned = _ORDINAL.sub(r"\1", phrase.replace(",", " ")).strip().lower()
    cleaned = re.sub(r"\s+", " ", cleaned)
    if cleaned.startswith("next "):
        cleaned = cleaned[5:]
    if not cleaned:
        return None

    if cleaned == "today":
        return today
    if cleaned == "tomorrow":
        return today + timedelta(days=1)
    if cleaned in _WEEKDAYS:
        days_ahead = (_WEEKDAYS.index(cleaned) - today.weekday()) % 7 or 7
        return today + timedelta(days=days_ahead)

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date()
        except ValueError:
            continue

    for fmt in _YEARLESS_FORMATS:
        try:
            # parse with a leap year so "feb 29" is accepted
            parsed = datetime.strptime(f"{cleaned} 2000", f"{fmt} %Y").date()
        except ValueError:
            continue
        for year in (today.year, today.year + 1):
            try:
                candidate = parsed.replace(year=year)
            except ValueError:
                continue
            if candidate >= today:
                return candidate
        return None
    return None


def _due_date(text: str, today: Optional[date] = None) -> Optional[str]:
    for match in _DUE_PHRASE.finditer(text):
        words = match.group(1).split()[:4]
        # longest prefix first: "march 5 and send it" -> "march 5"
        for end in range(len(words), 0, -1):
            parsed = parse_date(" ".join(words[:end]), today)
            if parsed is not None:
                return parsed.isoformat()
    return None


def _contains_any(*keywords: str) -> Callable[[str], bool]:
    def predicate(text: str) -> bool:
        lowered = text.lower()
        return any(keyword in lowered for keyword in keywords)

    return predicate


def _first_group(pattern: "re.Pattern[str]") -> Callable[[str], Optional[int]]:
    def transform(text: str) -> Optional[int]:
        match = pattern.search(text)
        return int(match.group(1)) if match else None

    return transform


def _tags(text: str) -> Optional[List[str]]:
    lowered = text.lower()
    found = [tag for tag in TAG_VOCABULARY if tag in lowered]
    return found or None


@dataclass(frozen=True)
class Rule:
    """Sets `field` to `transform(text)` when `predicate(text)` holds."""

    name: str
    field: str
    predicate: Callable[[str], bool]
    transform: Callable[[str], Any]


def _always(_: str) -> bool:
    return True


RULES: List[Rule] = [
    Rule("highest-keywords", "priority",
         _contains_any("urgent", "critical", "highest priority"), lambda _: TaskPriority.HIGHEST),
    Rule("high-keywords", "priority",
         _contains_any("high priority", "important"), lambda _: TaskPriority.HIGH),
    Rule("low-keywords", "priority",
         _contains_any("low priority", "whenever"), lambda _: TaskPriority.LOW),
    Rule("default-priority", "priority", _always, lambda _: TaskPriority.MEDIUM),
    Rule("n-hours", "estimated_hours",
         lambda t: _HOURS_PATTERNS[0].search(t) is not None, _first_group(_HOURS_PATTERNS[0])),
    Rule("takes-n-hours", "estimated_hours",
         lambda t: _HOURS_PATTERNS[1].search(t) is not None, _first_group(_HOURS_PATTERNS[1])),
    Rule("tag-vocabulary", "tags", _always, _tags),
    Rule("due-phrase", "due_date", _always, _due_date),
]


def split_title(text: str) -> Tuple[str, Optional[str]]:
    """Split free text into (title, description)."""
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    if not lines:
        return UNTITLED, None

    if len(lines) > 1:
        title, description = lines[0], "\n".join(lines[1:])
    elif "." in lines[0]:
        cut = lines[0].index(".") + 1
        title, description = lines[0][:cut], lines[0][cut:].strip()
    else:
        title, description = lines[0], ""

    return truncate_title(title) or UNTITLED, description or None


def apply_rules(text: str, rules: List[Rule] = RULES) -> Dict[str, Any]:
    """Evaluate rules in order; the first matching rule per field wins."""
    fields: Dict[str, Any] = {}
    for rule in rules:
        if rule.field in fields:
            continue
        try:
            if not rule.predicate(text):
                continue
            value = rule.transform(text)
        except ValueError as e:
            logger.debug(f"Rule {rule.name} skipped: {e}")
            continue
        if value is not None:
            fields[rule.field] = value
    return fields


def extract(text: Optional[str]) -> ParsedTaskDraft:
    """Build a task draft from free text. Never raises; always sets a title."""
    text = text or ""
    title, description = split_title(text)
    fields = apply_rules(text)
    return ParsedTaskDraft(title=title, description=description, **fields)
