"""
Commitment pattern tables.

Each language contributes three ordered tiers: concrete time, action and
vague. Time patterns carry a fixed offset, a unit for a captured numeral, or a
calendar rule. Adding a language means adding a `LanguagePatterns` entry to
`LANGUAGES`; the detector does not change.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

# Calendar rules for time patterns.
RULE_NEXT_MORNING = "next_morning"
RULE_MORNING = "morning"
RULE_CLOCK = "clock"  # captured HH:MM, today or tomorrow if already past
RULE_NEXT_DAY_CLOCK = "next_day_clock"  # captured HH:MM on the next calendar day

UNIT_MINUTES = "minutes"
UNIT_HOURS = "hours"

# Uzbek Latin is written with several apostrophe variants.
_APOS = "['‘’ʻ`]"


@dataclass(frozen=True)
class TimePattern:
    """Concrete-time phrase and how it maps to a deadline."""

    regex: str
    minutes: Optional[int] = None
    hours: Optional[int] = None
    unit: Optional[str] = None
    rule: Optional[str] = None


@dataclass(frozen=True)
class LanguagePatterns:
    code: str
    time: tuple[TimePattern, ...] = field(default_factory=tuple)
    action: tuple[str, ...] = field(default_factory=tuple)
    vague: tuple[str, ...] = field(default_factory=tuple)


RUSSIAN = LanguagePatterns(
    code="ru",
    time=(
        TimePattern(r"через\s+пол\s*часа", minutes=30),
        TimePattern(r"через\s+час", minutes=60),
        TimePattern(r"через\s+(\d+)\s*мин", unit=UNIT_MINUTES),
        TimePattern(r"через\s+(\d+)\s*час", unit=UNIT_HOURS),
        TimePattern(r"(\d+)\s*мин", unit=UNIT_MINUTES),
        TimePattern(r"будет\s+готово\s+через", minutes=30),
        TimePattern(
            r"завтра\s+(?:к|до|в)\s+(\d{1,2}):(\d{2})", rule=RULE_NEXT_DAY_CLOCK
        ),
        TimePattern(
            r"(?:к|до|в)\s+(\d{1,2}):(\d{2})\s+завтра", rule=RULE_NEXT_DAY_CLOCK
        ),
        TimePattern(r"(?:к|до)\s+(\d{1,2}):(\d{2})", rule=RULE_CLOCK),
        TimePattern(r"завтра\s+(?:с\s+)?утра|завтра\s+утром", rule=RULE_NEXT_MORNING),
        TimePattern(r"завтра", hours=24),
        TimePattern(r"сегодня", hours=4),
        TimePattern(r"с\s+утра", rule=RULE_MORNING),
        TimePattern(r"(?:в\s+)?ближайшее\s+время", hours=2),
        TimePattern(r"до\s+конца\s+дня", hours=8),
        TimePattern(r"к\s+вечеру", hours=6),
        TimePattern(r"к\s+обеду", hours=4),
    ),
    action=(
        r"сформирую\s+тикет",
        r"создам\s+тикет",
        r"возьм[уе]тся\s+за\s+решение",
        r"возьмутся\s+за",
        r"займ[уе]сь",
        r"займ[уе]тся",
        r"отработа[юетм]",
        r"отработать",
        r"исправ[люяиет]",
        r"поправ[люяиет]",
        r"сделаю",
        r"сделаем",
        r"сделают",
        r"будет\s+сделано",
        r"будет\s+готово",
        r"будет\s+исправлено",
        r"будет\s+решено",
        r"решу",
        r"решим",
        r"решат",
        r"проверю",
        r"проверим",
        r"проверят",
        r"проверить",
        r"уточню",
        r"уточним",
        r"узнаю",
        r"узнаем",
        r"передам",
        r"передадим",
        r"свяжусь",
        r"свяжемся",
        r"перезвоню",
        r"перезвоним",
        r"отвечу",
        r"ответим",
        r"обработа[юетм]",
        r"постараюсь",
        r"постараемся",
        r"выполн[юиет]",
        r"посмотрю",
        r"посмотрим",
        r"посмотрят",
        r"(?:надо|нужно|срочно).*(?:проверить|сделать)",
    ),
    vague=(
        r"минуточку",
        r"подождите",
        r"разберусь",
        r"разбер[её]мся",
        r"очень\s+скоро",
        r"скоро",
        r"чуть\s+позже",
        r"попозже",
        r"позже",
        r"в\s+процессе",
        r"работаем",
        r"разбираемся",
        r"займ[её]мся",
        r"возьм[её]мся",
    ),
)

UZBEK = LanguagePatterns(
    code="uz",
    time=(
        TimePattern(
            r"ertaga\s+(?:soat\s+)?(\d{1,2}):(\d{2})", rule=RULE_NEXT_DAY_CLOCK
        ),
        TimePattern(r"ertaga\s+ertalab", rule=RULE_NEXT_MORNING),
        TimePattern(r"ertaga", hours=24),
        TimePattern(r"bugun", hours=4),
        TimePattern(r"bir\s+soat(?:da|dan\s+keyin)", minutes=60),
        TimePattern(r"yarim\s+soat(?:da|dan\s+keyin)", minutes=30),
        TimePattern(r"(\d+)\s*daqiqa(?:da|dan\s+keyin)?", unit=UNIT_MINUTES),
        TimePattern(r"(\d+)\s*soat(?:da|dan\s+keyin)?", unit=UNIT_HOURS),
        TimePattern(r"ertalab", rule=RULE_MORNING),
        TimePattern(r"kechqurun(?:gacha)?", hours=8),
        TimePattern(r"tushlik(?:gacha)?", hours=4),
        TimePattern(r"yaqin\s+vaqt(?:da)?", hours=2),
    ),
    action=(
        r"qilaman",
        r"qilamiz",
        r"qilishadi",
        r"tekshiraman",
        r"tekshiramiz",
        rf"to{_APOS}g{_APOS}irlay(?:man|miz)",
        r"tuzataman",
        r"tuzatamiz",
        r"yechaman",
        r"yechamiz",
        rf"bog{_APOS}lana(?:man|miz)",
        r"xabar\s+bera(?:man|miz)",
        r"javob\s+bera(?:man|miz)",
        r"ishlab\s+chiqa(?:man|miz)",
        rf"tayyor\s+bo{_APOS}ladi",
        r"amalga\s+oshiriladi",
        r"bajariladi",
        rf"ko{_APOS}ra(?:man|miz)",
        r"aniqlay(?:man|miz)",
        r"bajara(?:man|miz)",
    ),
    vague=(
        r"hozir",
        r"kutib\s+turing",
        r"bir\s+daqiqa",
        r"tez\s+orada",
        r"yaqinda",
        r"keyinroq",
        r"ishlaymiz",
    ),
)

ENGLISH = LanguagePatterns(
    code="en",
    time=(
        TimePattern(r"\bin\s+half\s+an\s+hour\b", minutes=30),
        TimePattern(r"\bin\s+an\s+hour\b", minutes=60),
        TimePattern(r"\bin\s+(\d+)\s*min(?:ute)?s?\b", unit=UNIT_MINUTES),
        TimePattern(r"\bin\s+(\d+)\s*(?:hours?|hrs?)\b", unit=UNIT_HOURS),
        TimePattern(
            r"\btomorrow\s+(?:by|at|until)\s+(\d{1,2}):(\d{2})\b",
            rule=RULE_NEXT_DAY_CLOCK,
        ),
        TimePattern(
            r"\b(?:by|at|until)\s+(\d{1,2}):(\d{2})\s+tomorrow\b",
            rule=RULE_NEXT_DAY_CLOCK,
        ),
        TimePattern(r"\b(?:by|at|until)\s+(\d{1,2}):(\d{2})\b", rule=RULE_CLOCK),
        TimePattern(r"\btomorrow\s+morning\b", rule=RULE_NEXT_MORNING),
        TimePattern(r"\btomorrow\b", hours=24),
        TimePattern(r"\b(?:this|in\s+the)\s+morning\b", rule=RULE_MORNING),
        TimePattern(r"\b(?:by\s+)?(?:the\s+)?end\s+of\s+(?:the\s+)?day\b|\beod\b", hours=8),
        TimePattern(r"\bby\s+(?:the\s+)?evening\b|\btonight\b", hours=6),
        TimePattern(r"\bby\s+lunch\b", hours=4),
        TimePattern(r"\btoday\b", hours=4),
    ),
    action=(
        r"\b(?:i|we)\s*(?:['’]ll|\s+will)\s+(?:check|fix|look|handle|resolve|call|send|update|investigate|get\s+back)",
        r"\bwill\s+be\s+(?:fixed|done|ready|resolved)\b",
    ),
    vague=(
        r"\b(?:in|one|just)\s+(?:a\s+)?(?:moment|minute|sec(?:ond)?)\b",
        r"\b(?:please\s+wait|hold\s+on)\b",
        r"\blet\s+me\s+(?:see|check)\b",
        r"\bsoon\b",
        r"\blater\b",
        r"\bworking\s+on\s+it\b",
    ),
)

LANGUAGES: tuple[LanguagePatterns, ...] = (RUSSIAN, UZBEK, ENGLISH)
