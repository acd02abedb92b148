"""Keyword-based goal classification shared by the advisor, planner and generator."""
from __future__ import annotations

import re
from typing import Dict, List, Literal, Optional, Tuple

GoalType = Literal["quick_visual", "fat_loss", "muscle_gain", "posture_definition", "general"]
Archetype = Literal["speed", "quick_visual", "fat_loss", "muscle_gain", "posture_definition", "general"]
Locale = Literal["ar", "en"]

GOAL_TYPES: Tuple[str, ...] = ("quick_visual", "fat_loss", "muscle_gain", "posture_definition", "general")

# Checked in this order; the first family with any hit wins.
GOAL_TYPE_KEYWORDS: Dict[str, List[str]] = {
    "quick_visual": [
        "vein",
        "veins",
        "vascular",
        "vascularity",
        "pump",
        "water cut",
        "bloated",
        "عروق",
        "وريد",
        "ضخ",
        "نفخة",
    ],
    "fat_loss": [
        "fat",
        "lose",
        "weight",
        "shred",
        "cut",
        "lean",
        "دهون",
        "خسارة",
        "وزن",
        "تنشيف",
        "نحت",
    ],
    "muscle_gain": [
        "bulk",
        "muscle",
        "mass",
        "hypertrophy",
        "gain",
        "تضخيم",
        "عضلات",
        "كتلة",
        "زيادة",
    ],
    "posture_definition": [
        "neck",
        "jaw",
        "jawline",
        "posture",
        "face",
        "shoulder",
        "رقبة",
        "فك",
        "وضعية",
        "وجه",
        "اكتاف",
    ],
}

SPEED_KEYWORDS = [
    "speed",
    "sprint",
    "faster",
    "agility",
    "acceleration",
    "explosive",
    "40 yard",
    "40-yard",
    "100m",
    "quickness",
    "سرعة",
    "أسرع",
    "اسرع",
    "عدو",
    "رشاقة",
]

# A period is "aligned" when its task text contains at least one of these.
ALIGNMENT_KEYWORDS: Dict[str, List[str]] = {
    "speed": ["sprint", "acceleration", "plyometric", "stride", "agility", "عدو", "تسارع"],
    "quick_visual": ["vascular", "pump", "sodium", "water", "glycogen", "عروق", "ضخ", "ترطيب"],
    "fat_loss": ["calorie", "deficit", "fat", "steps", "protein", "سعرات", "عجز", "دهون"],
    "muscle_gain": ["hypertrophy", "progressive overload", "surplus", "protein", "muscle", "تضخيم", "عضل", "فائض"],
    "posture_definition": ["posture", "chin tuck", "neck", "scapular", "thoracic", "وضعية", "رقبة", "لوح"],
    "general": ["training", "walk", "sleep", "protein", "mobility", "تمرين", "مشي", "نوم"],
}

SUPPLEMENT_ARCHETYPES = frozenset({"fat_loss", "muscle_gain", "quick_visual", "speed"})

_DURATION_PATTERNS: Tuple[Tuple[re.Pattern[str], int], ...] = (
    (re.compile(r"(\d+)\s*(?:days?|d|يوم|أيام|ايام)", re.IGNORECASE), 1),
    (re.compile(r"(\d+)\s*(?:weeks?|w|اسبوع|أسبوع|أسابيع|اسابيع)", re.IGNORECASE), 7),
    (re.compile(r"(\d+)\s*(?:months?|m|شهر|أشهر|اشهر)", re.IGNORECASE), 30),
)


def classify_goal_type(query: str) -> GoalType:
    """Map free-text goal to one of the five duration archetypes."""
    text = (query or "").lower()
    for goal_type, keywords in GOAL_TYPE_KEYWORDS.items():
        if any(keyword in text for keyword in keywords):
            return goal_type  # type: ignore[return-value]
    return "general"


def infer_archetype(query: str) -> Archetype:
    """Like classify_goal_type, but recognizes speed/athletic goals first."""
    text = (query or "").lower()
    if any(keyword in text for keyword in SPEED_KEYWORDS):
        return "speed"
    return classify_goal_type(text)


def extract_requested_days(query: str) -> Optional[int]:
    """Return an explicit duration in days ("6 weeks" -> 42), or None when the query names none."""
    for pattern, multiplier in _DURATION_PATTERNS:
        match = pattern.search(query or "")
        if not match:
            continue
        value = int(match.group(1))
        if value <= 0:
            continue
        return value * multiplier
    return None


def matches_alignment(text: str, archetype: str) -> bool:
    lowered = (text or "").lower()
    keywords = ALIGNMENT_KEYWORDS.get(archetype, ALIGNMENT_KEYWORDS["general"])
    return any(keyword in lowered for keyword in keywords)


def normalize_locale(value: object) -> Locale:
    return "en" if value == "en" else "ar"
