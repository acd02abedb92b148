"""User profile validation, defaults, unit conversion and persistence."""
from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from ascend.services.client_storage import USER_PROFILE_KEY, ClientStorage
from ascend.services.goal_archetypes import Locale

CM_PER_INCH = 2.54
LB_PER_KG = 2.2046226218

REQUIRED_TEXT_FIELDS = ("injuriesOrConditions", "availableEquipment", "activityLevel", "sex", "units")

AGE_RANGE = (13, 90)
HEIGHT_RANGE = (120, 230)
WEIGHT_RANGE = (35, 250)

_MESSAGES = {
    "age": ("Age must be between 13 and 90.", "العمر يجب أن يكون بين 13 و90."),
    "height": ("Height is out of valid range.", "الطول غير صالح."),
    "weight": ("Weight is out of valid range.", "الوزن غير صالح."),
    "sex": ("Select sex.", "اختر الجنس."),
    "activity": ("Select activity level.", "اختر مستوى النشاط."),
    "injuries": ("Injuries/conditions field is required.", "اكتب الإصابات/الحالة (أو none)."),
    "equipment": ("Available equipment is required.", "اكتب المعدات المتاحة."),
    "types": ("Profile fields have invalid types.", "بعض حقول الملف الشخصي بنوع غير صالح."),
}


def create_default_profile(goal: str = "") -> Dict[str, Any]:
    return {
        "age": 28,
        "sex": "male",
        "activityLevel": "moderate",
        "primaryGoal": goal,
        "injuriesOrConditions": "",
        "availableEquipment": "",
        "units": "metric",
        "heightCm": 175,
        "weightKg": 75,
    }


def _finite_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def _in_range(value: Any, bounds: tuple[int, int]) -> bool:
    number = _finite_number(value)
    return number is not None and bounds[0] <= number <= bounds[1]


def _filled(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def is_valid_profile(profile: Any) -> bool:
    """Shape check applied to request bodies before planning or generation."""
    if not isinstance(profile, dict):
        return False
    if not all(_filled(profile.get(key)) for key in REQUIRED_TEXT_FIELDS):
        return False
    return (
        _in_range(profile.get("age"), AGE_RANGE)
        and _in_range(profile.get("heightCm"), HEIGHT_RANGE)
        and _in_range(profile.get("weightKg"), WEIGHT_RANGE)
    )


def validate_profile_types(profile: Dict[str, Any], locale: Locale) -> List[str]:
    if is_valid_profile(profile):
        return []
    return [_MESSAGES["types"][1 if locale == "ar" else 0]]


def validate_profile(profile: Dict[str, Any], locale: Locale) -> List[str]:
    """Return human-readable problems with a profile, in the caller's language."""
    index = 1 if locale == "ar" else 0
    errors: List[str] = []
    if not _in_range(profile.get("age"), AGE_RANGE):
        errors.append(_MESSAGES["age"][index])
    if not _in_range(profile.get("heightCm"), HEIGHT_RANGE):
        errors.append(_MESSAGES["height"][index])
    if not _in_range(profile.get("weightKg"), WEIGHT_RANGE):
        errors.append(_MESSAGES["weight"][index])
    if not profile.get("sex"):
        errors.append(_MESSAGES["sex"][index])
    if not profile.get("activityLevel"):
        errors.append(_MESSAGES["activity"][index])
    if not _filled(profile.get("injuriesOrConditions")):
        errors.append(_MESSAGES["injuries"][index])
    if not _filled(profile.get("availableEquipment")):
        errors.append(_MESSAGES["equipment"][index])
    return errors


def normalize_profile(profile: Dict[str, Any], query: str) -> Dict[str, Any]:
    """Fill a blank primaryGoal from the query; everything else passes through."""
    goal = profile.get("primaryGoal")
    normalized = dict(profile)
    normalized["primaryGoal"] = goal.strip() if isinstance(goal, str) and goal.strip() else query
    return normalized


def to_display_height(profile: Dict[str, Any]) -> float:
    height = float(profile.get("heightCm") or 0)
    return height if profile.get("units") != "imperial" else height / CM_PER_INCH


def to_display_weight(profile: Dict[str, Any]) -> float:
    weight = float(profile.get("weightKg") or 0)
    return weight if profile.get("units") != "imperial" else weight * LB_PER_KG


def with_converted_height(profile: Dict[str, Any], display_height: float) -> Dict[str, Any]:
    height_cm = display_height if profile.get("units") != "imperial" else display_height * CM_PER_INCH
    return {**profile, "heightCm": round(height_cm, 1)}


def with_converted_weight(profile: Dict[str, Any], display_weight: float) -> Dict[str, Any]:
    weight_kg = display_weight if profile.get("units") != "imperial" else display_weight / LB_PER_KG
    return {**profile, "weightKg": round(weight_kg, 1)}


def read_stored_profile(storage: ClientStorage) -> Optional[Dict[str, Any]]:
    raw = storage.get_item(USER_PROFILE_KEY)
    return raw if isinstance(raw, dict) else None


def save_stored_profile(storage: ClientStorage, profile: Dict[str, Any]) -> None:
    storage.set_item(USER_PROFILE_KEY, profile)
