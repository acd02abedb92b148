"""Three-step planner Q&A that gathers constraints before generation."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from ascend.services.goal_archetypes import infer_archetype
from ascend.services.planning_request import PlanningContext, js_round

QUESTION_COUNT = 3
MAX_KEY_CONSTRAINTS = 6


def _option(value: str, label: str, label_ar: str) -> Dict[str, str]:
    return {"value": value, "label": label, "label_ar": label_ar}


TRAINING_DAYS_QUESTION: Dict[str, Any] = {
    "id": "training_days_per_week",
    "question": "How many training days per week can you commit to realistically?",
    "question_ar": "كم يوم تدريب أسبوعيًا تقدر تلتزم به بشكل واقعي؟",
    "input_type": "single_choice",
    "required": True,
    "options": [
        _option("2", "2 days", "يومان"),
        _option("3", "3 days", "3 أيام"),
        _option("4", "4 days", "4 أيام"),
        _option("5_plus", "5+ days", "5+ أيام"),
    ],
    "reasoning_hint": "This sets weekly load and recovery distribution.",
    "reasoning_hint_ar": "هذا يحدد توزيع الحمل الأسبوعي والتعافي.",
}

SESSION_TIME_QUESTION: Dict[str, Any] = {
    "id": "daily_time_window",
    "question": "How much time can you spend per session?",
    "question_ar": "كم وقت متاح لكل جلسة؟",
    "input_type": "single_choice",
    "required": True,
    "options": [
        _option("20_30", "20-30 min", "20-30 دقيقة"),
        _option("30_45", "30-45 min", "30-45 دقيقة"),
        _option("45_60", "45-60 min", "45-60 دقيقة"),
        _option("60_plus", "60+ min", "60+ دقيقة"),
    ],
    "reasoning_hint": "Session duration controls exercise density and progression speed.",
    "reasoning_hint_ar": "مدة الجلسة تتحكم في كثافة التمرين وسرعة التدرج.",
}

GOAL_QUESTIONS: Dict[str, Dict[str, Any]] = {
    "fat_loss": {
        "id": "nutrition_style",
        "question": "Which nutrition style can you sustain through a calorie deficit?",
        "question_ar": "أي نمط تغذية تقدر تستمر عليه مع عجز السعرات؟",
        "options": [
            _option("balanced", "Balanced", "متوازن"),
            _option("high_protein", "High Protein", "بروتين عالي"),
            _option("low_carb", "Low Carb", "منخفض الكربوهيدرات"),
            _option("intermittent_fasting", "Intermittent fasting", "صيام متقطع"),
        ],
        "reasoning_hint": "Nutrition adherence is the main driver of fat loss.",
        "reasoning_hint_ar": "الالتزام الغذائي هو المحرك الأساسي لخسارة الدهون.",
    },
    "muscle_gain": {
        "id": "supplements_preference",
        "question": "Do you want the plan to include supplements such as creatine and whey?",
        "question_ar": "هل تريد إدراج مكملات مثل الكرياتين والواي في الخطة؟",
        "options": [
            _option("yes", "Yes", "نعم"),
            _option("minimal", "Minimal only", "أدنى حد فقط"),
            _option("no", "No", "لا"),
        ],
        "reasoning_hint": "This controls recommendation scope and budget fit.",
        "reasoning_hint_ar": "هذا يحدد نطاق التوصيات وتوافقها مع الميزانية.",
    },
    "speed": {
        "id": "sprint_surface",
        "question": "Where can you run your sprint sessions?",
        "question_ar": "أين تستطيع أداء جلسات العدو؟",
        "options": [
            _option("track", "Running track", "مضمار"),
            _option("field", "Grass field", "ملعب عشبي"),
            _option("treadmill", "Treadmill only", "جهاز مشي فقط"),
            _option("street", "Street / park", "شارع / حديقة"),
        ],
        "reasoning_hint": "Surface decides sprint volume and impact on joints.",
        "reasoning_hint_ar": "السطح يحدد حجم العدو والضغط على المفاصل.",
    },
    "posture_definition": {
        "id": "desk_hours",
        "question": "How many hours a day do you spend sitting at a desk or screen?",
        "question_ar": "كم ساعة يوميًا تقضيها جالسًا أمام مكتب أو شاشة؟",
        "options": [
            _option("under_4", "Under 4 hours", "أقل من 4 ساعات"),
            _option("4_8", "4-8 hours", "4-8 ساعات"),
            _option("over_8", "8+ hours", "أكثر من 8 ساعات"),
        ],
        "reasoning_hint": "Sitting time sets how many posture resets you need per day.",
        "reasoning_hint_ar": "مدة الجلوس تحدد عدد تمارين تصحيح الوضعية اليومية.",
    },
    "quick_visual": {
        "id": "event_timing",
        "question": "Is there a specific event or photo date you are preparing for?",
        "question_ar": "هل هناك مناسبة أو موعد تصوير محدد تستعد له؟",
        "options": [
            _option("this_week", "Within a week", "خلال أسبوع"),
            _option("two_weeks", "In about two weeks", "خلال أسبوعين تقريبًا"),
            _option("no_event", "No fixed date", "لا يوجد موعد محدد"),
        ],
        "reasoning_hint": "A fixed date changes when water and carb manipulation peaks.",
        "reasoning_hint_ar": "الموعد المحدد يغير توقيت ذروة التحكم بالماء والكربوهيدرات.",
    },
    "general": {
        "id": "nutrition_style",
        "question": "Which nutrition style can you sustain best?",
        "question_ar": "أي نمط تغذية تقدر تستمر عليه بسهولة؟",
        "options": [
            _option("balanced", "Balanced", "متوازن"),
            _option("high_protein", "High Protein", "بروتين عالي"),
            _option("low_carb", "Low Carb", "منخفض الكربوهيدرات"),
            _option("mediterranean", "Mediterranean", "متوسطي"),
        ],
        "reasoning_hint": "Nutrition adherence is a major predictor of visible outcomes.",
        "reasoning_hint_ar": "الالتزام الغذائي عامل حاسم في النتائج المرئية.",
    },
}


def question_pack(archetype: str) -> List[Dict[str, Any]]:
    goal_question = {"input_type": "single_choice", "required": True, **GOAL_QUESTIONS.get(archetype, GOAL_QUESTIONS["general"])}
    return [TRAINING_DAYS_QUESTION, SESSION_TIME_QUESTION, goal_question]


def next_question(pack: List[Dict[str, Any]], qa_history: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    answered = {entry["questionId"] for entry in qa_history}
    for question in pack:
        if question["id"] not in answered:
            return question
    return None


def compute_progress(pack: List[Dict[str, Any]], qa_history: List[Dict[str, Any]]) -> int:
    answered = {entry["questionId"] for entry in qa_history}
    covered = sum(1 for question in pack if question["id"] in answered)
    return round(covered / QUESTION_COUNT * 100)


def build_plan_brief(context: PlanningContext) -> str:
    profile = context.profile
    constraints = ", ".join(entry["value"] for entry in context.qa_history[:3])
    if context.locale == "ar":
        return (
            f'خطة ذكية لهدف "{context.query}" لمدة {context.duration_days} يوم مع مراعاة بياناتك '
            f"({_fmt_number(profile['age'])} سنة، نشاط {profile['activityLevel']}) وقيود التنفيذ: {constraints or 'التزام واقعي'}."
        )
    return (
        f'A smart {context.duration_days}-day strategy for "{context.query}", aligned with your profile '
        f"({_fmt_number(profile['age'])}y, {profile['activityLevel']} activity) and constraints: {constraints or 'realistic adherence'}."
    )


def build_key_constraints(context: PlanningContext) -> List[str]:
    profile = context.profile
    constraints = [
        f"Activity level: {profile['activityLevel']}",
        f"Equipment: {profile.get('availableEquipment') or 'none'}",
    ]
    conditions = str(profile.get("injuriesOrConditions") or "").strip()
    if conditions and conditions.lower() != "none":
        constraints.append(f"Safety filter: {conditions}")
    for answer in context.qa_history[-3:]:
        constraints.append(f"{answer['questionId']}: {answer.get('label') or answer['value']}")
    return constraints[:MAX_KEY_CONSTRAINTS]


def build_profile_fit_summary(profile: Dict[str, Any], locale: str) -> str:
    weight = js_round(float(profile["weightKg"]))
    if locale == "ar":
        return (
            f"الخطة ستُخصص لحالتك الحالية: العمر {_fmt_number(profile['age'])}، الوزن {weight} كجم، "
            f"مستوى نشاط {profile['activityLevel']}، مع تعديل الحمل وفق المعدات والقيود الصحية."
        )
    return (
        f"The plan will be calibrated to your current profile: age {_fmt_number(profile['age'])}, weight {weight} kg, "
        f"{profile['activityLevel']} activity, with load adjustments for your equipment and safety constraints."
    )


def _fmt_number(value: Any) -> str:
    number = float(value)
    return str(int(number)) if number.is_integer() else str(number)


def plan_next_step(context: PlanningContext) -> Dict[str, Any]:
    """Return the next unanswered question for the goal, or the ready synthesis."""
    pack = question_pack(infer_archetype(context.query))
    question = next_question(pack, context.qa_history)
    if question is None:
        return {
            "status": "ready",
            "progress": 100,
            "plan_brief": build_plan_brief(context),
            "key_constraints": build_key_constraints(context),
            "profile_fit_summary": build_profile_fit_summary(context.profile, context.locale),
        }
    hint = question.get("reasoning_hint_ar" if context.locale == "ar" else "reasoning_hint") or ""
    return {
        "status": "ask",
        "next_question": question,
        "progress": compute_progress(pack, context.qa_history),
        "reasoning_hint": hint,
    }
