"""Bilingual content used to build deterministic fallback protocols."""
from __future__ import annotations

from typing import Any, Dict, List, Optional


def task(
    category: str,
    impact: str,
    action: str,
    action_ar: str,
    why: str,
    why_ar: str,
    *,
    tips: Optional[str] = None,
    tips_ar: Optional[str] = None,
    cadence: str = "daily",
) -> Dict[str, Any]:
    """Task template; `cadence` drives the frequency text in weekly plans."""
    template: Dict[str, Any] = {
        "category": category,
        "visualImpact": impact,
        "action": action,
        "actionAr": action_ar,
        "scienceWhy": why,
        "scienceWhyAr": why_ar,
        "cadence": cadence,
    }
    if tips:
        template["tips"] = tips
        template["tipsAr"] = tips_ar or tips
    return template


WAKE_TASK = task(
    "wake",
    "low",
    "Wake at a fixed time and get 10 minutes of outdoor daylight within 30 minutes",
    "استيقظ في وقت ثابت واحصل على 10 دقائق من ضوء النهار خلال 30 دقيقة",
    "Morning light anchors the circadian rhythm, which stabilizes cortisol and appetite hormones.",
    "ضوء الصباح يثبت الساعة البيولوجية مما ينظم الكورتيزول وهرمونات الشهية.",
)

HYDRATION_TASK = task(
    "hydration",
    "medium",
    "Drink 35 ml of water per kg of body weight, 500 ml of it before noon",
    "اشرب 35 مل ماء لكل كجم من وزنك، منها 500 مل قبل الظهر",
    "Adequate hydration keeps plasma volume up, supporting training output and a fuller look.",
    "الترطيب الكافي يحافظ على حجم البلازما مما يدعم الأداء ومظهرًا ممتلئًا للعضلات.",
    tips="Add a pinch of salt to the first bottle if you train fasted.",
    tips_ar="أضف رشة ملح لأول زجاجة إذا كنت تتمرن صائمًا.",
)

SLEEP_TASK = task(
    "sleep",
    "high",
    "Screens off 45 minutes before bed; aim for 7-9 hours of sleep in a cool, dark room",
    "أطفئ الشاشات قبل النوم بـ45 دقيقة واستهدف 7-9 ساعات نوم في غرفة باردة ومظلمة",
    "Deep sleep is when growth hormone peaks and muscle repair happens; short sleep raises hunger.",
    "في النوم العميق يبلغ هرمون النمو ذروته ويتم إصلاح العضلات، وقلة النوم ترفع الجوع.",
)

REST_DAY_TASK = task(
    "recovery",
    "low",
    "Rest day: 30-minute easy walk plus 10 minutes of full-body mobility",
    "يوم راحة: مشي خفيف 30 دقيقة مع 10 دقائق مرونة لكامل الجسم",
    "Low-intensity movement increases blood flow and clears fatigue without adding training stress.",
    "الحركة منخفضة الشدة تزيد تدفق الدم وتزيل الإرهاق دون إضافة إجهاد تدريبي.",
    cadence="rest",
)

ARCHETYPE_CONTENT: Dict[str, Dict[str, Any]] = {
    "fat_loss": {
        "title": "Precision Fat-Loss Protocol",
        "title_ar": "بروتوكول خسارة الدهون الدقيق",
        "subtitle": "Steady calorie deficit, high protein and strength work to keep muscle",
        "subtitle_ar": "عجز سعرات ثابت وبروتين عالٍ وتمارين قوة للحفاظ على العضلات",
        "focus": ["Calorie deficit", "Muscle retention", "Daily steps"],
        "focus_ar": ["عجز السعرات", "الحفاظ على العضلات", "الخطوات اليومية"],
        "science_overview": (
            "Fat loss follows a sustained energy deficit. A moderate deficit of 300-500 kcal, "
            "protein near 1.8-2.2 g/kg and resistance training preserve lean mass, so the weight lost is mostly fat."
        ),
        "science_overview_ar": (
            "خسارة الدهون تتبع عجزًا مستمرًا في الطاقة. عجز معتدل 300-500 سعرة مع بروتين 1.8-2.2 جم/كجم "
            "وتمارين مقاومة يحافظ على الكتلة العضلية لتكون الخسارة من الدهون غالبًا."
        ),
        "phases": [
            ("Deficit Setup", "تأسيس العجز", "Set the calorie target and lock in the routine.", "حدد هدف السعرات وثبّت الروتين."),
            ("Steady Burn", "الحرق المستمر", "Hold the deficit while strength stays stable.", "حافظ على العجز مع ثبات القوة."),
            ("Lean Finish", "اللمسة النهائية", "Tighten adherence and push daily steps higher.", "شدد الالتزام وارفع عدد الخطوات اليومية."),
        ],
        "checkpoints": [
            ("Average body weight trending down 0.5-1% per week", "متوسط الوزن ينخفض 0.5-1% أسبوعيًا"),
            ("Protein target hit on at least 5 of 7 days", "تحقيق هدف البروتين في 5 أيام من 7 على الأقل"),
        ],
        "meal": task(
            "meal",
            "high",
            "Eat in a 300-500 kcal deficit with a palm-sized protein portion at every meal",
            "تناول طعامك بعجز 300-500 سعرة مع حصة بروتين بحجم الكف في كل وجبة",
            "Higher protein intake increases satiety and protects muscle during a calorie deficit.",
            "البروتين العالي يزيد الشبع ويحمي العضلات أثناء عجز السعرات.",
            tips="Fill half the plate with vegetables to keep volume high.",
            tips_ar="املأ نصف الطبق بالخضار لزيادة حجم الوجبة.",
        ),
        "training": [
            task(
                "training",
                "high",
                "Full-body strength circuit: {sets} rounds of goblet squats, push-ups and rows (~{minutes} min)",
                "دائرة قوة لكامل الجسم: {sets} جولات من سكوات الكأس والضغط والسحب (~{minutes} دقيقة)",
                "Resistance training signals the body to keep muscle while fat is used for fuel.",
                "تمارين المقاومة تحفز الجسم للحفاظ على العضلات مع استخدام الدهون كوقود.",
                cadence="training",
            ),
            task(
                "training",
                "medium",
                "Zone-2 cardio: brisk incline walk or bike at conversational pace (~{minutes} min)",
                "كارديو المنطقة الثانية: مشي سريع على منحدر أو دراجة بوتيرة تسمح بالحديث (~{minutes} دقيقة)",
                "Steady aerobic work raises daily energy expenditure with little impact on recovery.",
                "التمرين الهوائي الثابت يرفع الصرف اليومي للطاقة مع تأثير بسيط على التعافي.",
                cadence="training",
            ),
            task(
                "training",
                "high",
                "Intervals: {sets} x 40 s hard effort / 80 s easy on bike or rower",
                "تمارين متقطعة: {sets} × 40 ثانية جهد عالٍ / 80 ثانية خفيف على الدراجة أو التجديف",
                "Short intervals improve insulin sensitivity and fitness in little time.",
                "الفترات القصيرة تحسن حساسية الأنسولين واللياقة في وقت قليل.",
                cadence="training",
            ),
        ],
        "recovery": task(
            "recovery",
            "medium",
            "Hit 8,000-10,000 daily steps, split into short walks after meals",
            "حقق 8,000-10,000 خطوة يوميًا مقسمة على مشي قصير بعد الوجبات",
            "Non-exercise activity is a large, adjustable part of daily fat burning.",
            "النشاط غير الرياضي جزء كبير وقابل للتعديل من حرق الدهون اليومي.",
        ),
        "supplement": task(
            "supplement",
            "low",
            "Whey isolate shake (25-30 g protein) if you miss the protein target",
            "مخفوق واي أيزوليت (25-30 جم بروتين) إذا لم تحقق هدف البروتين",
            "A lean protein source closes the gap without adding many calories to the deficit.",
            "مصدر بروتين قليل الدهون يسد النقص دون إضافة سعرات كثيرة للعجز.",
        ),
        "aligned": task(
            "meal",
            "medium",
            "Log today's meals and check you stayed inside the calorie deficit with enough protein",
            "سجل وجبات اليوم وتأكد أنك بقيت ضمن عجز السعرات مع بروتين كافٍ",
            "Self-monitoring is one of the strongest predictors of successful fat loss.",
            "المراقبة الذاتية من أقوى مؤشرات نجاح خسارة الدهون.",
        ),
    },
    "muscle_gain": {
        "title": "Lean Muscle Build Protocol",
        "title_ar": "بروتوكول بناء العضلات الصافية",
        "subtitle": "Progressive overload with a small calorie surplus",
        "subtitle_ar": "زيادة تدريجية في الأحمال مع فائض سعرات بسيط",
        "focus": ["Progressive overload", "Protein and surplus", "Recovery"],
        "focus_ar": ["الزيادة التدريجية", "البروتين والفائض", "التعافي"],
        "science_overview": (
            "Hypertrophy needs mechanical tension applied progressively, enough protein (1.6-2.2 g/kg) "
            "and a small surplus of 200-300 kcal so new tissue can be built without excess fat."
        ),
        "science_overview_ar": (
            "التضخيم يحتاج توترًا ميكانيكيًا متزايدًا تدريجيًا، وبروتينًا كافيًا (1.6-2.2 جم/كجم) "
            "وفائضًا بسيطًا 200-300 سعرة لبناء أنسجة جديدة دون دهون زائدة."
        ),
        "phases": [
            ("Technique Base", "أساس التقنية", "Learn the main lifts and set starting loads.", "تعلم الحركات الأساسية وحدد الأحمال الأولى."),
            ("Overload Block", "مرحلة الأحمال", "Add reps or load every session.", "أضف تكرارات أو وزنًا في كل جلسة."),
            ("Volume Peak", "ذروة الحجم", "Push volume, then consolidate gains.", "ارفع الحجم التدريبي ثم ثبّت المكاسب."),
        ],
        "checkpoints": [
            ("Load or reps increased on the main lifts", "زيادة الوزن أو التكرارات في الحركات الأساسية"),
            ("Body weight up 0.25-0.5% per week", "زيادة الوزن 0.25-0.5% أسبوعيًا"),
        ],
        "meal": task(
            "meal",
            "high",
            "Eat a 200-300 kcal surplus with 0.4 g/kg protein at each of 4 meals",
            "تناول فائض 200-300 سعرة مع 0.4 جم/كجم بروتين في كل من 4 وجبات",
            "Spreading protein across meals maximizes muscle protein synthesis through the day.",
            "توزيع البروتين على الوجبات يعظم بناء البروتين العضلي خلال اليوم.",
        ),
        "training": [
            task(
                "training",
                "high",
                "Upper-body hypertrophy: {sets} sets of 8-12 on presses and rows, 1-2 reps in reserve (~{minutes} min)",
                "تضخيم الجزء العلوي: {sets} مجموعات 8-12 تكرار ضغط وسحب مع ترك 1-2 تكرار (~{minutes} دقيقة)",
                "Sets taken close to failure in the 6-15 rep range drive muscle growth.",
                "المجموعات القريبة من الفشل بين 6-15 تكرار تحفز نمو العضلات.",
                cadence="training",
            ),
            task(
                "training",
                "high",
                "Lower-body hypertrophy: {sets} sets of squats, Romanian deadlifts and lunges (~{minutes} min)",
                "تضخيم الجزء السفلي: {sets} مجموعات سكوات ورفعة رومانية وطعنات (~{minutes} دقيقة)",
                "Large compound lifts load the most muscle mass per session.",
                "الحركات المركبة الكبيرة تحمّل أكبر كتلة عضلية في الجلسة.",
                cadence="training",
            ),
            task(
                "training",
                "medium",
                "Arms and shoulders pump: {sets} supersets of curls, extensions and lateral raises",
                "ضخ الذراعين والأكتاف: {sets} مجموعات ثنائية من الباي والتراي والرفرفة الجانبية",
                "Isolation work adds volume to smaller muscles that compounds under-train.",
                "تمارين العزل تضيف حجمًا للعضلات الصغيرة التي لا تكفيها الحركات المركبة.",
                cadence="training",
            ),
        ],
        "recovery": task(
            "recovery",
            "medium",
            "10 minutes of mobility for hips and shoulders after training",
            "10 دقائق مرونة للحوض والأكتاف بعد التمرين",
            "Keeping full range of motion lets you train the muscle through a longer stretch.",
            "الحفاظ على المدى الحركي الكامل يسمح بتدريب العضلة في إطالة أكبر.",
        ),
        "supplement": task(
            "supplement",
            "medium",
            "Creatine monohydrate 3-5 g daily with any meal",
            "كرياتين مونوهيدرات 3-5 جم يوميًا مع أي وجبة",
            "Creatine raises phosphocreatine stores, adding reps per set and long-term muscle gain.",
            "الكرياتين يرفع مخزون الفوسفوكرياتين مما يزيد التكرارات ونمو العضلات على المدى الطويل.",
        ),
        "aligned": task(
            "training",
            "medium",
            "Log every working set and plan the next progressive overload step for each muscle group",
            "سجل كل مجموعة عمل وخطط لخطوة الزيادة التدريجية التالية لكل مجموعة عضلية",
            "Tracking load is how progressive overload is guaranteed rather than guessed.",
            "تسجيل الأحمال يضمن الزيادة التدريجية بدل التخمين.",
        ),
    },
    "quick_visual": {
        "title": "Rapid Definition Protocol",
        "title_ar": "بروتوكول الإبراز السريع",
        "subtitle": "Water, sodium and glycogen control for a sharper look",
        "subtitle_ar": "التحكم بالماء والصوديوم والجلايكوجين لمظهر أوضح",
        "focus": ["Vascularity", "Glycogen loading", "Inflammation control"],
        "focus_ar": ["إبراز العروق", "تحميل الجلايكوجين", "تقليل الالتهاب"],
        "science_overview": (
            "Short-term visual changes come from fluid balance, muscle glycogen and blood flow. "
            "Stable sodium, high water intake and carbohydrates around training increase muscle fullness and vascularity."
        ),
        "science_overview_ar": (
            "التغيرات المرئية القصيرة تأتي من توازن السوائل وجلايكوجين العضلات وتدفق الدم. "
            "ثبات الصوديوم وشرب الماء والكربوهيدرات حول التمرين تزيد امتلاء العضلات وبروز العروق."
        ),
        "phases": [
            ("Reduce Inflammation", "خفض الالتهاب", "Cut processed food and stabilize sodium.", "قلل الأطعمة المصنعة وثبّت الصوديوم."),
            ("Pump Build", "بناء الضخ", "Daily pump work with carbs around training.", "تمارين ضخ يومية مع كربوهيدرات حول التمرين."),
            ("Peak Look", "الذروة", "Time glycogen and water for the best look.", "اضبط توقيت الجلايكوجين والماء لأفضل مظهر."),
        ],
        "checkpoints": [
            ("Less morning bloating and visible water retention", "انتفاخ صباحي واحتباس ماء أقل"),
            ("Stronger pump and vascularity after sessions", "ضخ وبروز عروق أقوى بعد الجلسات"),
        ],
        "meal": task(
            "meal",
            "high",
            "Keep sodium steady and place most carbohydrates in the meal before training",
            "حافظ على ثبات الصوديوم وضع معظم الكربوهيدرات في الوجبة قبل التمرين",
            "Carbohydrates refill muscle glycogen, which pulls water into the muscle and increases the pump.",
            "الكربوهيدرات تملأ الجلايكوجين العضلي الذي يسحب الماء للعضلة ويزيد الضخ.",
        ),
        "training": [
            task(
                "training",
                "high",
                "High-rep pump circuit: {sets} rounds of 15-20 reps for forearms, arms and shoulders",
                "دائرة ضخ عالية التكرار: {sets} جولات من 15-20 تكرار للساعد والذراعين والأكتاف",
                "Metabolic stress increases blood flow and cell swelling, making veins more visible.",
                "الإجهاد الأيضي يزيد تدفق الدم وانتفاخ الخلايا مما يبرز العروق.",
                cadence="training",
            ),
            task(
                "training",
                "medium",
                "Grip and forearm finisher: farmer holds and wrist curls (~{minutes} min session)",
                "ختام للقبضة والساعد: حمل المزارع وثني الرسغ (~{minutes} دقيقة للجلسة)",
                "Forearm work raises local blood flow where vascularity is most visible.",
                "تمارين الساعد ترفع تدفق الدم الموضعي حيث تظهر العروق أكثر.",
                cadence="training",
            ),
        ],
        "recovery": task(
            "recovery",
            "medium",
            "Anti-inflammatory evening: 10-minute walk after dinner and no alcohol",
            "مساء مضاد للالتهاب: مشي 10 دقائق بعد العشاء وبدون كحول",
            "Lower systemic inflammation reduces subcutaneous water that blurs definition.",
            "خفض الالتهاب العام يقلل الماء تحت الجلد الذي يخفي التفاصيل.",
        ),
        "supplement": task(
            "supplement",
            "medium",
            "Creatine 3-5 g with water daily to draw water into the muscle",
            "كرياتين 3-5 جم مع الماء يوميًا لسحب الماء إلى داخل العضلة",
            "Intramuscular water from creatine makes muscles look fuller rather than bloated.",
            "الماء داخل العضلة بسبب الكرياتين يجعلها أكثر امتلاءً لا انتفاخًا.",
        ),
        "aligned": task(
            "hydration",
            "medium",
            "Track water and sodium today and keep both consistent with yesterday",
            "تابع الماء والصوديوم اليوم وحافظ على ثباتهما مقارنة بالأمس",
            "Consistent fluid and sodium intake prevents rebound water retention.",
            "ثبات السوائل والصوديوم يمنع ارتداد احتباس الماء.",
        ),
    },
    "posture_definition": {
        "title": "Posture & Definition Protocol",
        "title_ar": "بروتوكول الوضعية والتحديد",
        "subtitle": "Neck, upper back and jawline work for a sharper profile",
        "subtitle_ar": "تمارين للرقبة وأعلى الظهر وخط الفك لمظهر جانبي أوضح",
        "focus": ["Posture correction", "Neck strength", "Upper-back control"],
        "focus_ar": ["تصحيح الوضعية", "قوة الرقبة", "التحكم بأعلى الظهر"],
        "science_overview": (
            "Forward head posture comes from weak deep neck flexors and upper-back muscles plus long sitting. "
            "Daily chin tucks, scapular work and thoracic mobility restore alignment and make the neck and jawline look sharper."
        ),
        "science_overview_ar": (
            "بروز الرأس للأمام ينتج عن ضعف عضلات الرقبة العميقة وأعلى الظهر مع الجلوس الطويل. "
            "تمارين سحب الذقن واللوح والمرونة الصدرية اليومية تعيد المحاذاة وتوضح الرقبة وخط الفك."
        ),
        "phases": [
            ("Awareness", "الوعي", "Notice and reset posture through the day.", "لاحظ وضعيتك وصححها خلال اليوم."),
            ("Strength", "القوة", "Strengthen neck and upper back.", "قوِّ الرقبة وأعلى الظهر."),
            ("Integration", "الدمج", "Make good posture automatic under load.", "اجعل الوضعية الصحيحة تلقائية تحت الحمل."),
        ],
        "checkpoints": [
            ("Side photo shows the ear closer to shoulder line", "الصورة الجانبية تظهر الأذن أقرب لخط الكتف"),
            ("Posture resets done every desk hour", "تصحيح الوضعية كل ساعة جلوس"),
        ],
        "meal": task(
            "meal",
            "low",
            "Protein with every meal and fewer salty snacks to reduce facial puffiness",
            "بروتين مع كل وجبة وتقليل الوجبات المالحة لتقليل انتفاخ الوجه",
            "Lower sodium swings reduce facial water retention around the jaw and neck.",
            "تقليل تذبذب الصوديوم يقلل احتباس الماء في الوجه حول الفك والرقبة.",
        ),
        "training": [
            task(
                "training",
                "medium",
                "Neck and posture block: {sets} sets of chin tucks, neck curls and band pull-aparts",
                "تمارين الرقبة والوضعية: {sets} مجموعات سحب الذقن وثني الرقبة وفتح المطاط",
                "Deep neck flexor and rear-shoulder strength pulls the head back over the spine.",
                "قوة عضلات الرقبة العميقة والكتف الخلفي تعيد الرأس فوق العمود الفقري.",
                cadence="training",
            ),
            task(
                "training",
                "medium",
                "Upper-back strength: {sets} sets of rows and face pulls with scapular squeeze (~{minutes} min)",
                "قوة أعلى الظهر: {sets} مجموعات سحب وفيس بول مع ضم اللوحين (~{minutes} دقيقة)",
                "Strong scapular retractors keep the shoulders from rounding forward.",
                "قوة العضلات الضامة للوح تمنع استدارة الكتفين للأمام.",
                cadence="training",
            ),
        ],
        "recovery": task(
            "recovery",
            "medium",
            "Thoracic mobility: 5 minutes of foam-roller extensions and open books",
            "مرونة الظهر الصدري: 5 دقائق تمديد على الرول وتمرين الكتاب المفتوح",
            "A mobile thoracic spine lets the neck sit upright without strain.",
            "مرونة العمود الصدري تسمح للرقبة بالاستقامة دون إجهاد.",
        ),
        "supplement": task(
            "supplement",
            "low",
            "Vitamin D3 1000-2000 IU with breakfast if you get little sun",
            "فيتامين د3 1000-2000 وحدة مع الإفطار إذا كان تعرضك للشمس قليلًا",
            "Vitamin D supports normal muscle function.",
            "فيتامين د يدعم الوظيفة الطبيعية للعضلات.",
        ),
        "aligned": task(
            "recovery",
            "medium",
            "Set an hourly reminder for a posture reset: 5 chin tucks and a scapular squeeze",
            "اضبط تذكيرًا كل ساعة لتصحيح الوضعية: 5 سحبات ذقن وضمة للوحين",
            "Frequent short resets retrain the default head and neck position.",
            "التصحيحات القصيرة المتكررة تعيد برمجة وضعية الرأس والرقبة.",
        ),
    },
    "speed": {
        "title": "Explosive Speed Protocol",
        "title_ar": "بروتوكول السرعة الانفجارية",
        "subtitle": "Acceleration mechanics, plyometrics and full recovery between sprints",
        "subtitle_ar": "ميكانيكا التسارع والبليومترك والتعافي الكامل بين العدوات",
        "focus": ["Acceleration", "Reactive strength", "Sprint mechanics"],
        "focus_ar": ["التسارع", "القوة الارتدادية", "ميكانيكا العدو"],
        "science_overview": (
            "Sprint speed depends on how much force you apply to the ground in very short contact times. "
            "Short maximal sprints with full rest, plyometrics and heavy lower-body strength improve that."
        ),
        "science_overview_ar": (
            "سرعة العدو تعتمد على القوة المطبقة على الأرض في زمن تلامس قصير جدًا. "
            "العدو القصير بأقصى جهد مع راحة كاملة والبليومترك وقوة الجزء السفلي تحسن ذلك."
        ),
        "phases": [
            ("Mechanics", "الميكانيكا", "Groove sprint posture and drills.", "ثبّت وضعية العدو والتمارين الفنية."),
            ("Acceleration", "التسارع", "Build maximal short sprints.", "طور العدو القصير بأقصى جهد."),
            ("Top Speed", "السرعة القصوى", "Flying sprints and sharpening.", "العدو الطائر والصقل."),
        ],
        "checkpoints": [
            ("10 m or 20 m split time recorded and improving", "تسجيل زمن 10 أو 20 متر مع تحسن"),
            ("All sprints done with full rest and no drop-off", "كل العدوات مع راحة كاملة ودون تراجع"),
        ],
        "meal": task(
            "meal",
            "medium",
            "Carbohydrate-rich meal 2-3 hours before sprint sessions plus protein after",
            "وجبة غنية بالكربوهيدرات قبل جلسات العدو بـ2-3 ساعات وبروتين بعدها",
            "Glycogen fuels repeated maximal efforts; protein supports tendon and muscle repair.",
            "الجلايكوجين يغذي الجهود القصوى المتكررة والبروتين يدعم إصلاح الأوتار والعضلات.",
        ),
        "training": [
            task(
                "training",
                "high",
                "Acceleration sprints: {sets} x 20 m from a three-point start, 2-3 min rest",
                "عدو التسارع: {sets} × 20 متر من وضعية البدء الثلاثية مع راحة 2-3 دقائق",
                "Maximal short sprints with full rest train the nervous system to produce force fast.",
                "العدو القصير الأقصى مع راحة كاملة يدرب الجهاز العصبي على إنتاج القوة بسرعة.",
                cadence="training",
            ),
            task(
                "training",
                "high",
                "Plyometrics: {sets} sets of box jumps, bounds and pogo hops",
                "بليومترك: {sets} مجموعات قفز على الصندوق ووثبات وقفزات سريعة",
                "Plyometrics improve reactive strength and stiffness of the ankle and knee.",
                "البليومترك يحسن القوة الارتدادية وصلابة الكاحل والركبة.",
                cadence="training",
            ),
            task(
                "training",
                "medium",
                "Lower-body strength: {sets} sets of trap-bar deadlifts and split squats (~{minutes} min)",
                "قوة الجزء السفلي: {sets} مجموعات رفعة مميتة بالبار السداسي وسكوات منقسم (~{minutes} دقيقة)",
                "Greater maximal strength raises the ceiling for sprint force production.",
                "القوة القصوى الأعلى ترفع سقف إنتاج قوة العدو.",
                cadence="training",
            ),
        ],
        "recovery": task(
            "recovery",
            "medium",
            "Sprint drills warm-up and calf/hamstring mobility: A-skips, B-skips, leg swings",
            "إحماء بتمارين العدو الفنية ومرونة السمانة والخلفية: A-skip وB-skip وأرجحة الساق",
            "Drills rehearse front-side mechanics and prepare hamstrings for high velocity.",
            "التمارين الفنية تعزز الميكانيكا الأمامية وتجهز الخلفية للسرعات العالية.",
        ),
        "supplement": task(
            "supplement",
            "medium",
            "Creatine monohydrate 3-5 g daily for repeated sprint power",
            "كرياتين مونوهيدرات 3-5 جم يوميًا لقوة العدو المتكرر",
            "Creatine improves performance in repeated short maximal efforts.",
            "الكرياتين يحسن الأداء في الجهود القصوى القصيرة المتكررة.",
        ),
        "aligned": task(
            "training",
            "medium",
            "Film one acceleration sprint and check stride posture: forward lean, fast arm drive",
            "صور عدوة تسارع واحدة وراجع وضعية الخطوة: ميل للأمام وحركة ذراعين سريعة",
            "Video feedback speeds up learning of sprint technique.",
            "التغذية الراجعة بالفيديو تسرّع تعلم تقنية العدو.",
        ),
    },
    "general": {
        "title": "Balanced Performance Protocol",
        "title_ar": "بروتوكول الأداء المتوازن",
        "subtitle": "Strength, movement, nutrition and sleep in one sustainable routine",
        "subtitle_ar": "قوة وحركة وتغذية ونوم في روتين واحد مستدام",
        "focus": ["Consistency", "Strength and mobility", "Sleep quality"],
        "focus_ar": ["الاستمرارية", "القوة والمرونة", "جودة النوم"],
        "science_overview": (
            "General fitness improves fastest when strength training, daily walking, protein intake and sleep "
            "are done consistently at a manageable dose."
        ),
        "science_overview_ar": (
            "تتحسن اللياقة العامة أسرع عند الالتزام بتمارين القوة والمشي اليومي والبروتين والنوم بجرعة مناسبة."
        ),
        "phases": [
            ("Routine Build", "بناء الروتين", "Establish the daily anchors.", "ثبّت العادات اليومية الأساسية."),
            ("Progress", "التقدم", "Add a little load each week.", "أضف حملًا بسيطًا كل أسبوع."),
            ("Consolidate", "التثبيت", "Lock in habits that last.", "ثبّت العادات لتستمر."),
        ],
        "checkpoints": [
            ("All planned sessions completed", "إكمال كل الجلسات المخططة"),
            ("Sleep averaged 7+ hours", "متوسط النوم 7 ساعات أو أكثر"),
        ],
        "meal": task(
            "meal",
            "medium",
            "Build each meal around protein, vegetables and a whole-food carbohydrate",
            "اجعل كل وجبة تتكون من بروتين وخضار وكربوهيدرات كاملة",
            "Whole-food, protein-forward meals support energy, recovery and body composition.",
            "الوجبات الكاملة الغنية بالبروتين تدعم الطاقة والتعافي وتكوين الجسم.",
        ),
        "training": [
            task(
                "training",
                "medium",
                "Full-body training: {sets} sets of squats, push-ups, rows and planks (~{minutes} min)",
                "تمرين لكامل الجسم: {sets} مجموعات سكوات وضغط وسحب وبلانك (~{minutes} دقيقة)",
                "Compound movements build strength across all major muscle groups efficiently.",
                "الحركات المركبة تبني القوة في كل المجموعات العضلية بكفاءة.",
                cadence="training",
            ),
            task(
                "training",
                "medium",
                "Cardio session: brisk walk, jog or cycle at moderate effort (~{minutes} min)",
                "جلسة كارديو: مشي سريع أو هرولة أو دراجة بجهد متوسط (~{minutes} دقيقة)",
                "Regular aerobic training improves heart health and work capacity.",
                "التدريب الهوائي المنتظم يحسن صحة القلب والقدرة على العمل.",
                cadence="training",
            ),
        ],
        "recovery": task(
            "recovery",
            "low",
            "10-minute mobility flow: hips, spine and shoulders",
            "10 دقائق مرونة: الحوض والعمود الفقري والأكتاف",
            "Daily mobility maintains range of motion and reduces stiffness.",
            "المرونة اليومية تحافظ على المدى الحركي وتقلل التيبس.",
        ),
        "supplement": None,
        "aligned": task(
            "recovery",
            "low",
            "Take a 20-minute walk outdoors",
            "امشِ 20 دقيقة في الهواء الطلق",
            "Walking adds low-stress activity that supports recovery and mood.",
            "المشي يضيف نشاطًا منخفض الإجهاد يدعم التعافي والمزاج.",
        ),
    },
}

# Training-day layout inside a 7-day week, indexed by sessions per week.
TRAINING_DAY_PATTERNS: Dict[int, List[bool]] = {
    2: [True, False, False, True, False, False, False],
    3: [True, False, True, False, True, False, False],
    4: [True, True, False, True, True, False, False],
    5: [True, True, True, False, True, True, False],
}

SESSION_MINUTES = {"20_30": 25, "30_45": 40, "45_60": 50, "60_plus": 60}

SETS_BY_ACTIVITY = {"sedentary": 2, "light": 2, "moderate": 3, "active": 4, "athlete": 4}

BASE_SAFETY_NOTES = [
    (
        "Stop any exercise that causes sharp pain and consult a clinician.",
        "أوقف أي تمرين يسبب ألمًا حادًا واستشر مختصًا.",
    ),
    (
        "Warm up for 5-10 minutes before every training session.",
        "قم بالإحماء 5-10 دقائق قبل كل جلسة تدريب.",
    ),
]

MINOR_SAFETY_NOTE = (
    "Under 18: no supplements; focus on technique, food and sleep.",
    "أقل من 18 سنة: بدون مكملات، ركز على التقنية والغذاء والنوم.",
)

SUPPLEMENTS_DECLINED_NOTE = (
    "Supplements excluded at your request.",
    "تم استبعاد المكملات بناءً على طلبك.",
)

CONDITION_SAFETY_NOTE = (
    "Exercises were adjusted for: {conditions}.",
    "تم تعديل التمارين بما يناسب: {conditions}.",
)

FREQUENCY_TEXT = {
    "daily": ("Daily", "يوميًا"),
    "weekly": ("Once per week", "مرة أسبوعيًا"),
}
