"""
Prompt templates for derived (follow-up) analyses.

Every derived prompt embeds the prior structured report as grounding context
and asks for a narrative Markdown document, not JSON. The wording is the
production Hebrew text.
"""

import json
from typing import Any, Dict, List, Optional

from eintsofia.domain.models.interaction import InterventionMethod, Participant
from eintsofia.domain.models.prompt_config import Persona


class DerivedAnalysisPrompts:
    """
    Derived analysis prompt templates.
    """

    SYSTEM_PROMPT = """אתה מומחה לניתוח התנהגות, פסיכולוגיה חינוכית וטיפול משפחתי.
תפקידך הוא לנתח נתונים מאינטראקציות מצולמות ולספק תובנות מעמיקות ותוכניות פעולה פרקטיות.

הנחיות כלליות:
- שפה: עברית בלבד.
- טון: מקצועי, אמפתי, מעודד ומעשי.
- מבנה: השתמש בכותרות, נקודות (Bullet points) ופסקה קצרה לכל רעיון.
- עיצוב: השתמש ב-Markdown לעיצוב הטקסט (מודגש, כותרות וכו')."""

    METHOD_DESCRIPTIONS: Dict[InterventionMethod, str] = {
        InterventionMethod.CBT: (
            "טיפול קוגניטיבי-התנהגותי: התמקדות בשינוי דפוסי חשיבה והתנהגות, "
            'זיהוי "מחשבות אוטומטיות" ויצירת חוויות מתקנות.'
        ),
        InterventionMethod.DBT: (
            "טיפול דיאלקטי-התנהגותי: שילוב של קבלה ושינוי, ויסות רגשי, "
            "עמידות במצוקה ומיינדפולנס."
        ),
        InterventionMethod.NARRATIVE: (
            'גישה נרטיבית: החצנת הבעיה ("הבעיה היא הבעיה, האדם הוא לא הבעיה"), '
            "יצירת סיפור אלטרנטיבי מעצים וגילוי כוחות."
        ),
    }

    INTERVENTION_PLAN_HEADINGS: List[str] = [
        "מטרות העל",
        "ניתוח המצב הנוכחי",
        "עקרונות מנחים",
        "תוכנית פעולה שלבית",
        "כלים מעשיים",
        "הזמנה לחקירה",
    ]

    PARTICIPANT_DIMENSIONS: List[str] = [
        "**מה נאמר (מלל):** ציטוטים או תמצית דברים שנאמרו.",
        "**שפת גוף והבעות פנים:** ניתוח תנועות, מבטים, מימיקה וטון דיבור.",
        "**הקשר ורגש:** מה המשתתף מרגיש? מה המניע שלו? איך זה מתחבר למה שהוא אומר ועושה?",
        "**דינמיקה:** האינטראקציה בין המשתתפים.",
    ]

    DEEP_DIMENSION = "ניתוח גורמי רקע והשפעות סביבתיות (על בסיס הנתונים בלבד)."

    PERSONA_AUDIENCE: Dict[Persona, str] = {
        Persona.FAMILY: "קהל היעד: הורה או בן משפחה.",
        Persona.CAREGIVER: "קהל היעד: מטפל מקצועי או רכז טיפול.",
        Persona.KINDERGARTEN: "קהל היעד: צוות הגן או פיקוח חינוכי.",
    }

    FOCUS_LABELS: Dict[str, str] = {
        "emotional": "מיקוד רגשי",
        "cognitive": "מיקוד קוגניטיבי/שכלי",
    }

    @staticmethod
    def context_block(
        snapshot: Dict[str, Any],
        participants: Optional[List[Participant]] = None,
        persona: Optional[Persona] = None,
    ) -> str:
        """Shared preamble: system prompt, audience and the prior report."""
        prompt = DerivedAnalysisPrompts.SYSTEM_PROMPT + "\n\n"
        if persona is not None:
            prompt += DerivedAnalysisPrompts.PERSONA_AUDIENCE[persona] + "\n\n"
        prompt += (
            "נתוני הניתוח הראשוני:\n"
            f"{json.dumps(snapshot, ensure_ascii=False, indent=2)}\n"
        )
        if participants:
            identified = [p.model_dump(exclude_none=True) for p in participants]
            prompt += (
                "\nמשתתפים מזוהים:\n"
                f"{json.dumps(identified, ensure_ascii=False, indent=2)}\n"
            )
        return prompt

    @staticmethod
    def participant_analysis(depth: str) -> str:
        dimensions = list(DerivedAnalysisPrompts.PARTICIPANT_DIMENSIONS)
        if depth == "deep":
            dimensions.append(DerivedAnalysisPrompts.DEEP_DIMENSION)
        numbered = "\n".join(f"{i}. {d}" for i, d in enumerate(dimensions, start=1))
        label = "מעמיק" if depth == "deep" else "ממוקד"
        return f"""
משימה: בצע ניתוח משתתפים {label}.
עליך להתייחס באופן ספציפי לנקודות הבאות ולחבר ביניהן:
{numbered}

פלט רצוי: דוח מובנה, עשיר ומחובר להתרחשויות בוידאו.
"""

    @staticmethod
    def intervention_plan(method: InterventionMethod, focus: str) -> str:
        headings = DerivedAnalysisPrompts.INTERVENTION_PLAN_HEADINGS
        focus_label = DerivedAnalysisPrompts.FOCUS_LABELS[focus]
        description = DerivedAnalysisPrompts.METHOD_DESCRIPTIONS[method]
        return f"""
משימה: בנה תוכנית התערבות בגישת {method.value} ({focus_label}).

התבסס על ניתוח המצב (כולל מלל, שפת גוף ורגשות) כדי להתאים את התוכנית.

הסבר על הגישה שנבחרה ({method.value}):
{description}

מבנה התוכנית:
1. **{headings[0]}:** 2-3 מטרות מרכזיות.
2. **{headings[1]}:** בקצרה, על בסיס הוידאו (התייחסות למה שנאמר ושודר).
3. **{headings[2]}:** כיצד ליישם את גישת {method.value} במקרה זה.
4. **{headings[3]}:**
   - שלב 1: התחלה מיידית (מה עושים מחר בבוקר).
   - שלב 2: ביסוס והעמקה (תהליך של שבועיים-חודש).
   - שלב 3: שימור והכללה (לטווח הארוך).
5. **{headings[4]}:** תרגילים או טכניקות ספציפיות.
6. **{headings[5]}:** משפט סיום המזמין את המשתמש להמשיך ולחקור.
"""

    @staticmethod
    def custom_plan(custom_instructions: str) -> str:
        return f"""
משימה: בנה תוכנית מותאמת אישית על פי בקשת המשתמש.

בקשת המשתמש / הנחיות נוספות:
"{custom_instructions}"

התייחס לנתוני הוידאו ולבקשה הספציפית. בנה תוכנית פרקטית, ישימה ומעוצבת היטב.
"""
