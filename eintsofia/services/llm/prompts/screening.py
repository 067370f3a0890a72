"""
Prompt templates for the screening calls (participant identification, quick
analysis, safety scan, event summary, emotion timeline and anomalies).

The wording is the production Hebrew text.
"""

from typing import List, Optional

from eintsofia.domain.models.interaction import Participant
from eintsofia.domain.models.screening import EmotionPoint


def _age_label(participant: Participant, suffix: str = "") -> str:
    if participant.age is None:
        return "מבוגר"
    return f"{participant.age}{suffix}"


class ScreeningPrompts:
    """
    Screening prompt templates.
    """

    HEBREW_ONLY = "חשוב: ענה בעברית בלבד! כל התשובה חייבת להיות בעברית."

    @staticmethod
    def identify_participants() -> str:
        return """
חשוב מאוד: ענה בעברית בלבד! כל התיאורים והתשובות חייבים להיות בעברית.

ספור וזהה את כל האנשים המופיעים בסרטון הזה.

הנחיות לזיהוי:

1. **גיל וקטגוריה:**
   - ילד (עד גיל 12): כתוב את הגיל המשוער
   - נער (13-19): כתוב את הגיל המשוער
   - מבוגר (20+):
     * גבר: כתוב "מבוגר" (ללא גיל ספציפי)
     * אישה: כתוב גיל משוער עם הפחתה של 3-5 שנים (להחמיא!)

2. **תפקיד לפי הסיטואציה:**
   זהה את התפקיד האמיתי בהקשר (לא רק הורה/ילד):
   - הורה/אמא/אבא
   - מטפל/מטפלת
   - גננת/מחנכת
   - ילד/תינוק
   - נער/נערה
   - מבוגר (תפקיד לא ברור)
   - אח/אחות
   - סבא/סבתא

3. **מין:**
   זהה אם אפשר: זכר/נקבה/לא ברור

4. **מראה:**
   תיאור קצר בעברית - בגדים, צבע שיער, מאפיינים בולטים

ענה בפורמט JSON בלבד:
[
  {
    "id": "person_1",
    "estimated_age": <גיל מספרי לילדים/נוער, "מבוגר" למבוגרים, או גיל מופחת לנשים מבוגרות>,
    "age_category": "ילד" | "נער" | "מבוגר",
    "gender": "זכר" | "נקבה" | "לא ברור",
    "appearance": "<תיאור קצר בעברית>",
    "likely_role": "<תפקיד לפי הקשר>"
  }
]

דוגמאות:
- ילדה בת 5:
  "estimated_age": 5, "age_category": "ילד", "gender": "נקבה", "likely_role": "ילדה"

- נער בן 16:
  "estimated_age": 16, "age_category": "נער", "gender": "זכר", "likely_role": "נער"

- גבר מבוגר:
  "estimated_age": "מבוגר", "age_category": "מבוגר", "gender": "זכר", "likely_role": "אבא"

- אישה מבוגרת (נראית כ-35):
  "estimated_age": 32, "age_category": "מבוגר", "gender": "נקבה", "likely_role": "אמא"
  (שים לב: הפחתנו 3 שנים להחמיא)

- גננת:
  "estimated_age": 28, "age_category": "מבוגר", "gender": "נקבה", "likely_role": "גננת"
"""

    @staticmethod
    def quick_analysis(participants: Optional[List[Participant]] = None) -> str:
        participant_context = "\n".join(
            f"{p.name} ({_age_label(p)}, {p.role})"
            + (f" - {p.relationship}" if p.relationship else "")
            for p in participants or []
        )
        return f"""
חשוב ביותר: ענה בעברית בלבד!

המשתתפים בסרטון:
{participant_context}

בצע ניתוח בזק (Quick Analysis) מקיף ומדויק.

הקפד להקשיב גם לפסקול (אודיו) ולנתח את הטון והדיבור, לא רק את הויזואליה.

עליך לספק שני דברים בלבד:

1. **תיאור כללי (General Description):**
   זהו ניתוח תמציתי אך מקיף הכולל:
   - **תיאור הסביבה:** איפה זה קורה? (גן שעשועים, כיתה, בית, חצר וכו')
   - **ניתוח בטיחות רגשית ופיזית:** מה קורה מבחינת בטיחות? האם יש צעקות, בכי, אלימות, נפילה, או להפך - רוגע ושמחה?
   - **ניתוח קולי (Audio):** התייחס לטון הדיבור, צעקות, בכי או מילים שנאמרו.
   - **הסבר מבוסס ראיות:** הסבר בקצרה *למה* אתה חושב ככה (למשל: "מזהה הבעת פנים כועסת ושומע צעקות רמות").
   - אורך: עד 4-5 שורות. היה חד ומדויק.

2. **המלצה לפעולה:**
   ההמלצה הכי חשובה ודחופה לשיפור המצב או לשימורו.

ענה בפורמט JSON בלבד:
{{
  "description": "התיאור הכללי המקיף (כולל סביבה, בטיחות, אודיו והסבר)",
  "recommendation": {{
    "title": "כותרת ההמלצה",
    "explanation": "הסבר קצר ופרקטי",
    "why_it_works": "הסבר פסיכולוגי קצר",
    "icon": "אמוג'י מתאים"
  }}
}}
"""

    @staticmethod
    def safety_scan() -> str:
        return f"""
{ScreeningPrompts.HEBREW_ONLY}

בצע סריקת בטיחות מהירה של הסרטון הזה.
ענה בפורמט JSON בלבד:
{{
  "score": <מספר 1-10, 10 = בטוח מאוד>,
  "verdict": "safe" | "concerning" | "unsafe",
  "urgent_flags": [<רשימת דגלים דחופים בעברית, אם יש>]
}}

התמקד בזיהוי מהיר של:
- התנהגויות מדאיגות (אלימות, מצוקה קיצונית)
- צרכים דחופים
- רמת סיכון כללית
"""

    @staticmethod
    def event_summary(participants: Optional[List[Participant]] = None) -> str:
        participant_context = ", ".join(
            f"{p.name} ({_age_label(p, ' שנים')}, {p.role})" for p in participants or []
        )
        return f"""
נתח את הסרטון וכתוב סיכום קצר (2-3 משפטים) של מה קרה.

משתתפים: {participant_context}

התמקד ב:
- מה האירוע המרכזי שקרה?
- מי היו המעורבים?
- מה היה הטון הכללי (חיובי/שלילי/ניטרלי)?

החזר טקסט פשוט, ללא JSON.
"""

    @staticmethod
    def emotion_timeline(participants: List[Participant], identity: str) -> str:
        participant_context = "\n".join(
            f"{p.name} (ID: {p.id}, {_age_label(p, ' שנים')}, {p.role})" for p in participants
        )
        return f"""
נתח את הסרטון וצור גרף רגשות לכל משתתף.

משתתפים:
{participant_context}

{identity}

חשוב: בנה טבלת נקודות רגש על ציר זמן.
לכל נקודה זמן חשובה (כל 10-15 שניות, או כשיש שינוי משמעותי):
- timestamp בפורמט MM:SS
- participantId (השתמש ב-ID המדויק מהרשימה למעלה)
- emotionLevel: מספר בין 1-5
  1 = מאוד שלילי (כעס, עצב, פחד)
  2 = שלילי קל
  3 = ניטרלי
  4 = חיובי
  5 = מאוד חיובי (שמחה, התלהבות)
- event: תיאור קצר של מה קורה ברגע זה

החזר JSON בפורמט הבא:
[
  {{
    "timestamp": "00:15",
    "participantId": "person_1",
    "emotionLevel": 3,
    "event": "תיאור"
  }}
]

זהה לפחות 8-12 נקודות זמן לכל משתתף.
"""

    @staticmethod
    def anomalies(points: List[EmotionPoint], forensic: str, psychology: str) -> str:
        anomaly_context = "\n".join(
            f"- {p.timestamp}: {p.participant_name} (רגש: {p.emotion_level}/5) - {p.event}"
            for p in points
        )
        return f"""
זוהו האירועים החריגים הבאים בסרטון (רמת רגש מתחת ל-2):

{anomaly_context}

{forensic}
{psychology}

לכל אירוע חריג:
1. צפה בקטע הספציפי בזמן הנתון
2. נתח מה גרם לרגש השלילי
3. הערך את חומרת האירוע
4. תן המלצות ספציפיות

החזר JSON:
[
  {{
    "timestamp": "MM:SS",
    "participantId": "person_X",
    "emotionLevel": 1,
    "description": "ניתוח מפורט של מה קרה ולמה",
    "severity": "low" | "medium" | "high"
  }}
]
"""
