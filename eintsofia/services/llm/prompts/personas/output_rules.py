"""
Output rules shared by every persona's ``output`` section.
"""

REPORT_OUTPUT_RULES = """RETURN A SINGLE JSON OBJECT matching the response schema. No markdown, no prose outside the JSON.
-   **Language:** Think in English for accuracy; every string value in the JSON must be in HEBREW.
-   **Executive Summary:** At least 3-5 sentences, with key events timestamped as MM:SS.
-   **Keep:** 3 structured recommendations worth preserving.
-   **Improve:** 3 recommendations, each with a correction model (what to do, what to say, word for word) and 3 emotional-response activities.
-   **Scores:** safety, climate and interaction on a 1-10 scale.
-   **Stakeholders:** notes for the director, the parents and the supervising authority. If evidence is missing, write "Inconclusive" rather than guessing."""
