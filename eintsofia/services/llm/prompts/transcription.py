"""
Prompt template for audio transcription with speaker profiling.
"""


class TranscriptionPrompts:
    @staticmethod
    def get_prompt() -> str:
        return """Transcribe the following audio to Hebrew accurately.
Also analyze the emotional tone of the speaker.
Additionally, estimate the speaker's profile:
- Role: Father, Mother, Boy, Girl, Grandparent, etc.
- Age Estimate: e.g., "30-40", "5-8", etc.
- Gender: Male, Female

Return a JSON object with:
- text: The Hebrew transcription
- emotion: A brief description of the emotion (in Hebrew)
- speaker_profile: Object containing role, age_estimate, gender (all in Hebrew)"""
