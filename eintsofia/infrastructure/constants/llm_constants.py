"""
Constants for LLM configuration.

This module defines constants for LLM configuration to ensure consistency
across the application. These constants are used as defaults in settings.py
and should be referenced by all services that need LLM parameters.
"""

# Gemini model constants
# Primary (structured) analysis runs on the multimodal flash model
GEMINI_ANALYSIS_MODEL = "gemini-2.5-flash"
# Derived analyses are narrative text; the faster model is enough
GEMINI_DERIVED_MODEL = "gemini-2.0-flash"
GEMINI_CHAT_MODEL = "gemini-2.5-flash"
GEMINI_TRANSCRIPTION_MODEL = "gemini-2.0-flash"

# Generation defaults for the primary analysis
GEMINI_TEMPERATURE = 0.7
GEMINI_TOP_P = 0.8
GEMINI_TOP_K = 40
GEMINI_MAX_TOKENS = 65536

# Derived analyses and chat
GEMINI_TEXT_TEMPERATURE = 0.7
GEMINI_TRANSCRIPTION_TEMPERATURE = 0.0

# Environment variable names
ENV_GEMINI_API_KEY = "GEMINI_API_KEY"
ENV_GEMINI_API_KEY_PUBLIC = "NEXT_PUBLIC_GEMINI_API_KEY"
ENV_GEMINI_ANALYSIS_MODEL = "GEMINI_ANALYSIS_MODEL"
ENV_GEMINI_DERIVED_MODEL = "GEMINI_DERIVED_MODEL"
ENV_GEMINI_CHAT_MODEL = "GEMINI_CHAT_MODEL"
ENV_GEMINI_TRANSCRIPTION_MODEL = "GEMINI_TRANSCRIPTION_MODEL"
ENV_GEMINI_TEMPERATURE = "GEMINI_TEMPERATURE"

# Gemini 2.5 Flash pricing in USD per token (approximate)
GEMINI_INPUT_COST_PER_TOKEN = 0.075 / 1_000_000
GEMINI_OUTPUT_COST_PER_TOKEN = 0.30 / 1_000_000

# Document store collections
FEEDBACK_COLLECTION = "feedback_logs"
ANALYSIS_LOG_COLLECTION = "analysis_logs"
SAVED_ANALYSIS_COLLECTION = "saved_analyses"

# Feedback aggregate view is served from cache for this long
FEEDBACK_CACHE_TTL_SECONDS = 5 * 60

# Number of past chat turns kept in the conversational context
CHAT_MAX_HISTORY_TURNS = 20

# Emotion timeline points strictly below this level are analyzed as anomalies
ANOMALY_EMOTION_THRESHOLD = 2

# Local store key for participants remembered across analyses
SAVED_PARTICIPANTS_KEY = "ein_tsofia_participants"

# Gemini Safety Settings
GEMINI_SAFETY_SETTINGS_BLOCK_NONE = [
    {
        "category": "HARM_CATEGORY_HARASSMENT",
        "threshold": "BLOCK_NONE",
    },
    {
        "category": "HARM_CATEGORY_HATE_SPEECH",
        "threshold": "BLOCK_NONE",
    },
    {
        "category": "HARM_CATEGORY_SEXUALLY_EXPLICIT",
        "threshold": "BLOCK_NONE",
    },
    {
        "category": "HARM_CATEGORY_DANGEROUS_CONTENT",
        "threshold": "BLOCK_NONE",
    },
]
