HIGH_RISK_THRESHOLD = 61

MIN_WEEK = 1
MAX_WEEK = 40
TRIMESTER_WEEKS = 13.33

BASE_HEALTH_SCORE = 100
BASE_RISK_PERCENTAGE = 10
MAX_PERCENTAGE = 100

# Upper bounds used by the deterministic narrative and the health score
BP_SYSTOLIC_ELEVATED = 140
BP_DIASTOLIC_ELEVATED = 90
BLOOD_SUGAR_HIGH = 140

EARLY_PREGNANCY_WEEK = 12
LATE_PREGNANCY_WEEK = 32
FETAL_MOVEMENT_WEEK = 28

RECENT_REPORTS_LIMIT = 7
CHAT_HISTORY_LIMIT = 50
TRAINING_PATTERN_LIMIT = 50

DEFAULT_DB_PATH = "bloomcare.db"
DEFAULT_LLM_MODEL = "gemini/gemini-1.5-flash"
DEFAULT_LLM_TEMPERATURE = 0.4
GEMINI_KEY_PLACEHOLDER = "your-gemini-api-key-here"

SERVER_PORT = 7860

MOOD_OPTIONS = ["Happy", "Calm", "Tired", "Stressed", "Anxious", "Sad"]
