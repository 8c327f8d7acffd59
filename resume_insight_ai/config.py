"""Configuration loaded from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env: try package dir then project root
_base = Path(__file__).resolve().parent
for _env_path in (_base / ".env", _base.parent / ".env"):
    if load_dotenv(_env_path):
        break
load_dotenv()  # also allow process env

# API keys – never hardcode
LLM_API_KEY: str = os.getenv("GROQ_API_KEY", "") or os.getenv("LLM_API_KEY", "")
LLM_BASE_URL: str = os.getenv("LLM_BASE_URL", "https://api.groq.com/openai/v1")
MODEL_NAME: str = os.getenv("MODEL_NAME", "llama-3.1-8b-instant")

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# Chat-completion request settings
LLM_MAX_TOKENS: int = 2000
LLM_TEMPERATURE: float = 0.1
LLM_REQUEST_TIMEOUT_SECONDS: float = float(os.getenv("LLM_REQUEST_TIMEOUT_SECONDS", "60"))
LLM_CONNECT_TIMEOUT_SECONDS: float = float(os.getenv("LLM_CONNECT_TIMEOUT_SECONDS", "10"))

# Retry policy (shared budget for 429 and network failures)
LLM_MAX_RETRIES: int = 3
LLM_BACKOFF_BASE_SECONDS: float = 2.0  # 2s, 4s, 8s
RETRY_HINT_BUFFER_SECONDS: float = 0.5

# Extraction thresholds
MIN_CONTENT_CHARS: int = 50
OCR_TRIGGER_CHARS: int = 30
OCR_RENDER_SCALE: int = 2  # rendered at 72 * scale dpi
OCR_MAX_PAGES: int = 1  # scanned PDFs: only the first page is recognized
MAX_FRAGMENT_CHARS: int = 500

# Prompt size guard
MAX_PROMPT_CHARS: int = 12000

# Resume length guidance shown in the report
RECOMMENDED_RESUME_CHARS: int = 2000

# Key modes: the deployment's key vs a key the user pasted in the UI
KEY_MODE_PROVIDED: str = "provided"
KEY_MODE_OWN: str = "own"

# Presentation tones accepted by analyze_resume
AVAILABLE_MOODS: list = [
    "professional",
    "brutal",
    "soft",
    "witty",
    "motivational",
]
DEFAULT_MOOD: str = "professional"
