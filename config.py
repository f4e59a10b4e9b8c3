from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()

DB_PATH = os.getenv("DB_PATH", "data/moodsense.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", os.getenv("MOODSENSE_LOG_LEVEL", "INFO")).upper()
USE_GATEWAY = bool(int(os.getenv("MOODSENSE_USE_GATEWAY", "1")))

# ── External classifier (Ollama, OpenAI-compatible API) ──────────
OLLAMA_BASE_URL = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "llama3.2")
GATEWAY_PROBE_TIMEOUT = float(os.getenv("GATEWAY_PROBE_TIMEOUT", "0.5"))
GATEWAY_CLASSIFY_TIMEOUT = float(os.getenv("GATEWAY_CLASSIFY_TIMEOUT", "15"))

# ── Engine tuning ─────────────────────────────────────────────────
MOOD_WINDOW_CAPACITY = int(os.getenv("MOOD_WINDOW_CAPACITY", "15"))
MOOD_CACHE_CAPACITY = int(os.getenv("MOOD_CACHE_CAPACITY", "50"))
MOOD_CONFIDENT_THRESHOLD = float(os.getenv("MOOD_CONFIDENT_THRESHOLD", "0.1"))
MOOD_DRAMATIC_THRESHOLD = float(os.getenv("MOOD_DRAMATIC_THRESHOLD", "0.3"))
MOOD_TRANSITION_JUMP = float(os.getenv("MOOD_TRANSITION_JUMP", "0.2"))
MOOD_TRANSITION_MIN_CONFIDENCE = float(os.getenv("MOOD_TRANSITION_MIN_CONFIDENCE", "0.3"))
