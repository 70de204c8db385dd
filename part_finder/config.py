"""
Configuration - environment settings and the part finder system prompt
"""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

OPENAI_API_URL = "https://api.openai.com/v1"
OPENAI_MODEL = "gpt-4o"
OPENAI_TEMPERATURE = 0.2

STOCK_IN = "In Stock"

EXTRACTION_GREEDY = "greedy"
EXTRACTION_BALANCED = "balanced"


def get_api_key():
    """Read at call time; an absent key blocks searches instead of startup"""
    return os.getenv("OPENAI_API_KEY", "").strip()


def get_base_url():
    return os.getenv("OPENAI_BASE_URL", "").strip() or OPENAI_API_URL


def get_extraction_strategy():
    strategy = os.getenv("JSON_EXTRACTION_STRATEGY", EXTRACTION_GREEDY).strip().lower()
    if strategy not in (EXTRACTION_GREEDY, EXTRACTION_BALANCED):
        return EXTRACTION_GREEDY
    return strategy


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
SEARCH_LOG_ENABLED = os.getenv("SEARCH_LOG_ENABLED", "false").lower() in ("1", "true", "yes")
SEARCH_LOG_DIR = os.getenv("SEARCH_LOG_DIR", "")
SECRET_KEY = os.getenv("SECRET_KEY", "dev-part-finder")
SESSION_LIMIT = int(os.getenv("SESSION_LIMIT", "1000"))
SESSION_IDLE_SECONDS = int(os.getenv("SESSION_IDLE_SECONDS", "3600"))

NOTICE_MISSING_KEY = "OpenAI API key not set"
NOTICE_SEARCH_FAILED = "Failed to search part. Please try again."
NOTICE_PARSE_FAILED = "Could not parse AI response. Try again."

SYSTEM_PROMPT = """You are an industrial automation part finder AI.

From the user's query, identify the single most likely part and return:
- "part_number": the manufacturer part number
- "brand": the manufacturer / brand name
- "description": a one-sentence description of the part
- "specs": a list of EXACTLY 12 short technical specifications (voltage, current, I/O count, mounting, rating, dimensions, etc.)
- "application": the typical application of the part
- "stock": exactly "In Stock" or "Out of Stock"

Also ALWAYS suggest AT LEAST 3 alternative parts. Each alternative must have the same fields:
"part_number", "brand", "description", "specs" (EXACTLY 12 items), "application", "stock".

Return your response as JSON in exactly this format:
{
  "part_number": "...",
  "brand": "...",
  "description": "...",
  "specs": ["...", "...", "...", "...", "...", "...", "...", "...", "...", "...", "...", "..."],
  "application": "...",
  "stock": "In Stock" or "Out of Stock",
  "alternatives": [
    {
      "part_number": "...",
      "brand": "...",
      "description": "...",
      "specs": ["...", "...", "...", "...", "...", "...", "...", "...", "...", "...", "...", "..."],
      "application": "...",
      "stock": "In Stock" or "Out of Stock"
    }
  ]
}

CRITICAL: Return ONLY valid JSON. Do not include any explanatory text, markdown, or code blocks. The response must start with { and end with }."""
