import os
from dotenv import load_dotenv, find_dotenv

# Load environment variables
load_dotenv(find_dotenv())

# API Keys
GROQ_API_KEY = os.environ.get("GROQ_API_KEY")
VOYAGE_API_KEY = os.environ.get("VOYAGE_API_KEY")


# Redis Configuration
REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", 6379))
REDIS_USERNAME = os.getenv("REDIS_USERNAME")
REDIS_PASSWORD = os.getenv("REDIS_PASSWORD")

if REDIS_USERNAME and REDIS_PASSWORD:
    REDIS_URL = f"redis://{REDIS_USERNAME}:{REDIS_PASSWORD}@{REDIS_HOST}:{REDIS_PORT}"
else:
    REDIS_URL = f"redis://{REDIS_HOST}:{REDIS_PORT}"

# Conversation state
STATE_BACKEND = os.getenv("STATE_BACKEND", "redis")  # "redis" or "memory"
CONVERSATION_TTL_SECONDS = int(os.getenv("CONVERSATION_TTL_SECONDS", 86400))
THREAD_LOCK_TIMEOUT_SECONDS = float(os.getenv("THREAD_LOCK_TIMEOUT_SECONDS", 60))

# Groq models
CLASSIFIER_MODEL = os.getenv("CLASSIFIER_MODEL", "llama-3.3-70b-versatile")
REFORMULATOR_MODEL = os.getenv("REFORMULATOR_MODEL", "llama-3.3-70b-versatile")
RESPONSE_MODEL = os.getenv("RESPONSE_MODEL", "llama-3.1-8b-instant")

# Timeouts for external collaborators (seconds)
CLASSIFIER_TIMEOUT_SECONDS = float(os.getenv("CLASSIFIER_TIMEOUT_SECONDS", 8))
REFORMULATOR_TIMEOUT_SECONDS = float(os.getenv("REFORMULATOR_TIMEOUT_SECONDS", 8))
SEARCH_TIMEOUT_SECONDS = float(os.getenv("SEARCH_TIMEOUT_SECONDS", 15))
RESPONSE_TIMEOUT_SECONDS = float(os.getenv("RESPONSE_TIMEOUT_SECONDS", 10))

# Search
SEARCH_RESULT_LIMIT = int(os.getenv("SEARCH_RESULT_LIMIT", 10))
PRODUCT_INDEX_NAME = os.getenv("PRODUCT_INDEX_NAME", "idx:furniture_products")
EMBEDDING_MODEL = os.getenv("EMBEDDING_MODEL", "voyage-3-large")

# Languages
SUPPORTED_LANGUAGES = [
    lang.strip() for lang in os.getenv("SUPPORTED_LANGUAGES", "id,en").split(",") if lang.strip()
]
# Attribute synonyms ("white" / "putih") are normalized towards this language
CANONICAL_ATTRIBUTE_LANGUAGE = os.getenv("CANONICAL_ATTRIBUTE_LANGUAGE", "id")

# CORS
CORS_ORIGINS = [
    origin.strip() for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",") if origin.strip()
]

# Store information used in FAQ answers
STORE_NAME = os.getenv("STORE_NAME", "Home Decor")
STORE_ADDRESS = os.getenv("STORE_ADDRESS", "Jl. Kemang Raya No. 10, Jakarta Selatan")
STORE_HOURS = os.getenv("STORE_HOURS", "10:00 - 21:00")
