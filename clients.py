import voyageai
from groq import AsyncGroq
from config import GROQ_API_KEY, VOYAGE_API_KEY
from logger_config import logger


def create_groq_client(api_key: str = GROQ_API_KEY) -> AsyncGroq:
    """AsyncGroq with SDK retries off: rate-limit and overload errors surface on the first failure."""
    return AsyncGroq(api_key=api_key, max_retries=0)


# Initialize clients
try:
    groq_client = create_groq_client()
except Exception as e:
    logger.warning(f"Error initializing Groq client. Make sure the GROQ_API_KEY environment variable is set. Details: {e}")
    groq_client = None

# Initialize Voyage AI
try:
    voyageai_client = voyageai.AsyncClient(api_key=VOYAGE_API_KEY)
except Exception as e:
    logger.warning(f"Error initializing Voyage AI client; vector search disabled. Details: {e}")
    voyageai_client = None

# Initialize Redis client
from redis_client_manager import get_async_redis_client
redis_client = get_async_redis_client()
