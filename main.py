from typing import Any, Dict

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError

from clients import redis_client, voyageai_client
from config import CORS_ORIGINS, STATE_BACKEND
from conversation_storage import create_conversation_store
from errors import (
    AssistantError,
    LLMConfigurationError,
    LLMServiceUnavailableError,
    SearchServiceError,
    StateStoreError,
)
from intent_classifier import intent_classifier
from logger_config import error_handler, log_error, logger
from product_search import ProductSearchService
from query_reformulator import query_reformulator
from redis_client_manager import RedisClientManager
from response_generator import response_generator
from response_models import AgentResponse, ChatRequest, ErrorResponse
from shopping_assistant import ShoppingAssistant

# --- Assistant wiring ---
conversation_store = create_conversation_store(STATE_BACKEND, redis_client)
product_search_service = ProductSearchService(redis_client=redis_client, embedding_client=voyageai_client)
assistant = ShoppingAssistant(
    store=conversation_store,
    classifier=intent_classifier,
    reformulator=query_reformulator,
    search_service=product_search_service,
    response_generator=response_generator,
)


def get_assistant() -> ShoppingAssistant:
    return assistant


app = FastAPI(title="Home Decor Shopping Assistant")

# --- Startup/Shutdown Events ---
@app.on_event("startup")
async def check_redis_connection():
    try:
        await redis_client.ping()
        logger.info(f"Connected to Redis {RedisClientManager.get_connection_info()['url']} (state backend: {STATE_BACKEND})")
    except RedisError as e:
        logger.warning(f"Redis not reachable at startup; search and redis state will fail until it is: {e}")

@app.on_event("shutdown")
async def cleanup_redis_connections():
    """Clean up Redis connections on shutdown"""
    await RedisClientManager.close_connections()

# --- CORS Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception Handlers ---

def _error_response(status_code: int, error: AssistantError, category: str, **extra) -> JSONResponse:
    body = ErrorResponse(error=error.user_message, detail=str(error), category=category, extra=extra)
    return JSONResponse(status_code=status_code, content=body.model_dump())

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Custom exception handler for Pydantic's validation errors.
    Returns a detailed error response to help with debugging.
    """
    logger.warning(f"Validation error on {request.method} {request.url}: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"detail": exc.errors(), "request_url": str(request.url)},
    )

@app.exception_handler(SearchServiceError)
async def search_error_handler(request: Request, exc: SearchServiceError):
    return _error_response(502, exc, "search_unavailable", query=exc.query)

@app.exception_handler(LLMServiceUnavailableError)
async def llm_unavailable_handler(request: Request, exc: LLMServiceUnavailableError):
    return _error_response(503, exc, "service_unavailable")

@app.exception_handler(LLMConfigurationError)
async def llm_configuration_handler(request: Request, exc: LLMConfigurationError):
    return _error_response(500, exc, "misconfiguration")

@app.exception_handler(StateStoreError)
async def state_store_error_handler(request: Request, exc: StateStoreError):
    return _error_response(503, exc, "state_unavailable")

# --- Routes ---

@app.post("/chat", response_model=AgentResponse)
@error_handler("chat endpoint")
async def chat(request: ChatRequest, assistant: ShoppingAssistant = Depends(get_assistant)):
    """Process one user message and return the assistant's reply."""
    return await assistant.process_message(request.thread_id, request.message)

@app.get("/conversations/{thread_id}")
async def get_conversation(thread_id: str, assistant: ShoppingAssistant = Depends(get_assistant)) -> Dict[str, Any]:
    state = await assistant.get_conversation_state(thread_id)
    if state is None:
        raise HTTPException(status_code=404, detail=f"No conversation found for thread {thread_id}")
    return state.to_document()

@app.get("/conversations/{thread_id}/summary")
async def get_conversation_summary(thread_id: str, assistant: ShoppingAssistant = Depends(get_assistant)):
    return {"thread_id": thread_id, "summary": await assistant.get_state_summary(thread_id)}

@app.delete("/conversations/{thread_id}")
async def reset_conversation(thread_id: str, assistant: ShoppingAssistant = Depends(get_assistant)):
    try:
        deleted = await assistant.reset_conversation(thread_id)
    except RedisError as e:
        log_error(e, context="reset_conversation", additional_info={"thread_id": thread_id})
        raise HTTPException(status_code=503, detail="Conversation store unavailable") from e
    return {"thread_id": thread_id, "deleted": deleted}

@app.get("/health")
async def health():
    return {
        "status": "ok",
        "state_backend": STATE_BACKEND,
        "redis": RedisClientManager.get_connection_info(),
    }

@app.get("/")
def read_root():
    return {"message": "Home Decor Shopping Assistant API"}
