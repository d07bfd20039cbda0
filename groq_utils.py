import asyncio
import json
import time
from typing import Any, Dict, Optional

import groq

from clients import groq_client
from errors import LLMConfigurationError, LLMResponseError, LLMServiceUnavailableError
from logger_config import log_api_call, log_detailed_error, logger


async def call_groq_json(
    message_for_groq: str,
    system_prompt: str,
    model: str = "llama-3.1-8b-instant",
    timeout: Optional[float] = None,
    temperature: float = 0.0,
    max_completion_tokens: int = 512,
    client=None,
) -> Dict[str, Any]:
    """
    Call the Groq chat API in JSON mode and return the parsed object.

    Args:
        message_for_groq: User-role content
        system_prompt: System-role content
        model: Groq model name
        timeout: Seconds to wait before giving up (None waits forever)
        temperature: Sampling temperature
        max_completion_tokens: Completion budget
        client: AsyncGroq instance, defaults to the shared one from clients.py

    Returns:
        The decoded JSON object

    Raises:
        LLMServiceUnavailableError: rate limit or provider overload
        LLMConfigurationError: missing client, bad key or missing permission
        LLMResponseError: timeout, connection failure or non-JSON output
    """
    client = client or groq_client
    if client is None:
        raise LLMConfigurationError("Groq client not initialized.")

    started = time.monotonic()
    try:
        chat_completion = await asyncio.wait_for(
            client.chat.completions.create(
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": message_for_groq}
                ],
                model=model,
                temperature=temperature,
                max_completion_tokens=max_completion_tokens,
                top_p=1,
                stream=False,
                response_format={"type": "json_object"}
            ),
            timeout=timeout,
        )
    except asyncio.TimeoutError as e:
        log_api_call("groq", model, f"timeout after {timeout}s", time.monotonic() - started)
        raise LLMResponseError(f"Groq call timed out after {timeout}s") from e
    except groq.RateLimitError as e:
        log_api_call("groq", model, f"failed: {type(e).__name__}", time.monotonic() - started)
        raise LLMServiceUnavailableError(f"Groq rate limit: {e}") from e
    except (groq.AuthenticationError, groq.PermissionDeniedError) as e:
        log_api_call("groq", model, f"failed: {type(e).__name__}", time.monotonic() - started)
        raise LLMConfigurationError(f"Groq rejected credentials: {e}") from e
    except groq.InternalServerError as e:
        log_api_call("groq", model, f"failed: {type(e).__name__}", time.monotonic() - started)
        raise LLMServiceUnavailableError(f"Groq unavailable: {e}") from e
    except groq.APIError as e:
        log_detailed_error(
            e,
            context="call_groq_json",
            local_vars={
                "message_for_groq": message_for_groq[:200],
                "system_prompt": system_prompt[:200],
                "model": model
            }
        )
        raise LLMResponseError(f"Groq call failed: {e}") from e

    response_content = chat_completion.choices[0].message.content
    try:
        parsed = json.loads(response_content)
    except (TypeError, json.JSONDecodeError) as e:
        logger.warning(f"Groq returned non-JSON content: {str(response_content)[:200]}")
        raise LLMResponseError("Groq returned malformed JSON") from e

    if not isinstance(parsed, dict):
        raise LLMResponseError(f"Expected a JSON object, got {type(parsed).__name__}")

    log_api_call("groq", model, "ok", time.monotonic() - started)
    return parsed
