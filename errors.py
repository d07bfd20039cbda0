"""
Exception hierarchy for the shopping assistant.

Only two kinds of failure ever reach the caller of
`ShoppingAssistant.process_message`: search failures and LLM rate-limit /
configuration failures raised by the narrative generator. Everything else is
degraded to a deterministic path inside the component that hit it.
"""

from typing import Optional


class AssistantError(Exception):
    """Base class for errors raised by the assistant."""

    user_message = "Something went wrong while processing your message."


class SearchServiceError(AssistantError):
    """The product search backend failed. Recoverable: the caller may retry."""

    user_message = "Product search is temporarily unavailable. Please try again."

    def __init__(self, message: str, query: Optional[str] = None):
        super().__init__(message)
        self.query = query


class LLMServiceError(AssistantError):
    """Base class for failures of the hosted language model."""


class LLMServiceUnavailableError(LLMServiceError):
    """Rate limit or overload on the LLM provider."""

    user_message = "The assistant is busy right now. Please try again in a moment."


class LLMConfigurationError(LLMServiceError):
    """Authentication, permission or missing-client problems."""

    user_message = "The assistant is not configured correctly. Please contact support."


class LLMResponseError(LLMServiceError):
    """Timeout, connection failure or a response that is not the JSON we asked for."""


class StateStoreError(AssistantError):
    """The conversation store could not apply an update."""

    user_message = "Your conversation could not be saved. Please try again."
