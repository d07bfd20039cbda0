"""
Per-thread conversation state and the commands that mutate it.

State is only ever changed through `apply_command`, a pure reducer: it takes a
state and one tagged command and returns a new state, leaving the input
untouched. Stores (conversation_storage.py) load, apply and save; they never
edit fields directly.

Persisted field names are camelCase (`filters.priceMin`, `search.baseQuery`,
`lastIntent`, ...) and stay stable across implementations; Python attributes
use snake_case aliases of those names.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Callable, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from response_models import Product, SearchType

FilterKey = Literal["category", "color", "material", "brand", "priceMin", "priceMax"]

FILTER_KEYS = ("category", "color", "material", "brand", "priceMin", "priceMax")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FilterState(_CamelModel):
    """Accumulated search constraints. None means "no constraint"."""
    category: Optional[str] = None
    color: Optional[str] = None
    material: Optional[str] = None
    brand: Optional[str] = None
    price_min: Optional[float] = None
    price_max: Optional[float] = None

    def active(self) -> Dict[str, Any]:
        """Only the keys that are set, under their persisted names."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def is_empty(self) -> bool:
        return not self.active()


class SearchState(_CamelModel):
    query: str = ""
    base_query: str = ""
    results: List[Product] = []
    result_count: int = 0
    search_type: SearchType = SearchType.NONE

    @model_validator(mode="after")
    def _sync_result_count(self):
        self.result_count = len(self.results)
        return self


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ConversationState(_CamelModel):
    """Everything the assistant remembers about one thread."""
    thread_id: str
    language: str = "id"
    filters: FilterState = Field(default_factory=FilterState)
    search: SearchState = Field(default_factory=SearchState)
    last_intent: Optional[str] = None
    last_faq_topic: Optional[str] = None
    messages: List[ChatMessage] = []
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    def to_document(self) -> Dict[str, Any]:
        """JSON-ready dict using the persisted field names."""
        data = self.model_dump(mode="json", by_alias=True)
        data["filters"] = self.filters.model_dump(mode="json", by_alias=True, exclude_none=True)
        return data


# --- Commands ---

class SetLanguage(BaseModel):
    type: Literal["SET_LANGUAGE"] = "SET_LANGUAGE"
    value: str


class SetFilter(BaseModel):
    """Set one filter key. A value of None removes the key."""
    type: Literal["SET_FILTER"] = "SET_FILTER"
    key: FilterKey
    value: Union[str, float, None] = None


class ClearFilters(BaseModel):
    type: Literal["CLEAR_FILTERS"] = "CLEAR_FILTERS"


class SetSearch(BaseModel):
    """Record a completed search. base_query is left alone when None."""
    type: Literal["SET_SEARCH"] = "SET_SEARCH"
    query: str
    base_query: Optional[str] = None
    results: List[Product] = []
    search_type: SearchType = SearchType.NONE


class SetBaseQuery(BaseModel):
    type: Literal["SET_BASE_QUERY"] = "SET_BASE_QUERY"
    value: str


class SetLastIntent(BaseModel):
    type: Literal["SET_LAST_INTENT"] = "SET_LAST_INTENT"
    intent: str
    faq_topic: Optional[str] = None


class AddMessage(BaseModel):
    type: Literal["ADD_MESSAGE"] = "ADD_MESSAGE"
    role: Literal["user", "assistant"]
    content: str


StateCommand = Annotated[
    Union[SetLanguage, SetFilter, ClearFilters, SetSearch, SetBaseQuery, SetLastIntent, AddMessage],
    Field(discriminator="type"),
]


# --- Reducer ---

_FILTER_ATTRS = {
    "category": "category",
    "color": "color",
    "material": "material",
    "brand": "brand",
    "priceMin": "price_min",
    "priceMax": "price_max",
}


def _set_language(state: ConversationState, command: SetLanguage) -> None:
    state.language = command.value


def _set_filter(state: ConversationState, command: SetFilter) -> None:
    value = command.value
    if command.key in ("priceMin", "priceMax") and value is not None:
        value = float(value)
    setattr(state.filters, _FILTER_ATTRS[command.key], value)


def _clear_filters(state: ConversationState, command: ClearFilters) -> None:
    state.filters = FilterState()


def _set_search(state: ConversationState, command: SetSearch) -> None:
    state.search = SearchState(
        query=command.query,
        base_query=command.base_query if command.base_query is not None else state.search.base_query,
        results=list(command.results),
        search_type=command.search_type,
    )


def _set_base_query(state: ConversationState, command: SetBaseQuery) -> None:
    state.search.base_query = command.value


def _set_last_intent(state: ConversationState, command: SetLastIntent) -> None:
    state.last_intent = command.intent
    state.last_faq_topic = command.faq_topic


def _add_message(state: ConversationState, command: AddMessage) -> None:
    state.messages = state.messages + [ChatMessage(role=command.role, content=command.content)]


_REDUCERS: Dict[str, Callable[[ConversationState, Any], None]] = {
    "SET_LANGUAGE": _set_language,
    "SET_FILTER": _set_filter,
    "CLEAR_FILTERS": _clear_filters,
    "SET_SEARCH": _set_search,
    "SET_BASE_QUERY": _set_base_query,
    "SET_LAST_INTENT": _set_last_intent,
    "ADD_MESSAGE": _add_message,
}


def apply_command(state: ConversationState, command: BaseModel) -> ConversationState:
    """
    Apply exactly one command to a copy of the state.

    Args:
        state: Current state (not modified)
        command: One of the StateCommand variants

    Returns:
        The new state
    """
    reducer = _REDUCERS.get(getattr(command, "type", None))
    if reducer is None:
        raise ValueError(f"Unknown state command: {command!r}")
    new_state = state.model_copy(deep=True)
    reducer(new_state, command)
    return new_state


def build_context_string(state: ConversationState) -> str:
    """Short human-readable summary of a thread, for debugging and monitoring."""
    lines = [f"Language: {state.language}"]
    active = state.filters.active()
    if active:
        lines.append("Filters: " + ", ".join(f"{key}={value}" for key, value in active.items()))
    else:
        lines.append("Filters: none")
    if state.search.base_query:
        lines.append(f"Base query: {state.search.base_query}")
    if state.search.query:
        lines.append(f"Last search: {state.search.query} ({state.search.result_count} results, {state.search.search_type.value})")
    if state.last_intent:
        topic = f" ({state.last_faq_topic})" if state.last_faq_topic else ""
        lines.append(f"Last intent: {state.last_intent}{topic}")
    lines.append(f"Messages: {len(state.messages)}")
    return "\n".join(lines)
