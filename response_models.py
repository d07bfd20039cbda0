from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator
from enum import Enum


class SearchType(str, Enum):
    """Which search path produced a result set."""
    VECTOR = "vector"
    TEXT = "text"
    NONE = "none"


class IntentType(str, Enum):
    """Intent labels produced by the classifier or the rule fallback."""
    SEARCH = "search"
    FILTER_ADD = "filter_add"
    FILTER_CLEAR = "filter_clear"
    GREETING = "greeting"
    HELP = "help"
    FAQ_INFO = "faq_info"
    PRODUCT_INFO = "product_info"
    UNKNOWN = "unknown"


class IntentFilters(BaseModel):
    """Filter values extracted from a single message."""
    category: Optional[str] = None
    color: Optional[str] = None
    material: Optional[str] = None
    brand: Optional[str] = None
    price_min: Optional[float] = None
    price_max: Optional[float] = None

    def present(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class Intent(BaseModel):
    """Per-message intent, from the LLM classifier or the rule fallback."""
    intent: IntentType = IntentType.UNKNOWN
    search_query: Optional[str] = None
    filters: IntentFilters = Field(default_factory=IntentFilters)
    language: str = "id"
    faq_topic: Optional[str] = None

    @field_validator("filters", mode="before")
    @classmethod
    def _null_filters(cls, value):
        return value if value is not None else {}

    @field_validator("search_query", "faq_topic", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("language", mode="before")
    @classmethod
    def _lower_language(cls, value):
        return value.strip().lower() if isinstance(value, str) and value.strip() else "id"


class DetectedAttributes(BaseModel):
    category: Optional[str] = None
    color: Optional[str] = None
    material: Optional[str] = None
    price: Optional[str] = None


class ReformulatedQuery(BaseModel):
    """Standalone search query derived from the latest message."""
    query: str
    is_continuation: bool = False
    is_new_search: bool = False
    detected_attributes: DetectedAttributes = Field(default_factory=DetectedAttributes)


class ProductPrice(BaseModel):
    """One price point of a product, optionally per variant."""
    variant: Optional[str] = None
    price: float
    currency: Optional[str] = "IDR"


class ProductReviews(BaseModel):
    rating: Optional[float] = None
    count: Optional[int] = None


class Product(BaseModel):
    """Catalog product as returned by the search service."""
    item_id: str
    item_name: str
    item_description: str = ""
    brand: str = ""
    prices: List[ProductPrice] = []
    user_reviews: Optional[ProductReviews] = None
    categories: List[str] = []
    images: List[str] = []


class SearchResult(BaseModel):
    """Search service output."""
    products: List[Product] = []
    count: int = 0
    search_type: SearchType = SearchType.NONE


class ResponseMeta(BaseModel):
    """Response metadata."""
    model_config = ConfigDict(populate_by_name=True)

    has_products: bool = Field(alias="hasProducts")
    search_type: SearchType = Field(SearchType.NONE, alias="searchType")
    product_count: int = Field(0, alias="productCount")
    intent: Optional[str] = None
    detected_language: Optional[str] = Field(None, alias="detectedLanguage")


class AgentResponse(BaseModel):
    """Response returned for every processed message."""
    model_config = ConfigDict(populate_by_name=True)

    intro: str
    products: List[Product] = []
    follow_up: str = Field(alias="followUp")
    meta: ResponseMeta


class GeneratedResponse(BaseModel):
    """Narrative produced by the response generator."""
    model_config = ConfigDict(populate_by_name=True)

    intro: str
    follow_up: str = Field(alias="followUp")


class ChatRequest(BaseModel):
    """Input model for the chat endpoint."""
    thread_id: str = Field(min_length=1, max_length=128)
    message: str = Field(min_length=1, max_length=2000)


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str
    detail: str
    category: Optional[str] = None
    extra: Dict[str, Any] = {}
