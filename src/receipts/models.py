"""Receipt data models."""

from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from shared.validators import DEFAULT_CATEGORY, DEFAULT_ITEM_NAME, coerce_price


class CamelModel(BaseModel):
    """Stored as snake_case, served as camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='ignore'
    )

    def to_api(self) -> dict:
        return self.model_dump(mode='json', by_alias=True, exclude_none=True)

    def to_item(self) -> dict:
        return self.model_dump(exclude_none=True)


class LineItem(CamelModel):
    """One priced entry of a receipt."""

    item_id: Optional[str] = None
    name: str = DEFAULT_ITEM_NAME
    category: str = DEFAULT_CATEGORY
    price: float = 0.0

    @field_validator('name', mode='before')
    @classmethod
    def default_name(cls, v: Any) -> str:
        if v is None or not str(v).strip():
            return DEFAULT_ITEM_NAME
        return str(v).strip()

    @field_validator('category', mode='before')
    @classmethod
    def default_category(cls, v: Any) -> str:
        if v is None or not str(v).strip():
            return DEFAULT_CATEGORY
        return str(v).strip()

    @field_validator('price', mode='before')
    @classmethod
    def coerce(cls, v: Any) -> float:
        return coerce_price(v)


class ParsedReceipt(CamelModel):
    """Structured receipt returned by the parsing adapter."""

    vendor: Optional[str] = None
    date: Optional[str] = None
    items: List[LineItem] = Field(default_factory=list)


class ExpenseRecord(CamelModel):
    """Expense record as persisted in the receipts table."""

    google_id: str
    receipt_id: Optional[str] = None
    vendor: Optional[str] = None
    date: Optional[str] = None
    items: List[LineItem] = Field(default_factory=list)
    created_at: Optional[str] = None
