"""Manual expense data models."""

from typing import Any, Optional
from pydantic import BaseModel, Field


class ExpenseItemInput(BaseModel):
    """One line of a manually entered expense."""

    description: Optional[Any] = Field(None, description="Item description")
    category: Optional[Any] = Field(None, description="Spending category")
    amount: Optional[Any] = Field(None, description="Item price; coerced to a number")
