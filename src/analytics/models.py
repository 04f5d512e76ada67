"""Analytics data models."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CategorySpend(BaseModel):
    """Spend in one category and its share of the total."""

    name: str
    amount: float
    percentage: int


class CategoryComparison(BaseModel):
    """Owner spend compared with the peer average for one category."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    category: str
    difference: int
    is_higher: bool
