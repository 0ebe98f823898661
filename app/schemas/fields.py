"""Numeric field types bounded by the columns they are stored in."""

from decimal import Decimal
from typing import Annotated

from pydantic import Field

# Numeric(12, 2)
Money = Annotated[Decimal, Field(max_digits=12, decimal_places=2)]
# Numeric(12, 3)
Quantity = Annotated[Decimal, Field(max_digits=12, decimal_places=3)]
# Numeric(6, 2)
Percent = Annotated[Decimal, Field(max_digits=6, decimal_places=2)]

MAX_ITEM_QUANTITY = 1_000_000
ItemQuantity = Annotated[int, Field(gt=0, le=MAX_ITEM_QUANTITY)]
