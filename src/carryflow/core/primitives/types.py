from decimal import Decimal
from typing import Annotated

from pydantic import Field

# constrained types
PositiveInt = Annotated[int, Field(strict=True, ge=0)]
PositiveIntGe1 = Annotated[int, Field(strict=True, ge=1)]
FloatBetween0And1 = Annotated[float, Field(ge=0, le=1)]

# Decimal-backed amounts; ints and numeric strings coerce on construction
MoneyAmount = Annotated[Decimal, Field(ge=0, allow_inf_nan=False)]
Percentage = Annotated[Decimal, Field(ge=0, le=100, allow_inf_nan=False)]
Rate = Annotated[Decimal, Field(ge=0, allow_inf_nan=False)]
