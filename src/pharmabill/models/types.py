"""Shared field types"""

from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer

# Decimal amounts travel as JSON numbers, like the API sends them
Amount = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]
