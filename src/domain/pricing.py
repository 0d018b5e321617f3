"""
Pricing - Deterministic length-based name price.

price(name) = base_price // len(name)

Shorter names cost more. Very long names may price to 0; that is a valid,
free registration.
"""

from dataclasses import dataclass

from .exceptions import NameTooShort
from .identifiers import NameLike, name_bytes

WEI_PER_ETHER = 10**18
BASE_PRICE = WEI_PER_ETHER
MIN_LENGTH = 1


@dataclass(frozen=True)
class PriceSchedule:
    """Registry fee constants."""

    base_price: int = BASE_PRICE
    min_length: int = MIN_LENGTH

    def price(self, name: NameLike) -> int:
        """
        Compute the price of a name in wei.

        Raises:
            NameTooShort: If the name is shorter than min_length bytes
        """
        length = len(name_bytes(name))
        if length < self.min_length:
            raise NameTooShort(f"length {length} < {self.min_length}")
        return self.base_price // length
