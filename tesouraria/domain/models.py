"""Domain type definitions for tesouraria.

These NewTypes and literals provide semantic clarity and help with type checking:
- Money: Amount in centavos (minor units)
- DenominationCategory: Whether a denomination is a banknote or a coin
- Direction: Whether a manual transaction puts units into or takes them out of the drawer
"""

from typing import Literal, NewType

# Money amounts are stored as centavos (minor units) to avoid floating point errors
Money = NewType("Money", int)

DenominationCategory = Literal["note", "coin"]

Direction = Literal["in", "out"]

NOTE: DenominationCategory = "note"
COIN: DenominationCategory = "coin"

DIRECTION_IN: Direction = "in"
DIRECTION_OUT: Direction = "out"
