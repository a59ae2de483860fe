"""
Color model for background highlighting.

Channels are floats conventionally in [0, 1], the same scale the Sheets API
uses. Nothing here clamps: out-of-range values propagate.
"""

from dataclasses import dataclass
from typing import Optional

from core.utils import UserInputError


@dataclass(frozen=True)
class Color:
    red: float
    green: float
    blue: float
    alpha: float = 1.0

    def to_sheets_color(self) -> dict:
        return {
            "red": self.red,
            "green": self.green,
            "blue": self.blue,
            "alpha": self.alpha,
        }

    @classmethod
    def from_sheets_color(cls, color: Optional[dict]) -> Optional["Color"]:
        """
        Build a Color from a Sheets API color dict.

        The API omits zero channels and omits alpha for solid colors, so missing
        channels read as 0.0 and a missing alpha reads as 1.0.
        """
        if color is None:
            return None
        return cls(
            red=float(color.get("red", 0.0)),
            green=float(color.get("green", 0.0)),
            blue=float(color.get("blue", 0.0)),
            alpha=float(color.get("alpha", 1.0)),
        )

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        """Parse '#RRGGBB' or 'RRGGBB' into an opaque Color."""
        trimmed = value.strip()
        if trimmed.startswith("#"):
            trimmed = trimmed[1:]

        if len(trimmed) != 6:
            raise UserInputError(f"Color '{value}' must be in format #RRGGBB or RRGGBB.")

        try:
            red = int(trimmed[0:2], 16) / 255
            green = int(trimmed[2:4], 16) / 255
            blue = int(trimmed[4:6], 16) / 255
        except ValueError as exc:
            raise UserInputError(f"Color '{value}' is not valid hex.") from exc

        return cls(red, green, blue, 1.0)

    def to_hex(self) -> str:
        def _component(channel: float) -> int:
            # Clamp and round to nearest integer in 0-255
            return max(0, min(255, int(round(channel * 255))))

        return f"#{_component(self.red):02X}{_component(self.green):02X}{_component(self.blue):02X}"


def lerp(color1: Color, color2: Color, amount: float) -> Color:
    """Blend color1 toward color2; amount 0 gives color1, 1 gives color2."""
    remainder = 1 - amount
    return Color(
        red=color1.red * remainder + color2.red * amount,
        green=color1.green * remainder + color2.green * amount,
        blue=color1.blue * remainder + color2.blue * amount,
        alpha=color1.alpha * remainder + color2.alpha * amount,
    )


WHITE = Color(1.0, 1.0, 1.0, 1.0)
POSITIVE_RED = Color(1.0, 0.5, 0.5, 1.0)
NEGATIVE_GREEN = Color(0.5, 1.0, 0.5, 1.0)
