"""
Board - The 5x5 grid and the objects placed on it.

Design principles:
- Objects are plain records: the engine only reads them
- The vocabulary (types, names, sizes, colors) lives here so every layer
  validates against the same tables
- One object per cell is a placement invariant owned by the session layer
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence


GRID_SIZE = 5


class ObjectType(str, Enum):
    """Object families that can be placed on the board."""
    SHAPE = "shape"
    ANIMAL = "animal"
    FOOD = "food"


class Size(str, Enum):
    SMALL = "S"
    MEDIUM = "M"
    LARGE = "L"


class Color(str, Enum):
    RED = "red"
    ORANGE = "orange"
    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"
    PURPLE = "purple"


# Display value for each color (used by clients that render the board)
COLOR_VALUES: dict[str, str] = {
    Color.RED.value: "#f44336",
    Color.ORANGE.value: "#ff9800",
    Color.YELLOW.value: "#ffeb3b",
    Color.GREEN.value: "#4caf50",
    Color.BLUE.value: "#2196f3",
    Color.PURPLE.value: "#9c27b0",
}

EMOJIS: dict[str, dict[str, str]] = {
    ObjectType.SHAPE.value: {
        "square": "⬜️",
        "triangle": "🔺",
        "circle": "⭕️",
        "star": "⭐️",
    },
    ObjectType.ANIMAL.value: {
        "snail": "🐌",
        "lion": "🦁",
        "fish": "🐟",
        "monkey": "🐒",
        "dinosaur": "🦕",
    },
    ObjectType.FOOD.value: {
        "drumstick": "🍗",
        "taco": "🌮",
        "icecream": "🍨",
        "salad": "🥗",
    },
}

SIZES = [s.value for s in Size]
COLORS = [c.value for c in Color]

# Defaults for freshly placed objects
DEFAULT_SIZE = Size.MEDIUM.value
DEFAULT_COLOR = Color.BLUE.value


@dataclass
class BoardObject:
    """
    An object sitting in one cell of the grid.

    Fields use the raw string values ("animal", "S", "purple") so that
    objects coming from JSON compare equal to ones built in code.
    Rows and columns are 0-based.
    """
    id: str
    type: str
    name: str
    size: str
    color: str
    row: int
    col: int

    @property
    def emoji(self) -> str:
        return EMOJIS.get(self.type, {}).get(self.name, "")

    @property
    def position(self) -> str:
        """1-based (row,col) label used in hints."""
        return f"({self.row + 1},{self.col + 1})"

    def is_a(self, obj_type: str, name: str) -> bool:
        return self.type == obj_type and self.name == name

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "name": self.name,
            "size": self.size,
            "color": self.color,
            "row": self.row,
            "col": self.col,
        }

    @classmethod
    def from_dict(cls, data: dict) -> BoardObject:
        return cls(
            id=str(data["id"]),
            type=data["type"],
            name=data["name"],
            size=data["size"],
            color=data["color"],
            row=int(data["row"]),
            col=int(data["col"]),
        )


def is_valid_name(obj_type: str, name: str) -> bool:
    """Check that a name belongs to the given object type."""
    return name in EMOJIS.get(obj_type, {})


def in_grid(row: int, col: int) -> bool:
    return 0 <= row < GRID_SIZE and 0 <= col < GRID_SIZE


def object_at(objects: Iterable[BoardObject], row: int, col: int) -> BoardObject | None:
    """Find the object occupying a cell, if any."""
    for obj in objects:
        if obj.row == row and obj.col == col:
            return obj
    return None


def validate_object(obj: BoardObject, others: Sequence[BoardObject] = ()) -> list[str]:
    """
    Check a single object against the board vocabulary and the
    one-object-per-cell rule.

    Returns a list of error messages (empty if valid).
    """
    errors = []
    if obj.type not in EMOJIS:
        errors.append(f"Unknown object type '{obj.type}'")
    elif not is_valid_name(obj.type, obj.name):
        errors.append(f"'{obj.name}' is not a valid {obj.type}")
    if obj.size not in SIZES:
        errors.append(f"Unknown size '{obj.size}'")
    if obj.color not in COLORS:
        errors.append(f"Unknown color '{obj.color}'")
    if not in_grid(obj.row, obj.col):
        errors.append(f"Cell {obj.position} is outside the {GRID_SIZE}x{GRID_SIZE} grid")

    occupant = object_at((o for o in others if o.id != obj.id), obj.row, obj.col)
    if occupant is not None:
        errors.append(f"Cell {obj.position} is already occupied by {occupant.name}")
    return errors
