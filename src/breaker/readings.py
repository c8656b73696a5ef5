"""
Turns the breaker box data row into power readings.

Each mapping entry names a circuit and the column holding its reading as a
hexadecimal integer. Entries are handled independently: one bad column is
logged and skipped without affecting the others.
"""
import re
from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional, Sequence

from src.common.exceptions import (
    ColumnOutOfRangeError,
    InvalidHexValueError,
    ReadingError,
)
from src.common.logging_config import get_logger

logger = get_logger(__name__)

# The device reports these circuits in tens of watts.
SCALED_ENTITIES: Mapping[str, int] = {
    "main": 10,
    "ecocute": 10,
}

_HEX_RE = re.compile(r"[+-]?[0-9A-Fa-f]+")
_WORD_START_RE = re.compile(r"\b\w")

_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


@dataclass(frozen=True)
class PowerReading:
    """One gauge sample for one circuit."""
    entity: str
    friendly_name: str
    watts: float


def friendly_name(entity: str) -> str:
    """
    Derive a display label from a mapping key.

    "kitchen_appliances" -> "KitchenAppliances"
    """
    spaced = entity.replace("_", " ")
    titled = _WORD_START_RE.sub(lambda m: m.group(0).upper(), spaced)
    return titled.replace(" ", "")


def parse_hex(entity: str, field: str) -> int:
    """
    Parse a signed 64-bit hexadecimal field (no ``0x`` prefix).

    Raises:
        InvalidHexValueError: If the field is not valid hex or out of range
    """
    if not _HEX_RE.fullmatch(field):
        raise InvalidHexValueError(
            entity, f"could not parse hex value for entity '{entity}': {field!r}"
        )
    value = int(field, 16)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise InvalidHexValueError(
            entity, f"hex value for entity '{entity}' out of range: {field!r}"
        )
    return value


def read_entity(row: Sequence[str], entity: str, column: int) -> PowerReading:
    """
    Build the reading for a single mapping entry.

    Raises:
        ColumnOutOfRangeError: If *column* is beyond the end of *row*
        InvalidHexValueError: If the field is not hexadecimal
    """
    if column >= len(row):
        raise ColumnOutOfRangeError(
            entity, f"column index {column} for entity '{entity}' is out of bounds"
        )

    value = parse_hex(entity, row[column]) * SCALED_ENTITIES.get(entity, 1)
    return PowerReading(
        entity=entity,
        friendly_name=friendly_name(entity),
        watts=float(value),
    )


def extract_readings(
    row: Sequence[str],
    mappings: Mapping[str, int],
    on_skip: Optional[Callable[[ReadingError], None]] = None
) -> List[PowerReading]:
    """
    Build one reading per mapping entry, skipping entries that fail.

    Args:
        row: The data row
        mappings: Entity name -> column index
        on_skip: Called with the error for every skipped entry

    Returns:
        Readings for the entries that could be decoded
    """
    readings: List[PowerReading] = []
    for entity, column in mappings.items():
        try:
            readings.append(read_entity(row, entity, column))
        except ReadingError as e:
            logger.warning(str(e), extra={"entity": entity})
            if on_skip:
                on_skip(e)
    return readings
