import logging
import math
from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np

from .errors import MalformedRowError
from .schemas import ApproachRecord, NormalizedResponse

logger = logging.getLogger(__name__)

AU_KM = 149_597_870.7
LD_PER_AU = 389.17


def decode_row(fields: Sequence[str], row: Any) -> Dict[str, Any]:
    """Pair each column name with the value at the same position in ``row``."""
    if not isinstance(row, (list, tuple)):
        return {}
    return {name: value for name, value in zip(fields, row)}


def parse_number(record: Mapping[str, Any], field: str) -> float:
    value = record.get(field)
    if value is None or isinstance(value, bool):
        raise MalformedRowError(field, value)
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise MalformedRowError(field, value) from e
    if not math.isfinite(number):
        raise MalformedRowError(field, value)
    return number


def _number_or_nan(record: Mapping[str, Any], field: str) -> float:
    try:
        return parse_number(record, field)
    except MalformedRowError as e:
        logger.debug("Malformed row: %s", e.message)
        return float("nan")


def _text(record: Mapping[str, Any], field: str) -> Optional[str]:
    value = record.get(field)
    return None if value is None else str(value)


def _finite_or_nan(values: np.ndarray) -> np.ndarray:
    return np.where(np.isfinite(values), values, np.nan)


def _declared_count(raw: Mapping[str, Any]) -> Optional[int]:
    # CAD sends count as a string
    try:
        return int(raw.get("count"))
    except (TypeError, ValueError):
        return None


def normalize(raw: Any) -> NormalizedResponse:
    if not isinstance(raw, Mapping):
        return NormalizedResponse(count=0, approaches=[])
    rows = raw.get("data")
    if not isinstance(rows, list) or not rows or _declared_count(raw) == 0:
        return NormalizedResponse(count=0, approaches=[])

    fields = raw.get("fields")
    if not isinstance(fields, list):
        fields = []
    if _declared_count(raw) not in (None, len(rows)):
        logger.warning(
            "Upstream count %s disagrees with %d rows", raw.get("count"), len(rows)
        )

    records = [decode_row(fields, row) for row in rows]
    au = np.array([_number_or_nan(r, "dist") for r in records], dtype=float)
    with np.errstate(over="ignore", invalid="ignore"):
        km = _finite_or_nan(np.round(au * AU_KM, 0))
        ld = _finite_or_nan(np.round(au * LD_PER_AU, 2))

    approaches: List[ApproachRecord] = []
    for i, r in enumerate(records):
        approaches.append(
            ApproachRecord(
                name=_text(r, "des"),
                date=_text(r, "cd"),
                distance_au=float(au[i]),
                distance_km=float(km[i]),
                distance_lunar_distances=float(ld[i]),
                relative_velocity_km_per_sec=_number_or_nan(r, "v_rel"),
                absolute_magnitude=_number_or_nan(r, "h"),
                orbit_id=_text(r, "orbit_id"),
            )
        )
    return NormalizedResponse(
        count=len(approaches),
        signature=raw.get("signature"),
        approaches=approaches,
    )
