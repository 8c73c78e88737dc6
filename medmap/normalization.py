"""
Нормализация значений исходной таблицы.

Принципы:
- стандартизируем пустоты в None
- числа в русской локали: запятая как десятичный разделитель, пробелы/NBSP как разделители разрядов
- названия регионов для поиска по справочнику: lower, ё->е, схлопнутые пробелы
"""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

EMPTY_VALUES = {"", " ", "na", "nan", "null", "none", "-", "—", "n/a", "нет"}


def normalize_empty(value: Any) -> Optional[str]:
    """Convert various empty-like inputs to None; otherwise return stripped string."""
    if value is None:
        return None
    # pandas NaN
    if isinstance(value, float) and value != value:
        return None

    v = str(value).strip()
    if v == "":
        return None
    if v.lower() in EMPTY_VALUES:
        return None
    return v


def _base_text(s: str) -> str:
    """Base normalization shared by all name lookups."""
    # Excel-выгрузки часто содержат NBSP (\xa0) и табы
    s = s.replace("\xa0", " ").replace("\t", " ")
    s = s.strip().lower()
    s = s.replace("ё", "е")
    s = s.replace("—", "-").replace("–", "-")
    s = re.sub(r"\s+", " ", s).strip()
    return s


def normalize_region(value: Any) -> Optional[str]:
    """Normalize region name (keep meaningful words like 'область', 'край')."""
    v = normalize_empty(value)
    if v is None:
        return None
    return _base_text(v)


def parse_decimal(value: Any) -> float:
    """
    Parse a locale-formatted number ("1 234,5") into a float.

    Empty, unparseable, non-finite and negative values give 0.0.
    """
    v = normalize_empty(value)
    if v is None:
        return 0.0
    s = v.replace("\xa0", "").replace(" ", "").replace(",", ".")
    try:
        num = float(s)
    except ValueError:
        return 0.0
    if not math.isfinite(num) or num < 0:
        return 0.0
    return num


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 away from zero (non-negative input)."""
    # Decimal(float) точен: 0.49999999999999994 -> 0, а не 1
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))
