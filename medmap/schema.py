"""
Схема колонок исходной таблицы.

Порядок болезней и смещения колонок не выводятся из заголовка файла:
они задаются здесь явно и версионируются. Любое изменение формы
статистики нужно отражать новой версией схемы.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Tuple, Union


class SchemaError(ValueError):
    """Invalid column schema."""


DISEASE_NAMES: Tuple[str, ...] = (
    "Врожденные аномалии (пороки развития), деформации и хромосомные нарушения",
    "Врожденные аномалии системы кровообращения",
    "Врожденные аномалии развития нервной системы",
    "Врожденные деформации бедра",
    "Неопределенность пола и псевдогермафродитизм",
    "Врожденный ихтиоз",
)


@dataclass(frozen=True)
class ColumnSchema:
    disease_names: Tuple[str, ...] = DISEASE_NAMES
    version: str = "1"
    name_column: int = 0
    # колонка 1 — служебная (население / порядковый номер), пропускаем
    first_disease_column: int = 2
    header_lines: int = 2
    delimiter: str = ";"
    district_marker: str = "ФО"
    national_label: str = "Российская Федерация"

    def count_column(self, index: int) -> int:
        return self.first_disease_column + index * 2

    def rate_column(self, index: int) -> int:
        return self.count_column(index) + 1

    @property
    def expected_width(self) -> int:
        return self.first_disease_column + len(self.disease_names) * 2

    def is_leaf_region(self, name: str) -> bool:
        """False for empty names and for federal-district / national subtotal rows."""
        if not name:
            return False
        if self.district_marker and self.district_marker in name:
            return False
        return name != self.national_label

    def validate(self) -> "ColumnSchema":
        if not self.disease_names:
            raise SchemaError("schema must list at least one disease")
        if any(not str(d).strip() for d in self.disease_names):
            raise SchemaError("disease names must be non-empty")
        if len(set(self.disease_names)) != len(self.disease_names):
            raise SchemaError("disease names must be unique")
        if self.name_column < 0 or self.first_disease_column < 0 or self.header_lines < 0:
            raise SchemaError("column offsets and header depth must be non-negative")
        if self.name_column >= self.first_disease_column:
            raise SchemaError(
                f"disease columns (from {self.first_disease_column}) must follow "
                f"the name column ({self.name_column})"
            )
        for key in ("delimiter", "district_marker", "national_label"):
            if not isinstance(getattr(self, key), str):
                raise SchemaError(f"'{key}' must be a string")
        if not self.delimiter:
            raise SchemaError("delimiter must be non-empty")
        return self


DEFAULT_SCHEMA = ColumnSchema().validate()

_SCHEMA_KEYS = {
    "disease_names",
    "version",
    "name_column",
    "first_disease_column",
    "header_lines",
    "delimiter",
    "district_marker",
    "national_label",
}


def schema_from_dict(data: Dict[str, Any]) -> ColumnSchema:
    if not isinstance(data, dict):
        raise SchemaError("schema must be a JSON object")
    unknown = sorted(set(data) - _SCHEMA_KEYS)
    if unknown:
        raise SchemaError(f"unknown schema keys: {', '.join(unknown)}")
    kwargs = dict(data)
    if "disease_names" in kwargs:
        names = kwargs["disease_names"]
        if not isinstance(names, list):
            raise SchemaError("'disease_names' must be a list")
        kwargs["disease_names"] = tuple(str(n) for n in names)
    if "version" in kwargs:
        kwargs["version"] = str(kwargs["version"])
    for key in ("name_column", "first_disease_column", "header_lines"):
        if key in kwargs and (not isinstance(kwargs[key], int) or isinstance(kwargs[key], bool)):
            raise SchemaError(f"'{key}' must be an integer")
    return ColumnSchema(**kwargs).validate()


def load_schema(path: Union[str, Path]) -> ColumnSchema:
    """Read a schema JSON file; keys missing from the file keep their defaults."""
    p = Path(path)
    if not p.exists():
        raise SchemaError(f"Файл схемы {p} не найден.")
    try:
        with open(p, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise SchemaError(f"Файл схемы {p} не является корректным JSON: {e}") from e
    except OSError as e:
        raise SchemaError(f"Файл схемы {p} не удалось прочитать: {e}") from e
    return schema_from_dict(data)
