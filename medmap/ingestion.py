"""
Разбор CSV со статистикой врожденных аномалий по регионам.

Формат (разделитель ';', локаль ru):

    <заголовок 1>
    <заголовок 2>
    <Регион>;<служебная>;<случаи 1>;<на 100 тыс. 1>;...;<случаи 6>;<на 100 тыс. 6>

Разбор никогда не бросает исключений: битые числа -> 0, битые строки пропускаются,
пустой ввод -> пустой результат. Что показать пользователю, решает вызывающий код.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from medmap.normalization import parse_decimal, round_half_up
from medmap.schema import DEFAULT_SCHEMA, ColumnSchema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiseaseStat:
    cases: int
    rate: float


@dataclass(frozen=True)
class RegionRecord:
    name: str
    statistics: Mapping[str, DiseaseStat]
    total_cases: int

    def __post_init__(self):
        # статистика только для чтения: total_cases всегда равен сумме
        object.__setattr__(self, "statistics", MappingProxyType(dict(self.statistics)))
        expected = sum(s.cases for s in self.statistics.values())
        if self.total_cases != expected:
            raise ValueError(
                f"total_cases={self.total_cases} for '{self.name}' does not match sum of cases {expected}"
            )

    @classmethod
    def from_statistics(cls, name: str, statistics: Mapping[str, DiseaseStat]) -> "RegionRecord":
        return cls(name=name, statistics=statistics, total_cases=sum(s.cases for s in statistics.values()))

    def __deepcopy__(self, memo):
        return self


def _split_lines(raw_text: Optional[str]) -> List[str]:
    if not raw_text:
        return []
    return [line for line in raw_text.splitlines() if line.strip()]


def _row_statistics(parts: List[str], schema: ColumnSchema) -> Dict[str, DiseaseStat]:
    stats: Dict[str, DiseaseStat] = {}
    for i, disease in enumerate(schema.disease_names):
        count_idx = schema.count_column(i)
        if count_idx >= len(parts):
            # короткая строка: хвостовые болезни опускаем, а не зануляем
            break
        rate_idx = schema.rate_column(i)
        absolute = parse_decimal(parts[count_idx])
        rate = parse_decimal(parts[rate_idx]) if rate_idx < len(parts) else 0.0
        stats[disease] = DiseaseStat(cases=round_half_up(absolute), rate=rate)
    return stats


def parse_csv(raw_text: Optional[str], schema: ColumnSchema = DEFAULT_SCHEMA) -> Dict[str, RegionRecord]:
    """
    Parse raw CSV text into {region name (as in source) -> RegionRecord}.

    Blank lines are dropped first, then `schema.header_lines` lines are skipped.
    Subtotal rows (federal districts, the national total) are excluded.
    Duplicate region rows: the last one wins.
    """
    lines = _split_lines(raw_text)
    data_lines = lines[schema.header_lines:]

    regions: Dict[str, RegionRecord] = {}
    wide_rows = 0
    skipped = 0

    for lineno, line in enumerate(data_lines, start=schema.header_lines + 1):
        parts = [p.strip() for p in line.split(schema.delimiter)]
        if len(parts) < 2:
            skipped += 1
            logger.debug("line %s: too few fields, skipped", lineno)
            continue

        region_name = parts[schema.name_column] if schema.name_column < len(parts) else ""
        if not schema.is_leaf_region(region_name):
            skipped += 1
            logger.debug("line %s: not a leaf region (%r), skipped", lineno, region_name)
            continue

        if len(parts) > schema.expected_width:
            wide_rows += 1

        stats = _row_statistics(parts, schema)
        if not stats:
            skipped += 1
            logger.debug("line %s: no disease columns for %r, skipped", lineno, region_name)
            continue

        if region_name in regions:
            logger.warning("duplicate region row %r at line %s, last row wins", region_name, lineno)
        regions[region_name] = RegionRecord.from_statistics(region_name, stats)

    if wide_rows:
        logger.warning(
            "%s rows have more than %s columns expected by schema v%s; check disease column order",
            wide_rows,
            schema.expected_width,
            schema.version,
        )
    logger.debug("parsed %s regions, skipped %s rows", len(regions), skipped)
    return regions
