"""
Снимок данных для карты: результат одного разбора CSV.

Каждый разбор создает новый DataSnapshot целиком (записи по ключам геометрии
и границы шкалы), старый просто заменяется. Общего изменяемого состояния нет.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pandas as pd

from medmap.ingestion import RegionRecord, parse_csv
from medmap.regions import REGISTRY, RegionRegistry
from medmap.schema import DEFAULT_SCHEMA, ColumnSchema

logger = logging.getLogger(__name__)

DEFAULT_MIN_CASES = 0
DEFAULT_MAX_CASES = 40000


@dataclass(frozen=True)
class DataSnapshot:
    regions: Mapping[str, RegionRecord]
    min_cases: int = DEFAULT_MIN_CASES
    max_cases: int = DEFAULT_MAX_CASES
    unresolved: Tuple[str, ...] = ()
    schema_version: str = DEFAULT_SCHEMA.version

    def __post_init__(self):
        object.__setattr__(self, "regions", MappingProxyType(dict(self.regions)))

    def __deepcopy__(self, memo):
        # gr.State копирует значение по умолчанию; снимок неизменяем и делится как есть
        return self

    @property
    def is_empty(self) -> bool:
        return not self.regions

    def get(self, key: Optional[str]) -> Optional[RegionRecord]:
        if not key:
            return None
        return self.regions.get(key)

    def keys(self) -> List[str]:
        return list(self.regions.keys())

    def to_frame(self, registry: RegionRegistry = REGISTRY) -> pd.DataFrame:
        """Long table: one row per (region, disease)."""
        rows: List[Dict[str, Any]] = []
        for key, rec in self.regions.items():
            for disease, stat in rec.statistics.items():
                rows.append(
                    {
                        "key": key,
                        "display_name": registry.display_name(key),
                        "region": rec.name,
                        "disease": disease,
                        "cases": stat.cases,
                        "rate": stat.rate,
                    }
                )
        return pd.DataFrame(rows, columns=["key", "display_name", "region", "disease", "cases", "rate"])

    def totals_frame(self, registry: RegionRegistry = REGISTRY) -> pd.DataFrame:
        """One row per region, sorted by total cases (descending)."""
        rows = [
            {
                "key": key,
                "display_name": registry.display_name(key),
                "region": rec.name,
                "total_cases": rec.total_cases,
                "resolved": key in registry,
            }
            for key, rec in self.regions.items()
        ]
        df = pd.DataFrame(rows, columns=["key", "display_name", "region", "total_cases", "resolved"])
        return df.sort_values("total_cases", ascending=False, kind="stable").reset_index(drop=True)


EMPTY_SNAPSHOT = DataSnapshot(regions={})


def case_bounds(records: Mapping[str, RegionRecord]) -> Tuple[int, int]:
    """Min/max over regions with cases; defaults when nothing is positive."""
    totals = [r.total_cases for r in records.values() if r.total_cases > 0]
    if not totals:
        return DEFAULT_MIN_CASES, DEFAULT_MAX_CASES
    return min(totals), max(totals)


def key_records(
    parsed: Mapping[str, RegionRecord],
    registry: RegionRegistry = REGISTRY,
    match_display_names: bool = False,
) -> Dict[str, RegionRecord]:
    """
    Re-key {source name -> record} by canonical geometry key.

    match_display_names=False: strict alias lookup with identity fallback.
    match_display_names=True: names missing from the alias table are also
    looked up by every name the registry knows (display, official, normalized).
    """
    keyed: Dict[str, RegionRecord] = {}
    for source_name, rec in parsed.items():
        key = registry.resolve(source_name)
        if key == source_name and match_display_names:
            ident = registry.find(source_name)
            if ident is not None:
                key = ident.key
        if key in keyed:
            logger.warning(
                "regions %r and %r share key %r, keeping %r",
                keyed[key].name,
                source_name,
                key,
                source_name,
            )
        keyed[key] = rec
    return keyed


def build_snapshot(
    raw_text: Optional[str],
    schema: ColumnSchema = DEFAULT_SCHEMA,
    registry: RegionRegistry = REGISTRY,
    match_display_names: bool = False,
) -> DataSnapshot:
    parsed = parse_csv(raw_text, schema)
    keyed = key_records(parsed, registry, match_display_names=match_display_names)
    min_cases, max_cases = case_bounds(keyed)

    unresolved = tuple(sorted(k for k in keyed if k not in registry))
    if unresolved:
        logger.warning(
            "%s regions have no geometry key and will not be drawn: %s",
            len(unresolved),
            ", ".join(unresolved),
        )

    return DataSnapshot(
        regions=keyed,
        min_cases=min_cases,
        max_cases=max_cases,
        unresolved=unresolved,
        schema_version=schema.version,
    )
