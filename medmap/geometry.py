"""
Сверка ключей статистики с геометрией (GeoJSON).

Здесь НЕТ исправлений данных.
Только отчет: какие ключи нашли свой полигон, какие нет, и что похоже.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import AbstractSet, Any, Dict, List, Sequence, Tuple, Union

from medmap.regions import REGISTRY, RegionRegistry
from medmap.snapshot import DataSnapshot

logger = logging.getLogger(__name__)

DEFAULT_KEY_PROPERTY = "NAME_1"


class GeometryError(ValueError):
    """GeoJSON file is missing or not a FeatureCollection."""


def load_geojson(path: Union[str, Path]) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise GeometryError(f"Файл {p} с геометрией не найден.")
    try:
        with open(p, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise GeometryError(f"Файл {p} не является корректным GeoJSON: {e}") from e
    except OSError as e:
        raise GeometryError(f"Файл {p} с геометрией не удалось прочитать: {e}") from e
    return validate_geojson(data)


def validate_geojson(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict) or data.get("type") != "FeatureCollection":
        raise GeometryError("ожидается GeoJSON FeatureCollection")
    if not isinstance(data.get("features"), list):
        raise GeometryError("в FeatureCollection нет списка features")
    return data


def feature_keys(geojson: Dict[str, Any], prop: str = DEFAULT_KEY_PROPERTY) -> List[str]:
    """Region keys of the features, in feature order; features without the property are skipped."""
    keys: List[str] = []
    for feature in geojson.get("features", []):
        value = (feature.get("properties") or {}).get(prop)
        if value:
            keys.append(str(value))
    return keys


@dataclass(frozen=True)
class JoinReport:
    matched: Tuple[str, ...]
    missing_geometry: Tuple[str, ...]   # есть данные, нет полигона
    missing_data: Tuple[str, ...]       # есть полигон, нет данных
    suggestions: Dict[str, List[Tuple[str, float]]] = field(default_factory=dict)

    @property
    def is_complete(self) -> bool:
        return not self.missing_geometry

    def as_dict(self) -> Dict[str, Any]:
        return {
            "matched": len(self.matched),
            "missing_geometry": list(self.missing_geometry),
            "missing_data": list(self.missing_data),
            "suggestions": {
                k: [{"key": key, "score": round(score, 3)} for key, score in v]
                for k, v in self.suggestions.items()
            },
        }


def geometry_key(key: str, geo_keys: AbstractSet[str], registry: RegionRegistry = REGISTRY) -> str:
    """Geometry spelling of a canonical key (e.g. Arkhangelsk -> Arkhangel'sk)."""
    if key in geo_keys:
        return key
    ident = registry.get(key)
    if ident is not None:
        for alt in ident.alt_keys:
            if alt in geo_keys:
                return alt
    return key


def join_report(
    snapshot: DataSnapshot,
    keys: Sequence[str],
    registry: RegionRegistry = REGISTRY,
) -> JoinReport:
    geo_keys = set(keys)
    on_map = {k: geometry_key(k, geo_keys, registry) for k in snapshot.keys()}

    matched = tuple(k for k, g in on_map.items() if g in geo_keys)
    missing_geometry = tuple(k for k, g in on_map.items() if g not in geo_keys)
    missing_data = tuple(sorted(geo_keys - set(on_map.values())))

    suggestions: Dict[str, List[Tuple[str, float]]] = {}
    for k in missing_geometry:
        cands = []
        for key, score in registry.suggest(k):
            geo_key = geometry_key(key, geo_keys, registry)
            if geo_key in geo_keys:
                cands.append((geo_key, score))
        if cands:
            suggestions[k] = cands

    if missing_geometry:
        logger.warning("no geometry for %s data regions: %s", len(missing_geometry), ", ".join(missing_geometry))
    return JoinReport(matched, missing_geometry, missing_data, suggestions)
