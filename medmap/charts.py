"""
Представления снимка для UI: карта, панель региона, столбчатая диаграмма.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from medmap.coloring import NO_DATA_COLOR, plotly_colorscale, region_color
from medmap.geometry import DEFAULT_KEY_PROPERTY, feature_keys, geometry_key
from medmap.ingestion import RegionRecord
from medmap.regions import REGISTRY, RegionRegistry
from medmap.snapshot import DataSnapshot

REGION_FRAME_COLUMNS = ["disease", "cases", "rate", "share"]


def region_frame(record: Optional[RegionRecord]) -> pd.DataFrame:
    """Per-disease table of one region; share is % of the region's total cases."""
    if record is None:
        return pd.DataFrame(columns=REGION_FRAME_COLUMNS)
    total = record.total_cases
    rows = [
        {
            "disease": disease,
            "cases": stat.cases,
            "rate": stat.rate,
            "share": round(stat.cases / total * 100, 1) if total else 0.0,
        }
        for disease, stat in record.statistics.items()
    ]
    return pd.DataFrame(rows, columns=REGION_FRAME_COLUMNS)


def region_details_markdown(
    key: Optional[str],
    record: Optional[RegionRecord],
    snapshot: Optional[DataSnapshot] = None,
    registry: RegionRegistry = REGISTRY,
) -> str:
    if not key:
        return "Выберите регион на карте или в списке."
    title = registry.display_name(key)
    if record is None:
        return f"### {title}\n\nНет данных по региону."

    lines = [f"### {title}", ""]
    if record.name != title:
        lines.append(f"В исходной таблице: *{record.name}*")
        lines.append("")
    color = region_color(record.total_cases, snapshot.min_cases, snapshot.max_cases) if snapshot else None
    total_line = f"**Всего случаев: {record.total_cases:,}**".replace(",", " ")
    if color:
        total_line += f" <span style='color:{color}'>■</span>"
    lines.append(total_line)
    lines.append("")
    lines.append("| Заболевание | Случаев | На 100 тыс. | Доля, % |")
    lines.append("|---|---:|---:|---:|")
    for row in region_frame(record).itertuples(index=False):
        lines.append(f"| {row.disease} | {row.cases} | {row.rate:g} | {row.share:g} |")
    return "\n".join(lines)


def map_frame(
    snapshot: DataSnapshot,
    keys: Sequence[str],
    registry: RegionRegistry = REGISTRY,
) -> pd.DataFrame:
    """Rows for every data region that has a polygon."""
    geo_keys = set(keys)
    rows: List[Dict[str, Any]] = []
    for key, rec in snapshot.regions.items():
        geo_key = geometry_key(key, geo_keys, registry)
        if geo_key not in geo_keys:
            continue
        rows.append(
            {
                "key": key,
                "geo_key": geo_key,
                "display_name": registry.display_name(key),
                "total_cases": rec.total_cases,
            }
        )
    df = pd.DataFrame(rows, columns=["key", "geo_key", "display_name", "total_cases"])
    return df.astype({"total_cases": "int64"})


def choropleth_figure(
    snapshot: DataSnapshot,
    geojson: Dict[str, Any],
    prop: str = DEFAULT_KEY_PROPERTY,
    registry: RegionRegistry = REGISTRY,
) -> go.Figure:
    keys = feature_keys(geojson, prop)
    df = map_frame(snapshot, keys, registry)
    featureidkey = f"properties.{prop}"

    with_cases = df[df["total_cases"] > 0]
    fig = px.choropleth(
        with_cases,
        geojson=geojson,
        locations="geo_key",
        featureidkey=featureidkey,
        color="total_cases",
        color_continuous_scale=plotly_colorscale(),
        range_color=(snapshot.min_cases, snapshot.max_cases),
        hover_name="display_name",
        custom_data=["key"],
        labels={"total_cases": "Всего случаев"},
    )

    no_data = sorted(set(keys) - set(with_cases["geo_key"]))
    if no_data:
        fig.add_trace(
            go.Choropleth(
                geojson=geojson,
                locations=no_data,
                z=[1] * len(no_data),
                featureidkey=featureidkey,
                colorscale=[[0, NO_DATA_COLOR], [1, NO_DATA_COLOR]],
                showscale=False,
                customdata=[[k] for k in no_data],
                text=[registry.display_name(k) for k in no_data],
                hovertemplate="%{text}<br>Нет данных<extra></extra>",
                name="Нет данных",
            )
        )

    fig.update_geos(fitbounds="locations", visible=False)
    fig.update_traces(marker_line_color="#ffffff", marker_line_width=0.5)
    fig.update_layout(margin={"r": 0, "t": 0, "l": 0, "b": 0}, height=650)
    return fig
