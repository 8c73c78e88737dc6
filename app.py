import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import gradio as gr
import pandas as pd

from medmap.charts import choropleth_figure, region_details_markdown, region_frame
from medmap.geometry import GeometryError, feature_keys, join_report, load_geojson
from medmap.regions import REGISTRY
from medmap.schema import DEFAULT_SCHEMA, ColumnSchema, SchemaError, load_schema
from medmap.snapshot import EMPTY_SNAPSHOT, DataSnapshot, build_snapshot

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
DEFAULT_CSV = Path(os.environ.get("MEDMAP_CSV", BASE_DIR / "data.csv"))
DEFAULT_GEOJSON = Path(os.environ.get("MEDMAP_GEOJSON", BASE_DIR / "gadm41_RUS_1.json"))
DEFAULT_SCHEMA_FILE = os.environ.get("MEDMAP_SCHEMA")

CSV_ENCODINGS = ("utf-8-sig", "cp1251")


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _to_input_path(file_obj) -> Optional[str]:
    if file_obj is None:
        return None
    return file_obj.name if hasattr(file_obj, "name") else str(file_obj)


def read_text(path: Path) -> str:
    """CSV из Excel бывает в UTF-8 (с BOM) или в cp1251."""
    raw = path.read_bytes()
    for enc in CSV_ENCODINGS:
        try:
            return raw.decode(enc)
        except UnicodeDecodeError:
            continue
    return raw.decode("utf-8", errors="replace")


def _schema(schema_file) -> ColumnSchema:
    path = _to_input_path(schema_file) or DEFAULT_SCHEMA_FILE
    if not path:
        return DEFAULT_SCHEMA
    try:
        return load_schema(path)
    except SchemaError as e:
        raise gr.Error(f"Ошибка в схеме колонок: {e}")


def _geojson(geo_file) -> Optional[Dict[str, Any]]:
    path = _to_input_path(geo_file)
    if path is None:
        if not DEFAULT_GEOJSON.exists():
            return None
        path = DEFAULT_GEOJSON
    try:
        return load_geojson(path)
    except GeometryError as e:
        raise gr.Error(f"Не удалось загрузить карту России: {e}")


def _csv_text(csv_file) -> Optional[str]:
    path = _to_input_path(csv_file)
    if path is None:
        if not DEFAULT_CSV.exists():
            return None
        path = DEFAULT_CSV
    try:
        return read_text(Path(path))
    except OSError as e:
        raise gr.Error(f"Ошибка при чтении CSV файла: {e}")


def _region_choices(snapshot: DataSnapshot) -> List[Tuple[str, str]]:
    return sorted(
        ((REGISTRY.display_name(k), k) for k in snapshot.keys()),
        key=lambda item: item[0],
    )


def load_data(csv_file, geo_file, schema_file, match_display_names: bool):
    schema = _schema(schema_file)
    geojson = _geojson(geo_file)
    text = _csv_text(csv_file)

    snapshot = build_snapshot(text, schema=schema, match_display_names=bool(match_display_names))
    if snapshot.is_empty:
        gr.Warning("В CSV не найдено ни одного региона. Проверьте формат файла (разделитель ';', 2 строки заголовка).")

    report: Dict[str, Any] = {
        "регионов в данных": len(snapshot.regions),
        "минимум случаев": snapshot.min_cases,
        "максимум случаев": snapshot.max_cases,
        "версия схемы": snapshot.schema_version,
        "без ключа геометрии": list(snapshot.unresolved),
    }

    figure = None
    if geojson is not None:
        jr = join_report(snapshot, feature_keys(geojson))
        report["сверка с картой"] = jr.as_dict()
        if not jr.is_complete:
            gr.Warning(f"Не найдены на карте: {', '.join(jr.missing_geometry)}")
        figure = choropleth_figure(snapshot, geojson)
    else:
        gr.Warning("Загрузите GeoJSON файл карты России")

    totals = snapshot.totals_frame()
    logger.info("loaded %s regions (schema v%s)", len(snapshot.regions), snapshot.schema_version)
    return (
        snapshot,
        figure,
        gr.update(choices=_region_choices(snapshot), value=None),
        totals,
        report,
        region_details_markdown(None, None),
        region_frame(None),
    )


def select_region(key: Optional[str], snapshot: DataSnapshot) -> Tuple[str, pd.DataFrame]:
    snapshot = snapshot or EMPTY_SNAPSHOT
    record = snapshot.get(key)
    return region_details_markdown(key, record, snapshot), region_frame(record)


# ---------------- UI ----------------
with gr.Blocks() as demo:
    gr.Markdown(
        "### Врожденные аномалии по регионам России\n"
        "1) Загрузите CSV со статистикой (разделитель `;`, первые 2 строки — заголовок)\n"
        "2) Загрузите GeoJSON карты регионов (свойство `NAME_1`)\n"
        "3) Нажмите **Построить карту** и выберите регион"
    )
    snapshot_state = gr.State(EMPTY_SNAPSHOT)

    with gr.Row():
        csv_in = gr.File(label="CSV со статистикой", file_types=[".csv", ".txt"])
        geo_in = gr.File(label="GeoJSON карты", file_types=[".json", ".geojson"])

    with gr.Accordion("Расширенные настройки", open=False):
        gr.Markdown(
            """
            **Схема колонок** — JSON с полями `disease_names`, `first_disease_column`,
            `header_lines`, `delimiter`, `version`. Без файла используется встроенная схема.

            **Сопоставление по названиям справочника** — если подписи в CSV не совпадают
            с таблицей алиасов (например, `Карелия` вместо `Республика Карелия`), искать
            регион по всем известным названиям. Без галочки такие регионы не попадут на карту.
            """
        )
        schema_in = gr.File(label="Схема колонок (.json)", file_types=[".json"])
        match_names = gr.Checkbox(label="Сопоставлять по названиям справочника", value=False)

    btn = gr.Button("Построить карту", variant="primary")
    map_plot = gr.Plot(label="Карта")

    with gr.Row():
        with gr.Column(scale=1):
            region_dd = gr.Dropdown(label="Регион", choices=[], interactive=True)
            details = gr.Markdown(region_details_markdown(None, None))
        with gr.Column(scale=2):
            bars = gr.BarPlot(
                value=region_frame(None),
                x="disease",
                y="cases",
                title="Случаи по заболеваниям",
                x_title="Заболевание",
                y_title="Случаев",
            )

    with gr.Accordion("Сводка и сверка", open=False):
        totals = gr.Dataframe(label="Регионы по числу случаев", interactive=False)
        report = gr.JSON(label="Статистика загрузки")

    btn.click(
        load_data,
        inputs=[csv_in, geo_in, schema_in, match_names],
        outputs=[snapshot_state, map_plot, region_dd, totals, report, details, bars],
    )
    region_dd.change(select_region, inputs=[region_dd, snapshot_state], outputs=[details, bars])

demo.queue()

if __name__ == "__main__":
    setup_logging(os.environ.get("MEDMAP_LOG_LEVEL", "INFO"))
    demo.launch()
