"""Generación de Excel formateado con el historial de pasos."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

_DIA_SEMANA: tuple[str, ...] = ("lun", "mar", "mie", "jue", "vie", "sab", "dom")

_HEADER_MAP: dict[str, str] = {
    "weekday": "Día",
    "date": "Fecha",
    "steps": "Pasos",
    "distance_m": "Distancia (m)",
    "goal_reached": "Meta",
}

_GOAL_FILL = PatternFill(fill_type="solid", start_color="C6EFCE", end_color="C6EFCE")


@dataclass(frozen=True)
class ExcelLayout:
    """Layout/formatting configuration for the history sheet."""

    sheet_name: str = "Pasos por dia"
    daily_goal: int = 10000
    step_length_cm: int = 70


def _weekday_label(i: object) -> str:
    """Convierte índice 0-6 (lunes-domingo) a etiqueta de 3 letras."""
    try:
        if i is None or (isinstance(i, float) and pd.isna(i)):
            return ""
        if isinstance(i, int | float):
            idx = int(i)
            return _DIA_SEMANA[idx] if 0 <= idx < 7 else ""
        return ""
    except (ValueError, TypeError):
        return ""


def _add_derived_columns(df: pd.DataFrame, layout: ExcelLayout) -> pd.DataFrame:
    """Añade Día, distancia y meta alcanzada a partir de date/steps."""
    export_df = df[["date", "steps"]].copy()
    weekday_series = pd.to_datetime(export_df["date"]).dt.weekday
    export_df.insert(0, "weekday", weekday_series.map(_weekday_label))
    export_df["date"] = pd.to_datetime(export_df["date"])
    export_df["distance_m"] = (
        export_df["steps"].astype(float) * layout.step_length_cm / 100.0
    ).round(0)
    export_df["goal_reached"] = (export_df["steps"] >= layout.daily_goal).map(
        {True: "si", False: ""}
    )
    return export_df


def write_history_xlsx(df: pd.DataFrame, out_path: Path, layout: ExcelLayout) -> None:
    """Write a formatted Excel file with one row per day.

    Args:
        df: Daily DataFrame with ``date`` and ``steps``.
        out_path: Output path for the XLSX file.
        layout: Excel layout parameters.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)

    export_df = _add_derived_columns(df, layout)
    export_df = export_df.rename(columns=_HEADER_MAP)

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        export_df.to_excel(writer, index=False, sheet_name=layout.sheet_name)
        ws = writer.book[layout.sheet_name]
        _format_sheet(ws)


def _style_header_row(ws: Any) -> None:
    """Aplica fuente negrita, alineación y borde a la fila de cabecera."""
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    header_font = Font(bold=True)
    center = Alignment(horizontal="center", vertical="center", wrap_text=True)
    for cell in ws[1]:
        cell.font = header_font
        cell.alignment = center
        cell.border = border


def _style_body_rows(ws: Any) -> None:
    """Aplica alineación y borde a las filas de datos."""
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    center = Alignment(horizontal="center", vertical="center")
    for row in ws.iter_rows(min_row=2):
        for cell in row:
            cell.alignment = center
            cell.border = border


def _get_header_col_index(ws: Any) -> dict[str, int]:
    """Devuelve mapa nombre de cabecera -> índice de columna (1-based)."""
    headers = [str(cell.value) for cell in ws[1]]
    return {name: idx + 1 for idx, name in enumerate(headers)}


def _apply_column_widths(ws: Any, col_index: dict[str, int]) -> None:
    """Establece anchos de columna para evitar ###."""
    widths = [
        ("Día", 6),
        ("Fecha", 12),
        ("Pasos", 10),
        ("Distancia (m)", 14),
        ("Meta", 6),
    ]
    for header, width in widths:
        idx = col_index.get(header)
        if idx is not None:
            letter = ws.cell(row=1, column=idx).column_letter
            ws.column_dimensions[letter].width = width


def _apply_number_formats(ws: Any, col_index: dict[str, int]) -> None:
    """Aplica formatos numéricos por cabecera."""
    fmt_map: dict[str, str] = {
        "Fecha": "dd/mm/yyyy",
        "Pasos": "#,##0",
        "Distancia (m)": "#,##0",
    }
    for row in ws.iter_rows(min_row=2):
        for header, fmt in fmt_map.items():
            idx = col_index.get(header)
            if idx is not None:
                row[idx - 1].number_format = fmt


def _highlight_goal_rows(ws: Any, col_index: dict[str, int]) -> None:
    """Pinta de verde las filas donde se alcanzó la meta."""
    idx = col_index.get("Meta")
    if idx is None:
        return
    for row in ws.iter_rows(min_row=2):
        if row[idx - 1].value:
            for cell in row:
                cell.fill = _GOAL_FILL


def _format_sheet(ws: Any) -> None:
    """Apply borders, widths, number formats and goal highlight.

    Args:
        ws: openpyxl worksheet.
    """
    _style_header_row(ws)
    _style_body_rows(ws)
    col_index = _get_header_col_index(ws)
    _apply_column_widths(ws, col_index)
    _apply_number_formats(ws, col_index)
    _highlight_goal_rows(ws, col_index)
