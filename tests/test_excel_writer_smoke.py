from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import cast

import pandas as pd
from openpyxl import Workbook, load_workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from stepsy.excel_writer import ExcelLayout, _format_sheet, write_history_xlsx


def test_write_history_xlsx_happy_path_and_formatting(tmp_path: Path) -> None:
    df = pd.DataFrame(
        {
            "date": [date(2025, 12, 15), date(2025, 12, 16)],
            "steps": [12000, 2000],
        }
    )
    out = tmp_path / "nested" / "out.xlsx"
    layout = ExcelLayout(daily_goal=10000, step_length_cm=70)
    write_history_xlsx(df, out, layout)

    wb = load_workbook(out)
    ws = cast(Worksheet, wb[layout.sheet_name])

    headers = [cell.value for cell in ws[1]]
    assert headers == ["Día", "Fecha", "Pasos", "Distancia (m)", "Meta"]

    assert ws.cell(row=2, column=1).value == "lun"
    assert ws.cell(row=3, column=1).value == "mar"
    assert ws.cell(row=2, column=3).value == 12000
    assert ws.cell(row=2, column=4).value == 8400
    assert ws.cell(row=2, column=5).value == "si"
    assert ws.cell(row=3, column=5).value in ("", None)

    assert ws.column_dimensions["A"].width == 6
    pasos_letter = get_column_letter(headers.index("Pasos") + 1)
    assert ws.column_dimensions[pasos_letter].width == 10
    assert ws.cell(row=2, column=3).number_format == "#,##0"
    assert ws.cell(row=2, column=2).number_format == "dd/mm/yyyy"

    assert ws.cell(row=2, column=1).fill.fill_type == "solid"
    assert ws.cell(row=3, column=1).fill.fill_type is None


def test_format_sheet_handles_missing_headers() -> None:
    wb = Workbook()
    ws = cast(Worksheet, wb.active)
    ws.append(["Solo"])
    ws.append([1])

    _format_sheet(ws)

    assert ws.cell(row=1, column=1).font.bold is True
    assert ws.cell(row=2, column=1).alignment.horizontal == "center"
