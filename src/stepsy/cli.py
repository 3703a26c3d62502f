"""CLI para consultar, exportar y respaldar el historial de pasos."""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from datetime import date, datetime
from pathlib import Path

from stepsy.backup import export_csv, import_csv
from stepsy.dates import resolve_tz
from stepsy.errors import NotFound
from stepsy.excel_writer import ExcelLayout, write_history_xlsx
from stepsy.storage import AppConfig, SQLiteDailyStore
from stepsy.summary import (
    entries_to_frame,
    fill_missing_days,
    history_stats,
    period_totals,
)

DEFAULT_DB = Path.home() / ".stepsy" / "stepsy.sqlite3"


def _iso_day(raw: str) -> date:
    try:
        return date.fromisoformat(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {raw!r}") from exc


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(description="Historial diario de pasos.")
    parser.add_argument(
        "--db",
        default=str(DEFAULT_DB),
        help="Archivo SQLite (default: ~/.stepsy/stepsy.sqlite3).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Nivel de logging.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("history", "Lista los pasos por día."),
        ("stats", "Totales, promedio y mejor día."),
        ("export-xlsx", "Exporta el historial a Excel."),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("--from", dest="from_day", type=_iso_day, default=None)
        cmd.add_argument("--to", dest="to_day", type=_iso_day, default=None)
        if name == "history":
            cmd.add_argument(
                "--fill",
                action="store_true",
                help="Incluye días sin registro con 0 pasos.",
            )
            cmd.add_argument(
                "--by",
                choices=["W", "M", "Y"],
                default=None,
                help="Totales por semana (W), mes (M) o año (Y).",
            )
        if name == "export-xlsx":
            cmd.add_argument("--out", default=None, help="Ruta del .xlsx.")

    exp = sub.add_parser("export-csv", help="Respalda el historial en CSV.")
    exp.add_argument("path")
    imp = sub.add_parser("import-csv", help="Restaura un respaldo CSV.")
    imp.add_argument("path")

    cfg = sub.add_parser("config", help="Muestra o cambia la configuración.")
    cfg.add_argument("--timezone", default=None)
    cfg.add_argument("--export-dir", default=None)
    cfg.add_argument("--daily-goal", type=int, default=None)
    cfg.add_argument("--step-length-cm", type=int, default=None)
    return parser.parse_args(argv)


def _range(
    store: SQLiteDailyStore, ns: argparse.Namespace
) -> tuple[date, date] | None:
    try:
        first = ns.from_day or store.first_entry().date()
        last = ns.to_day or store.last_entry().date()
    except NotFound:
        return None
    return first, last


def _cmd_history(store: SQLiteDailyStore, ns: argparse.Namespace) -> int:
    bounds = _range(store, ns)
    if bounds is None:
        print("No history yet.")
        return 0
    df = entries_to_frame(store.get_entries(*bounds))
    if ns.by:
        totals = period_totals(df, ns.by)
        for row in totals.itertuples(index=False):
            print(f"{row.period.isoformat()}  {int(row.steps):>9}  ({row.days} d)")
        return 0
    if ns.fill:
        df = fill_missing_days(df)
    for row in df.itertuples(index=False):
        print(f"{row.date.isoformat()}  {int(row.steps):>7}")
    return 0


def _cmd_stats(
    store: SQLiteDailyStore, config: AppConfig, ns: argparse.Namespace
) -> int:
    bounds = _range(store, ns)
    if bounds is None:
        print("No history yet.")
        return 0
    df = entries_to_frame(store.get_entries(*bounds))
    stats = history_stats(
        df, daily_goal=config.daily_goal, step_length_cm=config.step_length_cm
    )
    print(f"Days: {stats.days}")
    print(f"Total steps: {stats.total_steps}")
    print(f"Average: {stats.average_steps}")
    if stats.best_day is not None:
        print(f"Best day: {stats.best_day.isoformat()} ({stats.best_steps})")
    print(f"Days at goal ({config.daily_goal}): {stats.days_at_goal}")
    print(f"Distance: {stats.distance_m / 1000:.2f} km")
    return 0


def _cmd_export_xlsx(
    store: SQLiteDailyStore, config: AppConfig, ns: argparse.Namespace
) -> int:
    bounds = _range(store, ns)
    if bounds is None:
        print("No history yet.")
        return 0
    df = fill_missing_days(entries_to_frame(store.get_entries(*bounds)))
    if ns.out:
        out_path = Path(ns.out).expanduser()
    else:
        out_dir = (
            Path(config.export_dir).expanduser() if config.export_dir else Path.cwd()
        )
        ts = datetime.now(tz=store.zone).strftime("%Y-%m-%d_%H-%M-%S")
        out_path = out_dir / f"pasos_diarios_{ts}.xlsx"
    layout = ExcelLayout(
        daily_goal=config.daily_goal, step_length_cm=config.step_length_cm
    )
    write_history_xlsx(df, out_path, layout)
    print(f"OK: Output: {out_path}")
    return 0


def _cmd_config(
    store: SQLiteDailyStore, config: AppConfig, ns: argparse.Namespace
) -> int:
    changes: dict[str, object] = {}
    if ns.timezone is not None:
        if ns.timezone:
            resolve_tz(ns.timezone)
        changes["timezone"] = ns.timezone
    if ns.export_dir is not None:
        changes["export_dir"] = ns.export_dir
    if ns.daily_goal is not None:
        changes["daily_goal"] = ns.daily_goal
    if ns.step_length_cm is not None:
        changes["step_length_cm"] = ns.step_length_cm
    if changes:
        config = replace(config, **changes)
        store.save_config(config)
    print(f"timezone={config.timezone or '(local)'}")
    print(f"export_dir={config.export_dir}")
    print(f"daily_goal={config.daily_goal}")
    print(f"step_length_cm={config.step_length_cm}")
    return 0


def open_store(db_path: Path) -> tuple[SQLiteDailyStore, AppConfig]:
    """Open the store, re-opening it in the configured timezone if set."""
    store = SQLiteDailyStore(db_path)
    config = store.load_config()
    if config.timezone:
        store = SQLiteDailyStore(db_path, zone=resolve_tz(config.timezone))
    return store, config


def main(argv: list[str] | None = None) -> int:
    """Run the history CLI.

    Returns:
        Exit code (0 on success).
    """
    ns = parse_args(argv)
    logging.basicConfig(
        level=ns.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    store, config = open_store(Path(ns.db).expanduser())

    if ns.command == "history":
        return _cmd_history(store, ns)
    if ns.command == "stats":
        return _cmd_stats(store, config, ns)
    if ns.command == "export-xlsx":
        return _cmd_export_xlsx(store, config, ns)
    if ns.command == "export-csv":
        count = export_csv(store, Path(ns.path).expanduser())
        print(f"OK: {count} days -> {ns.path}")
        return 0
    if ns.command == "import-csv":
        count = import_csv(store, Path(ns.path).expanduser())
        print(f"OK: {count} days <- {ns.path}")
        return 0
    return _cmd_config(store, config, ns)
