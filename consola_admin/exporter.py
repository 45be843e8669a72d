"""Exportadores simples a CSV y JSON."""

from __future__ import annotations

import json
from dataclasses import asdict, fields
from pathlib import Path
from typing import Sequence, Type

import pandas as pd

from consola_admin.core.services import DashboardStats


def export_records_csv(
    path: str | Path, records: Sequence[object], record_type: Type
) -> Path:
    """Escribe los registros en CSV, una fila por registro.

    ``record_type`` fija las columnas aunque no haya registros.
    """

    columnas = [campo.name for campo in fields(record_type)]
    df = pd.DataFrame([asdict(registro) for registro in records], columns=columnas)
    destino = Path(path)
    df.to_csv(destino, index=False)
    return destino


def export_dashboard_json(path: str | Path, stats: DashboardStats) -> Path:
    destino = Path(path)
    destino.write_text(
        json.dumps(stats.as_dict(), ensure_ascii=False, indent=2), encoding="utf-8"
    )
    return destino


__all__ = ["export_dashboard_json", "export_records_csv"]
