"""
Migrador para la colección dailygames.

selectedGames es un array (IDs o snapshots de juegos) que se guarda como
texto JSON en una sola columna. El orden del array se conserva.
"""

import json
from datetime import datetime

from .base import BaseMigrator, format_iso_date


def _json_default(value):
    """Fechas en el mismo formato ISO que las columnas; ObjectId y resto a str."""
    if isinstance(value, datetime):
        return format_iso_date(value)
    return str(value)


class DailygamesMigrator(BaseMigrator):

    def __init__(self, table="dailygames"):
        super().__init__(table)

    def flatten(self, record):
        selected = record.get("selectedGames")
        if isinstance(selected, (list, tuple)):
            record["selectedGames"] = json.dumps(list(selected), default=_json_default)
