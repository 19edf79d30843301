"""
Migrador para la colección games.

Cada juego guarda su último premio destacado como objeto embebido:

    recentWin: {amount: '$5,000', player: 'Lucky***Player', comment: '...'}

SQLite no tiene tipos compuestos, así que recentWin se aplana en tres
columnas escalares y el objeto se elimina del registro.
"""

from .base import BaseMigrator


class GamesMigrator(BaseMigrator):
    """
    Migrador específico para games.
    """

    FLATTENED_COLUMNS = (
        "recent_win_amount",
        "recent_win_player",
        "recent_win_comment",
    )

    RECENT_WIN_MAPPING = {
        "amount": "recent_win_amount",
        "player": "recent_win_player",
        "comment": "recent_win_comment",
    }

    def __init__(self, table="games"):
        super().__init__(table)

    def flatten(self, record):
        self._copy_nested(record, "recentWin", self.RECENT_WIN_MAPPING)
