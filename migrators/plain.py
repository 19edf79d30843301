"""
Migrador para colecciones sin objetos embebidos.

Usado por admins, banners, gameconfigs, winners, videos, jackpotmessages
y comments: solo aplica los pasos comunes de BaseMigrator (mongo_id,
__v, fechas, timestamps). El resto de campos pasa sin cambios.
"""

from .base import BaseMigrator


class PlainMigrator(BaseMigrator):
    """Migrador sin aplanado específico."""

    def flatten(self, record):
        pass
