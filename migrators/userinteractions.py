"""
Migrador para la colección userinteractions.

Las interacciones registradas desde el sitio público incluyen el
dispositivo del visitante como objeto embebido (deviceInfo). Se aplana en
cuatro columnas: device_type, os, browser, user_agent.
"""

from .base import BaseMigrator


class UserinteractionsMigrator(BaseMigrator):

    FLATTENED_COLUMNS = ("device_type", "os", "browser", "user_agent")

    DEVICE_INFO_MAPPING = {
        "deviceType": "device_type",
        "os": "os",
        "browser": "browser",
        "userAgent": "user_agent",
    }

    def __init__(self, table="userinteractions"):
        super().__init__(table)

    def flatten(self, record):
        self._copy_nested(record, "deviceInfo", self.DEVICE_INFO_MAPPING)
