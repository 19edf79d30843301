"""
Módulo base para migradores de colecciones MongoDB → SQLite.

Define la interfaz común (contrato) que todos los migradores específicos
deben implementar. Esto permite que mongomigra.py funcione con cualquier
colección sin conocer sus detalles internos.

Patrón de diseño: Template Method + Strategy
- mongomigra.py = Contexto (orquestador)
- BaseMigrator.transform() = Pasos comunes en orden fijo
- flatten() = Paso específico de cada colección

Orden de transformación (por documento):
1. _id → mongo_id (string), se elimina _id
2. Se elimina __v (versión de Mongoose)
3. Campos fecha (config.DATE_FIELDS) → ISO-8601 UTC con milisegundos
4. flatten(): aplanado específico de la colección
5. createdAt/updatedAt → created_at/updated_at

Ejemplo de implementación:
    class MiMigrador(BaseMigrator):
        FLATTENED_COLUMNS = ('info_a', 'info_b')

        def flatten(self, record):
            info = record.pop('info', None)
            ...
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone

import config


def format_iso_date(value: datetime) -> str:
    """
    Formatea un datetime como 'YYYY-MM-DDTHH:MM:SS.mmmZ' (UTC).

    Los datetime sin zona horaria se asumen UTC (pymongo los devuelve así).
    """
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_mongo_date(value):
    """
    Parsea una fecha MongoDB a datetime de Python.

    Soporta:
    - datetime nativo de pymongo
    - Extended JSON {'$date': '...'} o {'$date': epoch_ms}
    - String ISO con separador 'T' (con o sin 'Z' / offset)

    Returns:
        datetime|None: None si el valor no es una fecha reconocible
    """
    if isinstance(value, datetime):
        return value

    if isinstance(value, dict) and "$date" in value:
        value = value["$date"]
        if isinstance(value, dict) and "$numberLong" in value:
            value = value["$numberLong"]
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return _parse_epoch_ms(value)
        if isinstance(value, str) and value.lstrip("-").isdigit():
            return _parse_epoch_ms(int(value))

    if isinstance(value, str) and "T" in value:
        return _parse_string_date(value.strip())

    return None


def _parse_epoch_ms(value):
    # Fuera del rango de datetime (ej: {"$date": 10**20})
    try:
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def _parse_string_date(value):
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass

    # fromisoformat < 3.11 solo acepta fracciones de 3 o 6 dígitos
    for fmt in ("%Y-%m-%dT%H:%M:%S.%f%z", "%Y-%m-%dT%H:%M:%S.%f"):
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


class BaseMigrator(ABC):
    """
    Clase abstracta que define la interfaz para migradores de colecciones.

    Cada colección debe tener un migrador que herede de esta clase e
    implemente flatten(). El resto de pasos son comunes.

    Attributes:
        table (str): Nombre de la tabla SQLite destino
        FLATTENED_COLUMNS (tuple): Columnas que flatten() agrega al registro
        COMMON_COLUMNS (tuple): Columnas que produce todo migrador
    """

    COMMON_COLUMNS = ("mongo_id", "created_at", "updated_at")
    FLATTENED_COLUMNS = ()

    def __init__(self, table: str):
        """
        Constructor base que almacena la tabla destino.

        Args:
            table: Nombre de la tabla en SQLite (ej: 'games')
        """
        self.table = table

    def transform(self, doc: dict) -> dict:
        """
        Convierte un documento MongoDB en un registro plano para SQLite.

        Nunca lanza excepciones por campos ausentes: cada regla verifica
        la presencia del campo antes de aplicarse. El documento original
        no se modifica.

        Args:
            doc: Documento de MongoDB

        Returns:
            dict: Registro columna → valor escalar
        """
        record = dict(doc)

        if "_id" in record:
            record["mongo_id"] = self.get_primary_key_from_doc(record)
            del record["_id"]

        record.pop("__v", None)

        for field in config.DATE_FIELDS:
            if field in record:
                record[field] = self._normalize_date(record[field])

        self.flatten(record)

        for source, target in config.TIMESTAMP_RENAMES.items():
            if record.get(source):
                record[target] = record.pop(source)

        return record

    @abstractmethod
    def flatten(self, record: dict) -> None:
        """
        Aplana objetos/arrays embebidos específicos de la colección.

        Modifica 'record' in-place. Debe ignorar silenciosamente los campos
        que no existan en el documento.

        Args:
            record: Registro parcialmente transformado (pasos 1-3 aplicados)
        """
        pass

    def get_primary_key_from_doc(self, doc: dict) -> str:
        """
        Extrae el ObjectId del documento como string.

        MongoDB ObjectId puede venir como objeto bson, string o
        Extended JSON {'$oid': '...'}.
        """
        _id = doc.get("_id")
        if isinstance(_id, dict) and "$oid" in _id:
            return str(_id["$oid"])
        return str(_id)

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _normalize_date(self, value):
        """ISO-8601 si el valor es fecha parseable; si no, sin cambios."""
        parsed = parse_mongo_date(value)
        if parsed is None:
            return value
        try:
            return format_iso_date(parsed)
        except (OverflowError, ValueError):
            # astimezone/strftime fuera de rango (ej: año 1 con offset)
            return value

    def _copy_nested(self, record: dict, field: str, mapping: dict) -> None:
        """
        Copia las keys presentes de un objeto embebido a columnas planas.

        Solo se crean columnas para las keys que existen en el objeto; el
        objeto embebido se elimina del registro.

        Args:
            record: Registro a modificar
            field: Nombre del campo embebido (ej: 'recentWin')
            mapping: key del objeto → columna destino
        """
        nested = record.get(field)
        if not isinstance(nested, dict):
            # Valor no objeto (ej: string): no aporta columnas, se descarta
            if nested:
                del record[field]
            return

        for key, column in mapping.items():
            if key in nested:
                record[column] = nested[key]
        del record[field]
