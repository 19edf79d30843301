# dbsetup.py
"""
Script de configuración de la base de datos SQLite.
Aplica schema.sql (DDL completo) sobre el archivo destino antes de migrar.

ARQUITECTURA:
- Una tabla por colección MongoDB (admins, banners, games, ...)
- id INTEGER autoincremental como PK sintética
- mongo_id UNIQUE con el ObjectId original

CONVENCIÓN DE NAMING:
Colección MongoDB     Tabla SQLite
-----------------     ------------
games             →   games
dailygames        →   dailygames
<coleccion>       →   <coleccion>

El DDL se ejecuta UNA sola vez por corrida. Si no se puede leer o aplicar,
la migración completa se aborta (no hay recuperación de schema parcial).
"""

import sqlite3
import sys
from pathlib import Path

import config


class SchemaError(Exception):
    """El archivo DDL no se pudo leer o aplicar."""


def create_connection(sqlite_path=None):
    """Abre (o crea) el archivo SQLite destino."""
    try:
        return sqlite3.connect(sqlite_path or config.SQLITE_PATH)
    except sqlite3.Error as e:
        print(f"❌ Error abriendo SQLite: {e}")
        return None


def apply_schema(conn, schema_path=None):
    """
    Ejecuta el DDL completo contra la conexión SQLite.

    Args:
        conn: Conexión sqlite3
        schema_path: Ruta al archivo .sql (default: config.SCHEMA_PATH)

    Raises:
        SchemaError: Si el archivo no existe, no se puede leer, o el SQL
            falla (sintaxis inválida, archivo truncado, etc.)
    """
    schema_path = Path(schema_path or config.SCHEMA_PATH)

    try:
        ddl = schema_path.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaError(f"No se pudo leer el schema '{schema_path}': {e}") from e

    if not ddl.strip():
        raise SchemaError(f"El schema '{schema_path}' está vacío")

    try:
        conn.executescript(ddl)
    except sqlite3.Error as e:
        raise SchemaError(f"Error aplicando schema '{schema_path}': {e}") from e


def list_tables(conn):
    """Tablas de usuario existentes (excluye sqlite_sequence y similares)."""
    cursor = conn.execute(
        "SELECT name FROM sqlite_master "
        "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
    )
    return [row[0] for row in cursor.fetchall()]


def get_table_columns(conn, table):
    """Columnas definidas para una tabla, en orden de declaración."""
    cursor = conn.execute(f'PRAGMA table_info("{table}")')
    return [row[1] for row in cursor.fetchall()]


def main():
    """
    Punto de entrada: crea la estructura vacía sin migrar datos.

    Útil para inspeccionar el schema o preparar el archivo antes de
    ejecutar mongomigra.py.
    """
    print("=" * 80)
    print("🚀 CONFIGURACIÓN DE BASE DE DATOS SQLite")
    print("=" * 80)
    print(f"📍 Archivo: {config.SQLITE_PATH}")
    print(f"📍 Schema: {config.SCHEMA_PATH}")

    conn = create_connection()
    if not conn:
        print("\n❌ No se pudo abrir la base de datos")
        sys.exit(1)

    try:
        print("\n🔨 Creando estructura de base de datos...")
        apply_schema(conn)

        print("\n" + "=" * 80)
        print("✅ Base de datos configurada correctamente")
        print("=" * 80)

        print("\n📊 TABLAS CREADAS:")
        for table in list_tables(conn):
            columns = get_table_columns(conn, table)
            print(f"  - {table}: {len(columns)} columnas")

    except SchemaError as e:
        print(f"\n❌ Error durante la configuración: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        conn.close()


if __name__ == "__main__":
    main()
