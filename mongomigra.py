r"""
Script principal de migración de colecciones MongoDB a SQLite.

Arquitectura con carga dinámica de migradores:
- mongomigra.py: Infraestructura genérica (conexiones, lectura, inserción, resumen)
- migrators/*.py: Transformación específica por colección (implementan BaseMigrator)
- dbsetup.py + schema.sql: Estructura de tablas destino
- config.py: Configuración centralizada de colecciones

Flujo de ejecución:
1. Conectar a MongoDB (ping) y abrir el archivo SQLite
2. Aplicar schema.sql una sola vez (si falla, se aborta todo)
3. Por cada colección de config.MIGRATION_ORDER:
   3.1 Leer la colección completa (find({}) materializado)
   3.2 Transformar cada documento con su migrador
   3.3 Insertar fila por fila (commit por fila, errores aislados)
4. Mostrar resumen de registros por tabla
5. Cerrar ambas conexiones (siempre, aun si algo falló)

Un error en una colección se reporta y se continúa con la siguiente.
Un error en una fila se reporta (con el documento) y se continúa con la
siguiente fila. Solo la conexión y el schema son fatales.

La migración NO es idempotente: volver a correrla sobre el mismo archivo
falla fila por fila por mongo_id UNIQUE. Usar reset_database.py antes.

Uso:
    python mongomigra.py                   # todas las colecciones
    python mongomigra.py games dailygames  # solo algunas (se respeta el orden)
"""

import importlib
import json
import sqlite3
import sys
from collections import namedtuple
from contextlib import contextmanager
from datetime import datetime

from bson import ObjectId
from pymongo import MongoClient
from pymongo.errors import PyMongoError

import config
import dbsetup
from dbsetup import SchemaError
from migrators.base import BaseMigrator, format_iso_date

# Valores que pasan sin transformar (ej: createdBy) se guardan como texto
sqlite3.register_adapter(ObjectId, str)
sqlite3.register_adapter(datetime, format_iso_date)


class MigrationError(Exception):
    """Error fatal: la corrida completa se aborta."""


# Resultado de insertar una fila: ok=False implica error con el mensaje
RowResult = namedtuple("RowResult", ["ok", "record", "error"])


class InsertReport:
    """
    Resultado agregado de insertar un lote de registros en una tabla.

    Attributes:
        table (str): Tabla destino
        results (list): RowResult por cada fila intentada, en orden
    """

    def __init__(self, table):
        self.table = table
        self.results = []

    def add(self, result):
        self.results.append(result)

    @property
    def inserted(self):
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self):
        return len(self.results) - self.inserted

    @property
    def failures(self):
        return [r for r in self.results if not r.ok]

    def __repr__(self):
        return (
            f"InsertReport(table={self.table!r}, inserted={self.inserted}, "
            f"failed={self.failed})"
        )


class MigrationRun:
    """
    Contexto explícito de una corrida de migración.

    Dueño exclusivo de ambas conexiones durante la corrida. Se crea con
    open_run() y se cierra al salir del bloque with, pase lo que pase.

    Estados: idle → connecting → initializing_schema → processing
             → summarizing → closed
    """

    def __init__(self, collections):
        self.collections = list(collections)
        self.state = "idle"
        self.current_collection = None

        self.mongo_client = None
        self.mongo_db = None
        self.sqlite_conn = None

        self.reports = {}
        self.failed_collections = {}
        self.table_counts = {}

    def close(self):
        """Libera ambas conexiones (las que se hayan llegado a abrir)."""
        if self.sqlite_conn is not None:
            self.sqlite_conn.close()
            self.sqlite_conn = None
        if self.mongo_client is not None:
            self.mongo_client.close()
            self.mongo_client = None
            self.mongo_db = None
        self.state = "closed"


# =============================================================================
# CONEXIONES
# =============================================================================


def connect_to_mongo(mongo_uri=None, database_name=None):
    """
    Establece conexión a MongoDB usando credenciales de config.py.

    Returns:
        tuple: (client, database) de pymongo

    Raises:
        MigrationError: Si no puede conectar (URI inválida, servidor caído)
    """
    mongo_uri = mongo_uri or config.MONGO_URI
    database_name = database_name or config.MONGO_DATABASE_NAME

    print("🔌 Conectando a MongoDB...")
    client = None
    try:
        client = MongoClient(mongo_uri, serverSelectionTimeoutMS=config.MONGO_TIMEOUT_MS)
        client.admin.command("ping")
    except PyMongoError as e:
        if client is not None:
            client.close()
        raise MigrationError(f"Error de conexión a MongoDB: {e}") from e

    print(f"✅ Conexión a MongoDB exitosa ({database_name})")
    return client, client[database_name]


def connect_to_sqlite(sqlite_path=None):
    """
    Abre (o crea) el archivo SQLite destino.

    Raises:
        MigrationError: Si el archivo no se puede abrir/crear
    """
    sqlite_path = sqlite_path or config.SQLITE_PATH

    print("🔌 Abriendo SQLite...")
    try:
        conn = sqlite3.connect(sqlite_path)
    except sqlite3.Error as e:
        raise MigrationError(f"Error abriendo SQLite '{sqlite_path}': {e}") from e

    print(f"✅ SQLite listo ({sqlite_path})")
    return conn


@contextmanager
def open_run(collections, mongo_uri=None, database_name=None, sqlite_path=None):
    """
    Crea un MigrationRun con ambas conexiones abiertas.

    Las conexiones se cierran al salir del bloque, tanto en éxito como
    ante cualquier excepción (incluido un fallo al abrir la segunda).
    """
    run = MigrationRun(collections)
    try:
        run.state = "connecting"
        run.mongo_client, run.mongo_db = connect_to_mongo(mongo_uri, database_name)
        run.sqlite_conn = connect_to_sqlite(sqlite_path)
        yield run
    finally:
        print("\n🔒 Cerrando conexiones...")
        run.close()
        print("✅ Conexiones cerradas correctamente")


# =============================================================================
# MIGRADORES
# =============================================================================


def load_migrator_for_collection(collection_name):
    """
    Carga dinámicamente el migrador correspondiente a una colección.

    Convención de nombres:
        config migrator 'games' → migrators.games → GamesMigrator
        config migrator 'plain' → migrators.plain → PlainMigrator

    Returns:
        BaseMigrator: Instancia del migrador con su tabla destino

    Raises:
        MigrationError: Si no existe el módulo o la clase, o no hereda
            de BaseMigrator
    """
    module_name = config.get_migrator_name(collection_name)
    class_name = (
        "".join(word.capitalize() for word in module_name.split("_")) + "Migrator"
    )

    try:
        module = importlib.import_module(f"migrators.{module_name}")
    except ModuleNotFoundError as e:
        raise MigrationError(
            f"No existe migrador para '{collection_name}' "
            f"(se esperaba migrators/{module_name}.py)"
        ) from e

    migrator_class = getattr(module, class_name, None)
    if migrator_class is None:
        raise MigrationError(
            f"El módulo migrators.{module_name} no tiene la clase '{class_name}'"
        )

    # Verificar que hereda de BaseMigrator (type safety en runtime)
    if not issubclass(migrator_class, BaseMigrator):
        raise MigrationError(f"{class_name} no hereda de BaseMigrator")

    return migrator_class(config.get_table_for_collection(collection_name))


# =============================================================================
# LECTURA / ESCRITURA
# =============================================================================


def export_collection(mongo_db, collection_name):
    """
    Lee la colección completa en memoria (sin filtros ni paginado).

    Returns:
        list: Documentos MongoDB (orden no garantizado)
    """
    print(f"📥 Exportando {collection_name}...")
    documents = list(mongo_db[collection_name].find({}))
    print(f"   Encontrados {len(documents)} documentos")
    return documents


def insert_records(sqlite_conn, table, records):
    """
    Inserta registros fila por fila, aislando los errores.

    Cada fila es un INSERT independiente con solo las columnas presentes
    en el registro (sin la PK sintética 'id') y se commitea en el acto.
    Un error en una fila se reporta junto con el documento y NO detiene
    las filas siguientes. No hay rollback del lote.

    Args:
        sqlite_conn: Conexión sqlite3
        table: Tabla destino
        records: Registros ya transformados (dict columna → valor)

    Returns:
        InsertReport: Conteo de filas insertadas / fallidas
    """
    report = InsertReport(table)
    if not records:
        return report

    print(f"📤 Insertando {len(records)} registros en {table}...")

    for record in records:
        report.add(_insert_row(sqlite_conn, table, record))

    if report.failed == 0:
        print(f"✅ Insertados {report.inserted} registros en {table}")
    else:
        print(
            f"⚠️  Insertados {report.inserted} registros en {table} "
            f"({report.failed} errores)"
        )
    return report


def _insert_row(sqlite_conn, table, record):
    columns = [column for column in record if column != "id"]
    values = [record[column] for column in columns]

    column_list = ", ".join(f'"{column}"' for column in columns)
    placeholders = ", ".join("?" for _ in columns)
    sql = f'INSERT INTO "{table}" ({column_list}) VALUES ({placeholders})'

    try:
        sqlite_conn.execute(sql, values)
        sqlite_conn.commit()
    except sqlite3.Error as e:
        sqlite_conn.rollback()
        print(f"   ❌ Error insertando en {table}: {e}", file=sys.stderr)
        print(
            "   Documento: "
            + json.dumps(record, indent=2, default=str, ensure_ascii=False),
            file=sys.stderr,
        )
        return RowResult(False, record, str(e))

    return RowResult(True, record, None)


# =============================================================================
# ORQUESTACIÓN
# =============================================================================


def migrate_collection(run, collection_name):
    """
    Lectura → transformación → inserción de una colección.

    Cualquier error queda acotado a la colección: se reporta, se registra
    en run.failed_collections y la corrida sigue con la próxima.

    Returns:
        InsertReport|None: None si la colección falló
    """
    run.current_collection = collection_name

    try:
        migrator = load_migrator_for_collection(collection_name)
        documents = export_collection(run.mongo_db, collection_name)
        records = [migrator.transform(doc) for doc in documents]
        report = insert_records(run.sqlite_conn, migrator.table, records)
    except Exception as e:
        print(f"❌ Error migrando {collection_name}: {e}", file=sys.stderr)
        run.failed_collections[collection_name] = str(e)
        return None

    run.reports[collection_name] = report
    return report


def print_summary(run):
    """
    Imprime la cantidad de registros por tabla.

    Si el COUNT de una tabla falla (ej: la tabla no existe) esa tabla se
    omite sin reportar error.

    Returns:
        dict: tabla → cantidad de registros (solo las que se pudieron contar)
    """
    print("\n📊 Resumen de la base de datos:")
    counts = {}

    for collection_name in run.collections:
        table = config.get_table_for_collection(collection_name)
        try:
            row = run.sqlite_conn.execute(f'SELECT COUNT(*) FROM "{table}"').fetchone()
        except sqlite3.Error:
            continue
        counts[table] = row[0]
        print(f"   {table}: {row[0]} registros")

    run.table_counts = counts
    return counts


def resolve_collections(names=None):
    """
    Valida y ordena las colecciones pedidas según config.MIGRATION_ORDER.

    Sin nombres devuelve el orden completo.

    Raises:
        KeyError: Si alguna colección no está configurada
    """
    if not names:
        return list(config.MIGRATION_ORDER)

    for name in names:
        config.get_collection_config(name)

    requested = set(names)
    return [name for name in config.MIGRATION_ORDER if name in requested]


def run_migration(
    collections=None,
    mongo_uri=None,
    database_name=None,
    sqlite_path=None,
    schema_path=None,
):
    """
    Ejecuta la migración completa.

    Args:
        collections: Colecciones a migrar (default: config.MIGRATION_ORDER)
        mongo_uri, database_name: Origen (default: config)
        sqlite_path, schema_path: Destino y DDL (default: config)

    Returns:
        MigrationRun: Corrida ya cerrada, con reports y failed_collections

    Raises:
        MigrationError: Si no se pudo conectar a alguna base
        SchemaError: Si el DDL no se pudo aplicar (ninguna colección se procesa)
    """
    collections = resolve_collections(collections)

    with open_run(collections, mongo_uri, database_name, sqlite_path) as run:
        run.state = "initializing_schema"
        print("📋 Creando schema SQLite...")
        dbsetup.apply_schema(run.sqlite_conn, schema_path)

        run.state = "processing"
        print("🚀 Iniciando migración de datos...")
        for collection_name in run.collections:
            migrate_collection(run, collection_name)

        run.state = "summarizing"
        print_summary(run)

    return run


def main(argv=None):
    """
    Función principal que coordina el flujo completo de migración.

    Exit Codes:
        0: Corrida terminada (aunque algunas colecciones o filas fallen)
        1: Error fatal de conexión, schema o colección desconocida
    """
    argv = sys.argv[1:] if argv is None else argv

    print("=" * 70)
    print("🚀 SISTEMA DE MIGRACIÓN MONGODB → SQLITE")
    print("=" * 70)
    print(f"📍 MongoDB: {config.MONGO_DATABASE_NAME}")
    print(f"📍 SQLite: {config.SQLITE_PATH}")

    try:
        collections = resolve_collections(argv)
    except KeyError as e:
        print(f"❌ {e.args[0]}", file=sys.stderr)
        return 1

    try:
        run = run_migration(collections)
    except (MigrationError, SchemaError) as e:
        print(f"\n❌ Migración abortada: {e}", file=sys.stderr)
        return 1

    print("\n" + "=" * 70)
    if run.failed_collections:
        print(f"⚠️  PROCESO COMPLETADO CON {len(run.failed_collections)} COLECCIONES FALLIDAS")
        for name, error in run.failed_collections.items():
            print(f"   - {name}: {error}")
    else:
        print("✅ PROCESO COMPLETADO EXITOSAMENTE")
    print(f"📄 Base SQLite creada en: {config.SQLITE_PATH}")
    print("=" * 70)
    return 0


if __name__ == "__main__":
    # Forzar UTF-8 en stdout/stderr para emojis en Windows
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")
    sys.exit(main())
