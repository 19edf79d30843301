"""
Funciones helper compartidas para todos los tests.

Proporciona:
- Carga dinámica de migradores basándose en config.py
- Dobles de pymongo (cliente, base, colección) para correr la migración
  sin un servidor MongoDB real
"""

import sys
import os
import importlib

# Agregar directorio raíz al path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import config


def get_migrator_class_for_collection(collection_name):
    """
    Carga dinámicamente la clase migrador para una colección.

    Sigue la convención de nombres:
    - games → GamesMigrator (en migrators/games.py)
    - banners → PlainMigrator (en migrators/plain.py)

    Raises:
        ImportError: Si no existe el módulo
        AttributeError: Si no existe la clase
    """
    module_name = config.get_migrator_name(collection_name)
    class_name = (
        "".join(word.capitalize() for word in module_name.split("_")) + "Migrator"
    )
    module = importlib.import_module(f"migrators.{module_name}")
    return getattr(module, class_name)


def get_all_migrator_classes():
    """
    Retorna lista de tuplas (colección, clase) para todas las colecciones
    de config.MIGRATION_ORDER.
    """
    return [
        (name, get_migrator_class_for_collection(name))
        for name in config.MIGRATION_ORDER
    ]


def get_all_migrator_instances():
    """Retorna lista de tuplas (colección, instancia con su tabla)."""
    return [
        (name, migrator_class(config.get_table_for_collection(name)))
        for name, migrator_class in get_all_migrator_classes()
    ]


# =============================================================================
# DOBLES DE PYMONGO
# =============================================================================


class FakeCursor(list):
    """Lista de documentos con la interfaz mínima de un cursor pymongo."""

    def limit(self, n):
        return FakeCursor(self[:n])


class FakeCollection:
    def __init__(self, name, documents=None, error=None):
        self.name = name
        self.documents = list(documents or [])
        self.error = error
        self.find_calls = 0

    def find(self, filter=None):
        self.find_calls += 1
        if self.error is not None:
            raise self.error
        # Copias: un migrador no debe poder alterar el origen
        return FakeCursor(dict(doc) for doc in self.documents)


class FakeDatabase:
    """
    Base MongoDB en memoria.

    Args:
        collections: dict nombre → lista de documentos
        errors: dict nombre → excepción a lanzar en find()
    """

    def __init__(self, collections=None, errors=None):
        self.collections = {}
        for name, docs in (collections or {}).items():
            self.collections[name] = FakeCollection(name, docs)
        for name, error in (errors or {}).items():
            self.collections[name] = FakeCollection(name, error=error)

    def __getitem__(self, name):
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]

    def total_find_calls(self):
        return sum(c.find_calls for c in self.collections.values())


class FakeAdmin:
    def __init__(self, ping_error=None):
        self.ping_error = ping_error

    def command(self, name):
        if self.ping_error is not None:
            raise self.ping_error
        return {"ok": 1.0}


class FakeMongoClient:
    def __init__(self, database=None, ping_error=None):
        self.database = database or FakeDatabase()
        self.admin = FakeAdmin(ping_error)
        self.closed = False
        self.uri = None

    def __getitem__(self, name):
        return self.database

    def close(self):
        self.closed = True


def patch_mongo(monkeypatch, client):
    """Reemplaza MongoClient en mongomigra por un cliente fake."""
    import mongomigra

    def factory(uri, **kwargs):
        client.uri = uri
        return client

    monkeypatch.setattr(mongomigra, "MongoClient", factory)
    return client


def track_sqlite_connections(monkeypatch):
    """
    Registra las conexiones SQLite abiertas por mongomigra.

    Returns:
        list: Se completa con cada conexión a medida que se abre
    """
    import mongomigra

    opened = []
    original = mongomigra.connect_to_sqlite

    def wrapper(sqlite_path=None):
        conn = original(sqlite_path)
        opened.append(conn)
        return conn

    monkeypatch.setattr(mongomigra, "connect_to_sqlite", wrapper)
    return opened


def is_sqlite_closed(conn):
    import sqlite3

    try:
        conn.execute("SELECT 1")
    except sqlite3.ProgrammingError:
        return True
    return False


def create_schema(conn):
    """Aplica schema.sql real sobre una conexión."""
    import dbsetup

    dbsetup.apply_schema(conn, config.PROJECT_ROOT / "schema.sql")
    return conn
