# reset_database.py
"""
Script para limpiar la base SQLite antes de volver a migrar.

La migración no es idempotente (mongo_id UNIQUE): correrla dos veces sobre
el mismo archivo falla fila por fila. Este script elimina las tablas
migradas para que mongomigra.py las recree desde schema.sql.

ADVERTENCIA: Esto destruye TODOS los datos migrados.
"""

import sqlite3
import sys

import config


def reset_database(sqlite_path=None, tables=None):
    """
    Elimina las tablas de migración.

    Args:
        sqlite_path: Archivo SQLite (default: config.SQLITE_PATH)
        tables: Tablas a eliminar (default: todas las de config.MIGRATION_ORDER)

    Returns:
        list: Tablas eliminadas sin error
    """
    sqlite_path = sqlite_path or config.SQLITE_PATH
    tables = tables or config.get_all_tables()

    print("=" * 70)
    print("🗑️  LIMPIEZA COMPLETA DE BASE DE DATOS")
    print("=" * 70)

    dropped = []
    conn = sqlite3.connect(sqlite_path)
    try:
        for table in tables:
            try:
                print(f"\n🗑️  Eliminando tabla '{table}'...")
                conn.execute(f'DROP TABLE IF EXISTS "{table}"')
                dropped.append(table)
                print(f"   ✅ Tabla '{table}' eliminada")
            except sqlite3.Error as e:
                print(f"   ⚠️  Error eliminando '{table}': {e}")
        conn.commit()
    finally:
        conn.close()

    print("\n" + "=" * 70)
    print("✅ LIMPIEZA COMPLETA FINALIZADA")
    print("=" * 70)
    print("\nAhora ejecutar:")
    print("  python mongomigra.py (recrea estructura y migra datos)")
    return dropped


if __name__ == "__main__":
    # Seguridad: pedir confirmación
    print(f"\n⚠️  ADVERTENCIA: Esto eliminará TODOS los datos migrados en {config.SQLITE_PATH}.")
    response = input("¿Continuar? (escribir 'SI' en mayúsculas): ")

    if response == "SI":
        reset_database()
    else:
        print("\n❌ Operación cancelada")
        sys.exit(0)
