"""
Configuración centralizada para el sistema de migración MongoDB → SQLite.

ARQUITECTURA:
Una tabla SQLite por colección MongoDB del panel de administración:
- admins, banners, games, gameconfigs, winners, videos,
  jackpotmessages, comments, dailygames, userinteractions
- El DDL completo vive en schema.sql (una tabla por colección)

FLUJO DE MIGRACIÓN:
1. Aplicar schema.sql sobre el archivo SQLite (una sola vez)
2. Migrar colecciones en el orden de MIGRATION_ORDER
3. Cada colección usa el migrador declarado en COLLECTIONS

USO DE LAS FUNCIONES HELPER:
    # Obtener configuración de colección
    config = get_collection_config('games')
    table = config['table']  # 'games'

    # Nombre del módulo migrador
    get_migrator_name('dailygames')  # 'dailygames'
    get_migrator_name('banners')     # 'plain'
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Carga las variables del archivo .env en las variables de entorno del sistema
load_dotenv(override=True)

PROJECT_ROOT = Path(__file__).resolve().parent

# --- Configuración de MongoDB (Origen) ---
MONGO_URI = os.getenv("MONGO_URI") or "mongodb://localhost:27017/"
MONGO_DATABASE_NAME = os.getenv("MONGO_DATABASE") or "lucky_taj_admin"
MONGO_TIMEOUT_MS = 5000

# --- Configuración de SQLite (Destino) ---
SQLITE_PATH = os.getenv("SQLITE_PATH") or str(PROJECT_ROOT / "lucky_taj_admin.db")
SCHEMA_PATH = os.getenv("SCHEMA_PATH") or str(PROJECT_ROOT / "schema.sql")

# --- Configuración de Transformación ---
# Campos fecha que se normalizan a ISO-8601 (UTC, milisegundos)
DATE_FIELDS = [
    "createdAt",
    "updatedAt",
    "lastLogin",
    "lastRefresh",
    "refreshedAt",
    "timestamp",
]

# Renombrado final de timestamps genéricos (camelCase → snake_case)
TIMESTAMP_RENAMES = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}

# --- Configuración Multi-Colección ---
# Cada colección MongoDB define:
# - table: Tabla destino en SQLite (definida en schema.sql)
# - migrator: Módulo en migrators/ que transforma sus documentos
# - description: Descripción de negocio de la colección

COLLECTIONS = {
    "admins": {
        "table": "admins",
        "migrator": "plain",
        "description": "Administradores del panel (login, último acceso)",
    },
    "banners": {
        "table": "banners",
        "migrator": "plain",
        "description": "Banners promocionales subidos desde el panel",
    },
    "games": {
        "table": "games",
        "migrator": "games",
        "description": "Juegos con su último premio destacado (recentWin embebido)",
    },
    "gameconfigs": {
        "table": "gameconfigs",
        "migrator": "plain",
        "description": "Configuración del pool diario de juegos",
    },
    "winners": {
        "table": "winners",
        "migrator": "plain",
        "description": "Ganadores mostrados en el sitio",
    },
    "videos": {
        "table": "videos",
        "migrator": "plain",
        "description": "Videos (YouTube / subidos) y playlist de Tournament TV",
    },
    "jackpotmessages": {
        "table": "jackpotmessages",
        "migrator": "plain",
        "description": "Mensajes de predicción de jackpot por categoría",
    },
    "comments": {
        "table": "comments",
        "migrator": "plain",
        "description": "Comentarios de jugadores moderados desde el panel",
    },
    "dailygames": {
        "table": "dailygames",
        "migrator": "dailygames",
        "description": "Selección diaria de juegos (selectedGames embebido)",
    },
    "userinteractions": {
        "table": "userinteractions",
        "migrator": "userinteractions",
        "description": "Interacciones de usuarios con dispositivo embebido (deviceInfo)",
    },
}

# --- Orden de Migración ---
# Orden fijo; las tablas no tienen FKs entre sí.
MIGRATION_ORDER = [
    "admins",
    "banners",
    "games",
    "gameconfigs",
    "winners",
    "videos",
    "jackpotmessages",
    "comments",
    "dailygames",
    "userinteractions",
]


# --- Funciones Helper ---


def get_collection_config(collection_name: str) -> dict:
    """
    Obtiene la configuración de una colección por nombre.

    Args:
        collection_name: Nombre de la colección MongoDB (ej: 'games')

    Returns:
        dict: Configuración con keys table, migrator, description

    Raises:
        KeyError: Si la colección no está configurada

    Ejemplo:
        >>> get_collection_config('games')['migrator']
        'games'
    """
    if collection_name not in COLLECTIONS:
        available = ", ".join(COLLECTIONS.keys())
        raise KeyError(
            f"Colección '{collection_name}' no está configurada.\n"
            f"Colecciones disponibles: {available}"
        )
    return COLLECTIONS[collection_name]


def get_table_for_collection(collection_name: str) -> str:
    """Tabla SQLite destino de una colección."""
    return get_collection_config(collection_name)["table"]


def get_migrator_name(collection_name: str) -> str:
    """
    Nombre del módulo migrador (dentro de migrators/) para una colección.

    Las colecciones sin reglas de aplanado comparten 'plain'.
    """
    return get_collection_config(collection_name)["migrator"]


def get_all_tables() -> list:
    """Tablas destino en el orden de migración."""
    return [get_table_for_collection(name) for name in MIGRATION_ORDER]
