"""
export_sample.py - Exporta muestra de colección MongoDB a JSON

Sirve para revisar la forma real de los documentos (objetos embebidos,
tipos de fecha) antes de ajustar un migrador o schema.sql.

Uso:
    python export_sample.py <collection_name> [limit]

Ejemplo:
    python export_sample.py games 50
"""

import sys
from pathlib import Path
from bson.json_util import dumps
from pymongo import MongoClient
import config


def export_collection_sample(collection_name, limit=200, samples_dir="samples", mongo_db=None):
    """
    Exporta muestra de una colección a JSON en formato Extended JSON.

    Args:
        collection_name: Nombre de la colección en MongoDB
        limit: Número de documentos a exportar
        samples_dir: Directorio destino
        mongo_db: Base pymongo ya abierta (si es None se conecta con config)

    Returns:
        Path|None: Archivo generado, None si la colección está vacía
    """
    config.get_collection_config(collection_name)

    client = None
    if mongo_db is None:
        client = MongoClient(config.MONGO_URI, serverSelectionTimeoutMS=config.MONGO_TIMEOUT_MS)
        mongo_db = client[config.MONGO_DATABASE_NAME]

    try:
        print(f"📥 Obteniendo {limit} documentos de '{collection_name}'...")
        docs = list(mongo_db[collection_name].find().limit(limit))
    finally:
        if client is not None:
            client.close()

    if not docs:
        print(f"⚠️  La colección '{collection_name}' está vacía o no existe")
        return None

    samples_dir = Path(samples_dir)
    samples_dir.mkdir(exist_ok=True)

    # Serializar usando bson.json_util (mantiene tipos de MongoDB)
    json_output = dumps(docs, indent=2, ensure_ascii=False)

    filename = samples_dir / f"{collection_name}_sample.json"
    filename.write_text(json_output, encoding="utf-8")

    print(f"✅ Exportados {len(docs)} documentos")
    print(f"📄 Archivo: {filename}")
    print(f"📊 Tamaño: {len(json_output) / 1024:.2f} KB")
    return filename


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Uso: python export_sample.py <collection_name> [limit]")
        print("Ejemplo: python export_sample.py games 50")
        sys.exit(1)

    collection_name = sys.argv[1]
    limit = int(sys.argv[2]) if len(sys.argv) > 2 else 200

    try:
        export_collection_sample(collection_name, limit)
    except KeyError as e:
        print(f"❌ {e.args[0]}")
        sys.exit(1)
