"""
Migradores para transformar colecciones MongoDB a tablas SQLite.

Cada migrador implementa la interfaz BaseMigrator y se carga dinámicamente
en runtime según config.COLLECTIONS[<colección>]['migrator'].

Estructura:
    base.py: Clase abstracta BaseMigrator (pasos comunes)
    plain.py: PlainMigrator, colecciones sin objetos embebidos
    games.py: GamesMigrator, aplana recentWin
    userinteractions.py: UserinteractionsMigrator, aplana deviceInfo
    dailygames.py: DailygamesMigrator, serializa selectedGames a JSON

Convención de nombres (load_migrator_for_collection en mongomigra.py):
    migrators.games → GamesMigrator
    migrators.plain → PlainMigrator

Interfaz requerida (ver BaseMigrator):
    - transform(doc)
    - flatten(record)
    - get_primary_key_from_doc(doc)
"""
