"""
Suite de tests para sistema de migración MongoDB → SQLite.

Los tests NO necesitan un servidor MongoDB: usan dobles en memoria
(ver helpers.py) y archivos SQLite temporales. Validan:
- Sintaxis de código Python
- Configuración e interfaz de migradores
- Coherencia entre migradores y schema.sql
- Transformación, inserción y orquestación de la migración
"""
