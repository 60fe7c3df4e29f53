"""
Configuracion de base de datos.

Importa todos los modelos para que se registren con Base
antes de crear las tablas.
"""
from movies_api.infrastructure.database.models import MovieModel
