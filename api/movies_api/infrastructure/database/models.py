"""
Modelos de base de datos (ORM).
"""
from sqlalchemy import Column, String, Integer, DateTime, Date, Text, JSON
from sqlalchemy.sql import func

from movies_api.infrastructure.database.session import Base


class MovieModel(Base):
    """
    Modelo de base de datos para peliculas importadas.

    external_id es la URL canonica de la pelicula en la API de Star Wars
    y es la unica clave natural usada para deduplicar en cada sync.
    """

    __tablename__ = "movies"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String(255), nullable=False, index=True)
    episode_id = Column(Integer, nullable=False)
    opening_crawl = Column(Text, nullable=False)
    director = Column(String(255), nullable=False)
    producer = Column(String(255), nullable=False)
    release_date = Column(Date, nullable=False)

    # Nombres resueltos, mismo orden que las URLs de referencia en origen
    character_names = Column(JSON, nullable=False, default=list)
    planet_names = Column(JSON, nullable=False, default=list)
    starship_names = Column(JSON, nullable=False, default=list)
    vehicle_names = Column(JSON, nullable=False, default=list)
    species_names = Column(JSON, nullable=False, default=list)

    external_id = Column(String(512), nullable=False, unique=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Movie(id={self.id}, title={self.title}, external_id={self.external_id})>"
