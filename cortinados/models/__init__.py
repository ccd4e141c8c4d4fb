# cortinados/models/__init__.py
"""
Modelos SQLAlchemy do sistema.

Importar por aqui garante que as três tabelas estejam mapeadas antes do
Alembic (flask db migrate) e do user_loader do Flask-Login.
"""

from .usuario import Usuario
from .projeto import Projeto
from .item import Item

__all__ = ["Usuario", "Projeto", "Item"]
