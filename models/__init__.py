"""
Persistence package: SQLAlchemy models and the shared DBStorage instance.

The app factory calls storage.reload(<database url>) before serving requests.
"""
from models.db_storage import DBStorage

storage = DBStorage()
