from contextlib import contextmanager
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import scoped_session, sessionmaker
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.pool import StaticPool

from models.base_model import Base
from models.user import User
from models.todo_item import ToDoItem
from models.refresh_token import RefreshToken
from services.exceptions import StorageFailure

logger = logging.getLogger(__name__)

# Map model names for easy querying
classes = {
    "User": User,
    "ToDoItem": ToDoItem,
    "RefreshToken": RefreshToken,
}


def _is_sqlite_memory(url) -> bool:
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


class DBStorage:
    __engine = None
    __session = None

    def reload(self, database_url: str, echo: bool = False):
        """Build the engine for database_url, create tables and start a session registry"""
        if self.__session is not None:
            self.__session.remove()
        if self.__engine is not None:
            self.__engine.dispose()

        kwargs = {"echo": echo}
        engine_url = make_url(database_url)
        if _is_sqlite_memory(engine_url):
            # One shared connection, otherwise every session sees an empty database
            kwargs.update(poolclass=StaticPool, connect_args={"check_same_thread": False})
        elif engine_url.get_backend_name() != "sqlite":
            kwargs["pool_pre_ping"] = True
        self.__engine = create_engine(database_url, **kwargs)

        if self.__engine.url.get_backend_name() == "sqlite":
            # Enable SQLite foreign keys (needed for ON DELETE CASCADE)
            @event.listens_for(self.__engine, "connect")
            def _set_sqlite_pragma(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

        Base.metadata.create_all(self.__engine)
        session_factory = sessionmaker(bind=self.__engine, expire_on_commit=False)
        self.__session = scoped_session(session_factory)

    @contextmanager
    def unit_of_work(self, operation: str, **context):
        """
        One transaction around a service operation.

        Commits when the block exits cleanly and rolls back otherwise.
        IntegrityError propagates unchanged so callers can map constraint
        violations; any other database error is logged with the operation
        and its identifying keys and re-raised as StorageFailure.
        """
        session = self.__session
        try:
            yield session
            session.commit()
        except IntegrityError:
            session.rollback()
            raise
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Storage failure during %s %s", operation, context)
            raise StorageFailure(operation) from exc
        except Exception:
            session.rollback()
            raise

    def get(self, cls, id):
        """Fetch one object by class and ID"""
        if cls in classes.values():
            return self.__session.get(cls, id)
        return None

    def count(self, cls=None):
        """Count objects"""
        if cls:
            return self.__session.query(cls).count()
        total = 0
        for model in classes.values():
            total += self.__session.query(model).count()
        return total

    def close(self):
        """Remove session (for API teardown)"""
        if self.__session is not None:
            self.__session.remove()

    # expose the SQLAlchemy session for advanced querying (joins, filters, etc.)
    def get_session(self):
        return self.__session
