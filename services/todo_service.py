from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy import or_

from models.todo_item import ToDoItem
from services.exceptions import InvalidInput

logger = logging.getLogger(__name__)

INT_PATTERN = re.compile(r"^[+-]?[0-9]+\Z")
ID_MIN = -(2 ** 31)
ID_MAX = 2 ** 31 - 1

# Sorting allowlist: API field (lower-cased) -> SQLAlchemy column
SORT_COLUMNS = {
    "title": ToDoItem.title,
    "description": ToDoItem.description,
    "id": ToDoItem.id,
}


@dataclass
class PagedResult:
    data: List[ToDoItem] = field(default_factory=list)
    page: int = 1
    limit: int = 10
    total: int = 0


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _parse_int(value: str) -> Optional[int]:
    """ASCII digits within the 32-bit id range; anything else is a text filter."""
    stripped = value.strip()
    if not INT_PATTERN.match(stripped):
        return None
    number = int(stripped)
    if not ID_MIN <= number <= ID_MAX:
        return None
    return number


class ToDoItemService:
    """Item store and query engine for a user's to-do items."""

    def __init__(self, storage):
        self.storage = storage

    def list_items(self, user_id: int, page: int, limit: int,
                   filter: Optional[str] = None, sort_by: Optional[str] = None) -> PagedResult:
        """
        Page through the items owned by user_id.

        A numeric filter matches the item id exactly; any other filter is a
        case-insensitive substring match on title or description. total is
        counted after filtering and before pagination.
        """
        if page <= 0 or limit <= 0:
            raise InvalidInput("page and limit must be greater than zero")

        order_by = ToDoItem.id.asc()
        if sort_by:
            column = SORT_COLUMNS.get(sort_by.strip().lower())
            if column is None:
                raise InvalidInput("Invalid sort field")
            order_by = column.asc()

        with self.storage.unit_of_work("list_items", user_id=user_id) as session:
            query = session.query(ToDoItem).filter(ToDoItem.user_id == user_id)

            if filter:
                item_id = _parse_int(filter)
                if item_id is not None:
                    query = query.filter(ToDoItem.id == item_id)
                else:
                    pattern = f"%{_escape_like(filter)}%"
                    query = query.filter(
                        or_(
                            ToDoItem.title.ilike(pattern, escape="\\"),
                            ToDoItem.description.ilike(pattern, escape="\\"),
                        )
                    )

            total = query.count()
            rows = (
                query.order_by(order_by)
                .offset((page - 1) * limit)
                .limit(limit)
                .all()
            )
        return PagedResult(data=rows, page=page, limit=limit, total=total)

    def get_by_id(self, item_id: int) -> Optional[ToDoItem]:
        with self.storage.unit_of_work("get_item", item_id=item_id) as session:
            return session.get(ToDoItem, item_id)

    def create(self, user_id: int, title: str, description: str) -> ToDoItem:
        item = ToDoItem(title=title, description=description, user_id=user_id)
        with self.storage.unit_of_work("create_item", user_id=user_id) as session:
            session.add(item)
        logger.info("Created item %s for user %s", item.id, user_id)
        return item

    def update(self, item_id: int, title: str, description: str) -> Optional[ToDoItem]:
        with self.storage.unit_of_work("update_item", item_id=item_id) as session:
            item = session.get(ToDoItem, item_id)
            if item is None:
                return None
            item.title = title
            item.description = description
        return item

    def delete(self, item_id: int) -> bool:
        with self.storage.unit_of_work("delete_item", item_id=item_id) as session:
            item = session.get(ToDoItem, item_id)
            if item is None:
                return False
            session.delete(item)
        logger.info("Deleted item %s", item_id)
        return True
