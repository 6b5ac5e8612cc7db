from __future__ import annotations

from typing import Tuple

from flask import Blueprint, request, jsonify, abort, current_app, g, url_for

from models.schemas.todo_item import ToDoItemRequestSchema, ToDoItemOutSchema, PagedResultSchema
from models.todo_item import ToDoItem
from services.todo_service import ToDoItemService
from utils.decorators import jwt_required

bp = Blueprint("todo_items", __name__)

# Schemas
item_request_schema = ToDoItemRequestSchema()
item_out_schema = ToDoItemOutSchema()
paged_result_schema = PagedResultSchema()


def _item_service() -> ToDoItemService:
    return current_app.extensions["todo_item_service"]


def parse_pagination() -> Tuple[int, int]:
    try:
        page = int(request.args.get("page", "1"))
        limit = int(request.args.get("limit", "10"))
    except ValueError:
        abort(400, description="page and limit must be integers")
    return page, limit


def _owned_item_or_404(item_id: int) -> ToDoItem:
    """Items of other users are reported as missing."""
    item = _item_service().get_by_id(item_id)
    if item is None or item.user_id != g.current_user_id:
        abort(404)
    return item


@bp.get("/ToDoItems")
@jwt_required()
def list_items():
    """
    List the current user's to-do items with pagination, filtering and sorting
    ---
    tags:
      - ToDoItems
    security:
      - Bearer: []
    parameters:
      - in: query
        name: page
        type: integer
        default: 1
      - in: query
        name: limit
        type: integer
        default: 10
      - in: query
        name: filter
        type: string
        description: "An integer matches the item id; anything else is a case-insensitive search on title and description"
      - in: query
        name: sortBy
        type: string
        description: "One of: title, description, id"
    responses:
      200:
        description: Paged list of items
      400:
        description: Invalid page, limit or sort field
      401:
        description: Unauthorized
    """
    page, limit = parse_pagination()
    result = _item_service().list_items(
        g.current_user_id,
        page,
        limit,
        filter=request.args.get("filter"),
        sort_by=request.args.get("sortBy"),
    )
    return jsonify(paged_result_schema.dump(result))


@bp.get("/ToDoItems/<int:item_id>")
@jwt_required()
def get_item(item_id: int):
    """
    Get a single to-do item by id
    ---
    tags:
      - ToDoItems
    security:
      - Bearer: []
    parameters:
      - in: path
        name: item_id
        type: integer
        required: true
    responses:
      200:
        description: Item found
      404:
        description: Not found
    """
    item = _owned_item_or_404(item_id)
    return jsonify(item_out_schema.dump(item))


@bp.post("/ToDoItems")
@jwt_required()
def create_item():
    """
    Create a new to-do item
    ---
    tags:
      - ToDoItems
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [title, description]
          properties:
            title: { type: string, maxLength: 100 }
            description: { type: string, maxLength: 200 }
    responses:
      201:
        description: Created
      400:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = item_request_schema.load(payload)

    item = _item_service().create(g.current_user_id, data["title"], data["description"])
    response = jsonify(item_out_schema.dump(item))
    response.status_code = 201
    response.headers["Location"] = url_for("todo_items.get_item", item_id=item.id)
    return response


@bp.put("/ToDoItems/<int:item_id>")
@jwt_required()
def update_item(item_id: int):
    """
    Replace the title and description of a to-do item
    ---
    tags:
      - ToDoItems
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: path
        name: item_id
        type: integer
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [title, description]
          properties:
            title: { type: string, maxLength: 100 }
            description: { type: string, maxLength: 200 }
    responses:
      200:
        description: Updated
      400:
        description: Validation error
      404:
        description: Not found
    """
    payload = request.get_json(silent=True) or {}
    data = item_request_schema.load(payload)

    _owned_item_or_404(item_id)
    item = _item_service().update(item_id, data["title"], data["description"])
    if item is None:
        abort(404)
    return jsonify(item_out_schema.dump(item))


@bp.delete("/ToDoItems/<int:item_id>")
@jwt_required()
def delete_item(item_id: int):
    """
    Delete a to-do item
    ---
    tags:
      - ToDoItems
    security:
      - Bearer: []
    parameters:
      - in: path
        name: item_id
        type: integer
        required: true
    responses:
      204:
        description: Deleted
      404:
        description: Not found
    """
    _owned_item_or_404(item_id)
    if not _item_service().delete(item_id):
        abort(404)
    return ("", 204)
