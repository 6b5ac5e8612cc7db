from marshmallow import Schema, fields, validate, validates, ValidationError


class ToDoItemRequestSchema(Schema):
    title = fields.String(required=True, validate=validate.Length(min=1, max=100))
    description = fields.String(required=True, validate=validate.Length(min=1, max=200))

    @validates("title")
    def _validate_title(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("title cannot be blank.")

    @validates("description")
    def _validate_description(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("description cannot be blank.")


class ToDoItemOutSchema(Schema):
    id = fields.Integer()
    title = fields.String()
    description = fields.String()
    user_id = fields.Integer()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class PagedResultSchema(Schema):
    data = fields.List(fields.Nested(ToDoItemOutSchema))
    page = fields.Integer()
    limit = fields.Integer()
    total = fields.Integer()
