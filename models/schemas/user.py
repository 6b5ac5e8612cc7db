from marshmallow import Schema, fields, pre_load, validate


class UserRegisterSchema(Schema):
    name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    # Not normalized: email matching is case-sensitive
    email = fields.Email(required=True, validate=validate.Length(max=256))
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1, max=200))


class UserLoginSchema(Schema):
    email = fields.Email(required=True, validate=validate.Length(max=256))
    password = fields.String(
        required=True, load_only=True, data_key="passwordHash", validate=validate.Length(min=1, max=200)
    )

    @pre_load
    def accept_password_alias(self, data, **kwargs):
        if isinstance(data, dict) and "passwordHash" not in data and "password" in data:
            data = dict(data)
            data["passwordHash"] = data.pop("password")
        return data
