from marshmallow import Schema, fields, validate


class RefreshRequestSchema(Schema):
    refresh_token = fields.String(required=True, validate=validate.Length(min=1))


class LogoutRequestSchema(Schema):
    refresh_token = fields.String(load_default=None)
