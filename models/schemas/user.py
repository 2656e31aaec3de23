from marshmallow import Schema, fields, pre_load


def _norm_username(v):
    return v.strip() if isinstance(v, str) else v


class UserLoginSchema(Schema):
    username = fields.String(required=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "username" in data:
            data["username"] = _norm_username(data["username"])
        return data


class UserOutSchema(Schema):
    id = fields.String(allow_none=False)
    username = fields.String(allow_none=False)
    role = fields.String(allow_none=False)
