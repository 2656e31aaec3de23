from flask import Blueprint, g

from models.schemas.user import UserOutSchema
from utils.decorators import jwt_required

bp = Blueprint("protected", __name__)

user_out_schema = UserOutSchema()


@bp.get("/protected")
@jwt_required()
def protected():
    """
    Example protected resource
    ---
    tags:
      - Protected
    security:
      - Bearer: []
    responses:
      200:
        description: Greets the authenticated user
      401:
        description: Unauthorized
    """
    user = g.current_user
    return {"message": f"Hello {user.username}", "user": user_out_schema.dump(user)}, 200
