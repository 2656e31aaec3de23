from flask import Blueprint

from utils.auth_services import current_auth

bp = Blueprint("health", __name__)

@bp.get("/health")
def health():
    """
    Health check
    ---
    tags:
      - Health
    responses:
      200:
        description: API is up
        schema:
          type: object
          properties:
            status:
              type: string
              example: ok
            version:
              type: string
              example: 1.0.0
            live_refresh_tokens:
              type: integer
              example: 3
    """
    return {
        "status": "ok",
        "version": "1.0.0",
        "live_refresh_tokens": len(current_auth().registry),
    }, 200
