"""
Authentication blueprint:
- POST /auth/login    -> issue an access/refresh pair
- POST /auth/refresh  -> rotate a refresh token
- POST /auth/logout   -> revoke a refresh token
- GET  /auth/me       -> current user
- POST /auth/prune    (admin only) -> drop expired refresh tokens

The implementation:
- Access and refresh tokens are JWTs signed with HS256 under two different secrets
- Refresh tokens are registered server side so they can be rotated (single use) and revoked
- Login only resolves the username; credential checks belong to an upstream identity provider
"""
from __future__ import annotations

import logging
from flask import Blueprint, request, jsonify, g, abort

from models.schemas.user import UserLoginSchema, UserOutSchema
from models.schemas.token import RefreshRequestSchema, LogoutRequestSchema
from utils.auth_services import current_auth
from utils.decorators import jwt_required, roles_required

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__, url_prefix="/auth")

user_login_schema = UserLoginSchema()
user_out_schema = UserOutSchema()
refresh_request_schema = RefreshRequestSchema()
logout_request_schema = LogoutRequestSchema()


@bp.post("/login")
def login():
    """
    Login: return access_token and refresh_token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             username: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      401:
        description: Unauthorized
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = user_login_schema.load(payload)

    auth = current_auth()
    user = auth.identity_store.find_by_username(data["username"])
    if not user or not user.active:
        abort(401, description="Invalid credentials")

    pair = auth.manager.issue(user.id)
    return jsonify(pair.to_dict()), 200


@bp.post("/refresh")
def refresh():
    """
    Use refresh token to obtain new access and refresh tokens (rotation)
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refresh_token: { type: string }
    responses:
      200:
        description: OK (returns the new pair; the presented token is now dead)
      401:
        description: UNKNOWN_TOKEN, INVALID_TOKEN or TOKEN_EXPIRED
      422:
        description: refresh_token missing
    """
    payload = request.get_json(silent=True) or {}
    data = refresh_request_schema.load(payload)

    # AuthError subclasses are rendered by api.errors with their kind
    pair = current_auth().manager.refresh(data["refresh_token"])
    return jsonify(pair.to_dict()), 200


@bp.post("/logout")
@jwt_required()
def logout():
    """
    logout: revokes the refresh token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refresh_token: { type: string }
    responses:
      200:
        description: OK (also when the token was already revoked)
      401:
        description: Unauthorized
    """
    payload = request.get_json(silent=True) or {}
    data = logout_request_schema.load(payload)

    refresh_token = data.get("refresh_token")
    if refresh_token:
        current_auth().manager.revoke(refresh_token)
    # access token stays valid until it expires; the client drops it
    return jsonify({"ok": True}), 200


@bp.get("/me")
@jwt_required()
def me():
    """
    Get current user info.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    return jsonify({"data": user_out_schema.dump(g.current_user)}), 200


@bp.post("/prune")
@roles_required(["admin"])
def prune():
    """
    Remove expired refresh tokens from the registry - admin
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK (returns the number of pruned tokens)
      403:
        description: Forbidden
    """
    removed = current_auth().manager.prune_expired()
    logger.info("Prune requested by user_id=%s removed=%d", g.current_user.id, removed)
    return jsonify({"pruned": removed}), 200
