from flask import Blueprint, g, request

from corpsite.extensions import db
from corpsite.guards import auth_required
from corpsite.responses import success_response
from corpsite.serializers import user_to_dict
from corpsite.services.auth import AuthService

auth_bp = Blueprint("auth", __name__)


def _json():
    return request.get_json(silent=True) or {}


@auth_bp.route("/register", methods=["POST"])
def register():
    data = _json()
    # public sign-up always yields a plain user; admins come from the CLI
    token, user = AuthService(db.session).register(data.get("name"), data.get("email"), data.get("password"))
    return success_response("User registered successfully", {"user": user_to_dict(user), "token": token}, 201)


@auth_bp.route("/login", methods=["POST"])
def login():
    data = _json()
    token, user = AuthService(db.session).authenticate_user(data.get("email"), data.get("password"))
    return success_response("Login successful", {"user": user_to_dict(user), "token": token})


@auth_bp.route("/me", methods=["GET"])
@auth_bp.route("/verify", methods=["GET"])
@auth_required
def me():
    return success_response("User fetched successfully", {"user": user_to_dict(g.current_user)})


@auth_bp.route("/profile", methods=["PUT"])
@auth_required
def update_profile():
    data = _json()
    user = AuthService(db.session).update_profile(g.current_user, data.get("name"), data.get("email"))
    return success_response("Profile updated successfully", {"user": user_to_dict(user)})


@auth_bp.route("/change-password", methods=["PUT"])
@auth_required
def change_password():
    data = _json()
    AuthService(db.session).change_password(g.current_user, data.get("currentPassword"), data.get("newPassword"))
    return success_response("Password changed successfully")


@auth_bp.route("/logout", methods=["POST"])
@auth_required
def logout():
    # tokens are stateless; the client drops its copy
    return success_response("Logout successful")
