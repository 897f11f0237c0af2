from flask import Blueprint, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from models import User
from schemas import parse_payload, read_payload
from schemas.user import UserCreateForm, UserEditForm
from services import user_srv
from services.auth_services import admin_required, login_required
from services.errors import ValidationFailed, not_found, store_failure
from services.filters import FilterError

users = Blueprint('users', __name__)


@users.route('/', methods=['GET'])
@login_required
def list_users(ctx):
    try:
        rows = user_srv.list_users(request.args)
    except FilterError as e:
        return jsonify({"error": str(e)}), 400

    payload = {"users": [user_srv.serialize_user(u) for u in rows]}
    if not rows:
        payload["message"] = "No users found"
    return jsonify(payload), 200


@users.route('/<int:user_id>', methods=['GET'])
@login_required
def view_user(user_id, ctx):
    user = User.find(user_id)
    if user is None:
        return not_found("User")
    return jsonify(user_srv.serialize_user(user)), 200


@users.route('/create_user', methods=['POST'])
@admin_required
def create_user(ctx):
    data = read_payload()
    form, error = parse_payload(UserCreateForm, data)
    if error:
        return error

    try:
        user = user_srv.add_new_user(form, ctx)
        return jsonify({"message": "User created successfully", "id": user.id}), 201
    except ValidationFailed as e:
        return e.response(data)
    except SQLAlchemyError:
        return store_failure("creating user")


@users.route('/update_user/<int:user_id>', methods=['PUT'])
@admin_required
def update_user(user_id, ctx):
    user = User.find(user_id)
    if user is None:
        return not_found("User")

    data = read_payload()
    form, error = parse_payload(UserEditForm, data)
    if error:
        return error

    try:
        user_srv.update_user(user, form, ctx)
        return jsonify({"message": "User updated successfully"}), 200
    except ValidationFailed as e:
        return e.response(data)
    except SQLAlchemyError:
        return store_failure("updating user")


@users.route('/delete_user/<int:user_id>', methods=['DELETE'])
@admin_required
def delete_user(user_id, ctx):
    user = User.find(user_id)
    if user is None:
        return not_found("User")

    try:
        user_srv.delete_user(user, ctx)
        return jsonify({"message": "User deleted successfully"}), 200
    except ValidationFailed as e:
        return e.response()
    except SQLAlchemyError:
        return store_failure("deleting user")


@users.route('/mentors', methods=['GET'])
@login_required
def mentors(ctx):
    return jsonify({"mentors": user_srv.staff_lookup('mentor')}), 200


@users.route('/rbms', methods=['GET'])
@login_required
def rbms(ctx):
    return jsonify({"rbms": user_srv.staff_lookup('rbm')}), 200


@users.route('/counselors', methods=['GET'])
@login_required
def counselors(ctx):
    return jsonify({"counselors": user_srv.staff_lookup('councillor')}), 200
