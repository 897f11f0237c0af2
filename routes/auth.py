from flask import Blueprint, jsonify
from werkzeug.security import check_password_hash

from models import User
from schemas import parse_payload, read_payload
from schemas.user import LoginForm
from services import auth_services
from services.auth_services import login_required
from services.user_srv import serialize_user

auth = Blueprint('auth', __name__)


@auth.route('/login', methods=['POST'])
def login():
    data = read_payload()
    form, error = parse_payload(LoginForm, data)
    if error:
        return error

    user = User.query.filter_by(username=form.username).one_or_none()
    if user is None or not check_password_hash(user.password_hash, form.password):
        return jsonify({"error": "Invalid username or password"}), 401

    if user.status != 'active':
        return jsonify({"error": "Account is deactivated. Please contact support."}), 403

    access_token = auth_services.generate_tokens(user.id)

    auth_services.log_audit_trail(user, 'User', user.id, 'LOGIN', 'User logged in')

    return jsonify({
        "message": "Login successful",
        "token": access_token,
        "user": serialize_user(user)
    }), 200


@auth.route('/me', methods=['GET'])
@login_required
def me(ctx):
    return jsonify({
        "user": serialize_user(ctx.user),
        "permissions": sorted(ctx.permissions)
    }), 200
