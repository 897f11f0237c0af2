from flask import Blueprint, jsonify

from services import dashboard_services
from services.auth_services import login_required

dashboard = Blueprint('dashboard', __name__)


@dashboard.route('/', methods=['GET'])
@login_required
def overview(ctx):
    data = dashboard_services.overview()
    data["user"] = {"id": ctx.user.id, "full_name": ctx.user.full_name,
                    "user_type": ctx.user.user_type}
    return jsonify(data), 200
