from datetime import datetime, timedelta

from flask import Blueprint, jsonify, request
from sqlalchemy import desc

from models import AuditTrail, db
from services.auth_services import admin_required
from services.filters import FilterError, apply_filters, eq

auditlogs = Blueprint('auditlogs', __name__)

LOG_FILTERS = {
    'operation': eq(AuditTrail.operation, cast=str),
    'table_name': eq(AuditTrail.table_name, cast=str),
    'username': eq(AuditTrail.username, cast=str),
}


# For fetching the overall audit logs
@auditlogs.route('/fetch_logs', methods=['GET'])
@auditlogs.route('/fetch_logs/<int:hours>', methods=['GET'])
@admin_required
def fetch_logs(ctx, hours=None):
    query = db.session.query(AuditTrail).order_by(desc(AuditTrail.change_datetime), desc(AuditTrail.audit_id))

    if hours:
        time_threshold = datetime.now() - timedelta(hours=hours)
        query = query.filter(AuditTrail.change_datetime >= time_threshold)

    try:
        query = apply_filters(query, request.args, LOG_FILTERS)
    except FilterError as e:
        return jsonify({"error": str(e)}), 400

    logs = []
    for audit_trail in query.all():
        logs.append({
            "audit_log": audit_trail.audit_id,
            "username": audit_trail.username,
            "role": audit_trail.role,
            "operation": audit_trail.operation,
            "table_name": audit_trail.table_name,
            "record_id": audit_trail.record_id if audit_trail.record_id is not None else 'N/A',
            "changed_datetime": audit_trail.change_datetime.strftime('%Y-%m-%d %H:%M:%S'),
            "action_desc": audit_trail.action_desc,
        })

    return jsonify({"logs": logs})


# For filtering purposes (operations)
@auditlogs.route('/fetch_operations', methods=['GET'])
@admin_required
def fetch_operations(ctx):
    distinct_operations = db.session.query(AuditTrail.operation).distinct().all()
    return jsonify({"operations": sorted(op[0] for op in distinct_operations if op[0])})
