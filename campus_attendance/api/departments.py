"""Department management API."""
from flask import Blueprint, request
from flask_jwt_extended import jwt_required
from campus_attendance import db
from campus_attendance.models.department import Department
from campus_attendance.utils.decorators import permission_required
from campus_attendance.utils.exceptions import ConflictError, NotFoundError
from campus_attendance.utils.helpers import success_response
from campus_attendance.utils.validators import require_fields

departments_bp = Blueprint('departments', __name__)

def _get_department(dept_id: int) -> Department:
    department = db.session.get(Department, dept_id)
    if not department:
        raise NotFoundError("Department not found")
    return department

@departments_bp.route('/', methods=['POST'])
@jwt_required()
@permission_required('catalog.manage')
def create_department():
    data = require_fields(request.get_json(silent=True), ['name', 'code'])
    code = data['code'].strip().upper()
    if Department.query.filter_by(dept_code=code).first():
        raise ConflictError(f"Department {code} already exists")

    department = Department(dept_name=data['name'].strip(), dept_code=code).save()
    return success_response(data=department.to_dict(), message="Department Created", status_code=201)

@departments_bp.route('/', methods=['GET'])
@jwt_required()
def get_departments():
    departments = Department.query.order_by(Department.dept_code).all()
    return success_response(data=[d.to_dict() for d in departments])

@departments_bp.route('/<int:dept_id>', methods=['PUT'])
@jwt_required()
@permission_required('catalog.manage')
def update_department(dept_id):
    department = _get_department(dept_id)
    data = request.get_json(silent=True) or {}
    department.update(
        dept_name=data.get('name', department.dept_name),
        dept_code=(data.get('code') or department.dept_code).strip().upper()
    )
    return success_response(data=department.to_dict(), message="Department Updated")

@departments_bp.route('/<int:dept_id>', methods=['DELETE'])
@jwt_required()
@permission_required('catalog.manage')
def delete_department(dept_id):
    department = _get_department(dept_id)
    if department.batches.count():
        raise ConflictError("Department still has batches")
    department.delete()
    return success_response(message="Department Deleted")
