"""Batch management API."""
from flask import Blueprint, request
from flask_jwt_extended import jwt_required
from campus_attendance import db
from campus_attendance.models.department import Batch, Department
from campus_attendance.utils.decorators import permission_required
from campus_attendance.utils.exceptions import ConflictError, NotFoundError
from campus_attendance.utils.helpers import success_response, parse_int
from campus_attendance.utils.validators import require_fields

batches_bp = Blueprint('batches', __name__)

def _get_batch(batch_id: int) -> Batch:
    batch = db.session.get(Batch, batch_id)
    if not batch:
        raise NotFoundError("Batch not found")
    return batch

@batches_bp.route('/', methods=['POST'])
@jwt_required()
@permission_required('catalog.manage')
def create_batch():
    data = require_fields(request.get_json(silent=True),
                          ['dept_id', 'start_year', 'end_year', 'batch_name'])
    dept_id = parse_int(data['dept_id'], 'dept_id')
    if not db.session.get(Department, dept_id):
        raise NotFoundError("Department not found")

    batch = Batch(
        dept_id=dept_id,
        start_year=parse_int(data['start_year'], 'start_year'),
        end_year=parse_int(data['end_year'], 'end_year'),
        batch_name=data['batch_name'].strip()
    ).save()
    return success_response(data=batch.to_dict(), message="Batch Created", status_code=201)

@batches_bp.route('/', methods=['GET'])
@jwt_required()
def get_batches():
    """List batches with their department code."""
    batches = Batch.query.order_by(Batch.start_year.desc()).all()
    return success_response(data=[b.to_dict() for b in batches])

@batches_bp.route('/<int:batch_id>', methods=['PUT'])
@jwt_required()
@permission_required('catalog.manage')
def update_batch(batch_id):
    batch = _get_batch(batch_id)
    data = request.get_json(silent=True) or {}
    batch.update(
        start_year=parse_int(data.get('start_year'), 'start_year', required=False) or batch.start_year,
        end_year=parse_int(data.get('end_year'), 'end_year', required=False) or batch.end_year,
        batch_name=data.get('batch_name', batch.batch_name)
    )
    return success_response(data=batch.to_dict(), message="Batch Updated")

@batches_bp.route('/<int:batch_id>', methods=['DELETE'])
@jwt_required()
@permission_required('catalog.manage')
def delete_batch(batch_id):
    batch = _get_batch(batch_id)
    if batch.sections.count():
        raise ConflictError("Batch still has sections")
    batch.delete()
    return success_response(message="Batch Deleted")
