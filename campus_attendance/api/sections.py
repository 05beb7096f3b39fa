"""Section management API."""
from flask import Blueprint, request
from flask_jwt_extended import jwt_required
from campus_attendance import db
from campus_attendance.models.department import Batch, Section
from campus_attendance.utils.decorators import permission_required
from campus_attendance.utils.exceptions import ConflictError, NotFoundError
from campus_attendance.utils.helpers import success_response, parse_int
from campus_attendance.utils.validators import require_fields

sections_bp = Blueprint('sections', __name__)

def _get_section(section_id: int) -> Section:
    section = db.session.get(Section, section_id)
    if not section:
        raise NotFoundError("Section not found")
    return section

@sections_bp.route('/', methods=['POST'])
@jwt_required()
@permission_required('catalog.manage')
def create_section():
    data = require_fields(request.get_json(silent=True), ['batch_id', 'section_name'])
    batch_id = parse_int(data['batch_id'], 'batch_id')
    if not db.session.get(Batch, batch_id):
        raise NotFoundError("Batch not found")

    section = Section(batch_id=batch_id, section_name=data['section_name'].strip()).save()
    return success_response(data=section.to_dict(), message="Section Created", status_code=201)

@sections_bp.route('/', methods=['GET'])
@jwt_required()
def get_sections():
    """List sections with their batch name."""
    sections = Section.query.order_by(Section.batch_id, Section.section_name).all()
    return success_response(data=[s.to_dict() for s in sections])

@sections_bp.route('/<int:section_id>', methods=['PUT'])
@jwt_required()
@permission_required('catalog.manage')
def update_section(section_id):
    section = _get_section(section_id)
    data = require_fields(request.get_json(silent=True), ['section_name'])
    section.update(section_name=data['section_name'].strip())
    return success_response(data=section.to_dict(), message="Section Updated")

@sections_bp.route('/<int:section_id>', methods=['DELETE'])
@jwt_required()
@permission_required('catalog.manage')
def delete_section(section_id):
    section = _get_section(section_id)
    if section.students.count() or section.timetable_slots.count():
        raise ConflictError("Section still has students or timetable slots")
    section.delete()
    return success_response(message="Section Deleted")
