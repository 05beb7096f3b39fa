"""Attendance reports and schedule grids."""
import io
import math
import pandas as pd
from datetime import date
from flask import Blueprint, request, current_app
from flask_jwt_extended import jwt_required
from campus_attendance.services.report_service import ReportService, ALL_COURSES
from campus_attendance.utils.exceptions import ValidationError
from campus_attendance.utils.helpers import success_response, error_response, parse_date, parse_int

reports_bp = Blueprint('reports', __name__)

REPORT_COLUMNS = ['roll_number', 'full_name', 'subject', 'total', 'attended', 'percentage']

def _parse_threshold(value):
    if value is None or value == '':
        return None
    try:
        threshold = float(value)
    except ValueError:
        raise ValidationError("threshold must be a number")
    if not math.isfinite(threshold):
        raise ValidationError("threshold must be a finite number")
    return threshold

def _report_response(rows, section_id: int):
    """JSON rows, or a CSV download when ``format=csv``."""
    if request.args.get('format', '').lower() != 'csv':
        return success_response(data=rows)

    df = pd.DataFrame(rows, columns=REPORT_COLUMNS)
    output = io.StringIO()
    df.to_csv(output, index=False, encoding='utf-8-sig')
    output.seek(0)

    filename = f"attendance_report_section_{section_id}_{date.today().strftime('%Y%m%d')}.csv"
    return output.getvalue(), 200, {
        'Content-Type': 'text/csv; charset=utf-8',
        'Content-Disposition': f'attachment; filename={filename}'
    }

@reports_bp.route('/reports/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return success_response(message='Reports service is running')

@reports_bp.route('/admin/attendance-report', methods=['GET'])
@jwt_required()
def attendance_report():
    """Per student, per course attendance; optionally only rows below ``threshold``."""
    section_id = parse_int(request.args.get('section_id'), 'section_id')
    course_code = request.args.get('course_code') or ALL_COURSES
    threshold = _parse_threshold(request.args.get('threshold'))

    rows = ReportService.attendance_report(section_id, course_code, threshold)
    return _report_response(rows, section_id)

@reports_bp.route('/admin/shortage-list', methods=['GET'])
@jwt_required()
def shortage_list():
    """Students below the configured shortage threshold."""
    section_id = parse_int(request.args.get('section_id'), 'section_id')
    course_code = request.args.get('course_code') or ALL_COURSES
    threshold = _parse_threshold(request.args.get('threshold'))
    if threshold is None:
        threshold = current_app.config.get('SHORTAGE_THRESHOLD', 75)

    rows = ReportService.attendance_report(section_id, course_code, threshold)
    return _report_response(rows, section_id)

@reports_bp.route('/admin/daily-attendance-overview', methods=['GET'])
@jwt_required()
def daily_attendance_overview():
    """Slots of one date with the recorded session outcome and counts."""
    if not all(request.args.get(key) for key in ('section_id', 'date', 'semester')):
        return error_response("Missing parameters", 400)

    section_id = parse_int(request.args.get('section_id'), 'section_id')
    semester = parse_int(request.args.get('semester'), 'semester')
    day = parse_date(request.args.get('date'))

    return success_response(data=ReportService.daily_overview(section_id, day, semester))

@reports_bp.route('/common/week-grid', methods=['GET'])
@jwt_required()
def week_grid():
    """Weekly timetable merged with the sessions of the week starting at ``start_date``."""
    section_id = parse_int(request.args.get('section_id'), 'section_id')
    semester = parse_int(request.args.get('semester'), 'semester')
    start_date = parse_date(request.args.get('start_date'), 'start_date')

    return success_response(data=ReportService.week_grid(section_id, start_date, semester))
