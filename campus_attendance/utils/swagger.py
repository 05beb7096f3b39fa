"""Swagger/OpenAPI configuration for the application."""

# Swagger UI configuration
SWAGGER_URL = '/api/docs'
API_URL = '/api/swagger.json'

def _operation(summary: str, tag: str, body: dict = None, params: list = None,
               secured: bool = True) -> dict:
    operation = {
        "tags": [tag],
        "summary": summary,
        "responses": {
            "200": {"description": "Success", "content": {"application/json": {
                "schema": {"$ref": "#/components/schemas/Envelope"}}}},
            "400": {"description": "Validation error"},
            "401": {"description": "Missing, invalid or expired token"},
            "403": {"description": "Role not allowed"},
            "404": {"description": "Referenced entity not found"}
        }
    }
    if secured:
        operation["security"] = [{"bearerAuth": []}]
    if body:
        operation["requestBody"] = {
            "required": True,
            "content": {"application/json": {"schema": body}}
        }
    if params:
        operation["parameters"] = [
            {"name": name, "in": location, "required": required, "schema": {"type": kind}}
            for name, location, kind, required in params
        ]
    return operation

def generate_swagger_spec():
    """Generate OpenAPI/Swagger specification."""
    attendance_body = {"$ref": "#/components/schemas/AttendanceSubmission"}
    verify_body = {
        "type": "object",
        "required": ["token", "timetable_id"],
        "properties": {
            "token": {"type": "string", "example": "482913"},
            "timetable_id": {"type": "integer"}
        }
    }
    report_params = [
        ("section_id", "query", "integer", True),
        ("course_code", "query", "string", False),
        ("threshold", "query", "number", False),
        ("format", "query", "string", False),
    ]

    return {
        "openapi": "3.0.0",
        "info": {
            "title": "Campus Attendance API",
            "description": "Timetable-driven attendance recording with class-swap inference, "
                           "faculty verification and shortage reporting",
            "version": "1.0.0"
        },
        "servers": [
            {"url": "http://127.0.0.1:5000", "description": "Development server"}
        ],
        "components": {
            "securitySchemes": {
                "bearerAuth": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}
            },
            "schemas": {
                "Envelope": {
                    "type": "object",
                    "properties": {
                        "error": {"type": "boolean"},
                        "message": {"type": "string"},
                        "data": {}
                    }
                },
                "AttendanceSubmission": {
                    "type": "object",
                    "required": ["timetable_id", "date"],
                    "properties": {
                        "timetable_id": {"type": "integer"},
                        "date": {"type": "string", "format": "date"},
                        "selected_course_code": {"type": "string"},
                        "is_free": {"type": "boolean", "default": False},
                        "records": {
                            "type": "array",
                            "items": {
                                "type": "object",
                                "properties": {
                                    "id": {"type": "integer"},
                                    "status": {"type": "string", "enum": ["present", "absent"]}
                                }
                            }
                        }
                    }
                }
            }
        },
        "paths": {
            "/api/login": {"post": _operation(
                "Login and receive a bearer token", "Auth", secured=False,
                body={"type": "object", "properties": {
                    "email": {"type": "string"}, "password": {"type": "string"}}})},
            "/api/auth/me": {"get": _operation("Current user", "Auth")},
            "/api/cr/attendance": {"post": _operation(
                "Record a session (normal, swap or free)", "Attendance", body=attendance_body)},
            "/api/faculty/verify/{sessionId}": {"put": _operation(
                "Verify and lock a session", "Attendance", body=verify_body,
                params=[("sessionId", "path", "integer", True)])},
            "/api/faculty/regen-token": {"put": _operation(
                "Generate a new 6-digit authorization key", "Attendance")},
            "/api/admin/attendance-report": {"get": _operation(
                "Attendance percentages per student and course", "Reports", params=report_params)},
            "/api/admin/shortage-list": {"get": _operation(
                "Students below the shortage threshold", "Reports", params=report_params)},
            "/api/admin/daily-attendance-overview": {"get": _operation(
                "Slots of a date merged with recorded sessions", "Reports", params=[
                    ("section_id", "query", "integer", True),
                    ("date", "query", "string", True),
                    ("semester", "query", "integer", True)])},
            "/api/common/week-grid": {"get": _operation(
                "Weekly timetable merged with recorded sessions", "Reports", params=[
                    ("section_id", "query", "integer", True),
                    ("start_date", "query", "string", True),
                    ("semester", "query", "integer", True)])},
            "/api/common/timetable": {"get": _operation(
                "Timetable of a section and semester", "Timetable", params=[
                    ("section_id", "query", "integer", True),
                    ("semester", "query", "integer", True)])},
            "/api/admin/timetable": {"post": _operation("Add a timetable slot", "Timetable")},
            "/api/admin/depts/": {"get": _operation("List departments", "Catalog"),
                                  "post": _operation("Create a department", "Catalog")},
            "/api/admin/batches/": {"get": _operation("List batches", "Catalog"),
                                    "post": _operation("Create a batch", "Catalog")},
            "/api/admin/sections/": {"get": _operation("List sections", "Catalog"),
                                     "post": _operation("Create a section", "Catalog")},
            "/api/admin/courses/": {"get": _operation("List courses", "Catalog"),
                                    "post": _operation("Create a course", "Catalog")},
            "/api/admin/faculty": {"get": _operation("List faculty profiles", "Faculty")},
            "/api/admin/students": {"get": _operation("List students", "Students"),
                                    "post": _operation("Add a student", "Students")},
        }
    }
