from __future__ import annotations

from flask import Flask, request

from ..common.responses import error_response, ok
from ..core.exceptions import DomainError
from ..container import Container


def _employee_dict(employee) -> dict:
    return {"employeeId": employee.employee_id, "name": employee.name, "inTime": employee.in_time}


def _punch_dict(punch) -> dict:
    return {"date": punch.date, "time": punch.time, "source": punch.source.value, "uploadId": punch.upload_id}


def register(app: Flask, container: Container) -> None:
    @app.route("/api/employees", methods=["GET"], endpoint="list_employees")
    def list_employees():
        employees = container.employee_service.list_employees()
        return ok([_employee_dict(e) for e in employees])

    @app.route("/api/employees/<employee_id>", methods=["PUT"], endpoint="update_employee")
    def update_employee(employee_id: str):
        data = request.get_json(silent=True) or {}
        try:
            employee = container.employee_service.update_employee(
                employee_id,
                name=data.get("name"),
                in_time=data.get("inTime"),
            )
        except DomainError as e:
            return error_response(e)
        return ok(_employee_dict(employee))

    @app.route("/api/employees/<employee_id>/logs", methods=["GET"], endpoint="employee_logs")
    def employee_logs(employee_id: str):
        try:
            punches = container.report_service.employee_logs(
                employee_id,
                day=request.args.get("date"),
                start=request.args.get("start"),
                end=request.args.get("end"),
            )
        except DomainError as e:
            return error_response(e)
        return ok([_punch_dict(p) for p in punches])

    @app.route("/api/employees/<employee_id>/attendance", methods=["GET"], endpoint="employee_attendance")
    def employee_attendance(employee_id: str):
        try:
            days = container.report_service.employee_month(employee_id, request.args.get("month", ""))
        except DomainError as e:
            return error_response(e)
        return ok([d.as_dict() for d in days])
