from __future__ import annotations

from flask import Flask, request

from ..common.responses import error_response, ok
from ..core.exceptions import DomainError
from ..container import Container
from .export import monthly_grid_xlsx, monthly_summary_csv

_XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def register(app: Flask, container: Container) -> None:
    def _attachment(data: bytes, *, filename: str, mimetype: str):
        return app.response_class(
            data,
            mimetype=mimetype,
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/reports/monthly", methods=["GET"], endpoint="monthly_report")
    def monthly_report():
        try:
            rows = container.report_service.monthly_summary(request.args.get("month", ""))
        except DomainError as e:
            return error_response(e)
        return ok([r.as_dict() for r in rows])

    @app.route("/api/reports/monthly.csv", methods=["GET"], endpoint="monthly_report_csv")
    def monthly_report_csv():
        month = request.args.get("month", "")
        try:
            rows = container.report_service.monthly_summary(month)
        except DomainError as e:
            return error_response(e)
        return _attachment(monthly_summary_csv(rows), filename=f"attendance_{month}.csv", mimetype="text/csv")

    @app.route("/api/reports/grid", methods=["GET"], endpoint="grid_report")
    def grid_report():
        try:
            grid = container.report_service.monthly_grid(request.args.get("month", ""))
        except DomainError as e:
            return error_response(e)
        return ok(grid.as_dict())

    @app.route("/api/reports/grid.xlsx", methods=["GET"], endpoint="grid_report_xlsx")
    def grid_report_xlsx():
        month = request.args.get("month", "")
        try:
            grid = container.report_service.monthly_grid(month)
        except DomainError as e:
            return error_response(e)
        return _attachment(monthly_grid_xlsx(grid), filename=f"attendance_grid_{month}.xlsx", mimetype=_XLSX_MIMETYPE)

    @app.route("/api/reports/daily", methods=["GET"], endpoint="daily_report")
    def daily_report():
        try:
            rows = container.report_service.daily_report(request.args.get("date", ""))
        except DomainError as e:
            return error_response(e)
        return ok([r.as_dict() for r in rows])
