from __future__ import annotations

from flask import Flask, request

from ..common.responses import error_response, ok
from ..core.exceptions import DomainError, ValidationError
from ..container import Container


def _upload_dict(upload) -> dict:
    return {
        "uploadId": upload.upload_id,
        "filename": upload.filename,
        "recordsInserted": upload.records_inserted,
        "recordsSkipped": upload.records_skipped,
        "recordsEmpty": upload.records_empty,
        "uploadedAt": upload.uploaded_at,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/uploads", methods=["POST"], endpoint="create_upload")
    def create_upload():
        file = request.files.get("file")
        try:
            if file is None or not file.filename:
                raise ValidationError("A file is required")
            # Read at most one byte past the ceiling so oversized files are rejected by size.
            data = file.stream.read(container.ingestion_service.max_upload_bytes + 1)
            result = container.ingestion_service.ingest_bytes(data, file.filename)
        except DomainError as e:
            return error_response(e)
        return ok(result.as_dict(), 201)

    @app.route("/api/uploads", methods=["GET"], endpoint="list_uploads")
    def list_uploads():
        return ok([_upload_dict(u) for u in container.upload_service.list_uploads()])

    @app.route("/api/uploads/<upload_id>", methods=["DELETE"], endpoint="delete_upload")
    def delete_upload(upload_id: str):
        try:
            removed = container.upload_service.delete_upload(upload_id)
        except DomainError as e:
            return error_response(e)
        return ok({"uploadId": upload_id, "punchesRemoved": removed})
