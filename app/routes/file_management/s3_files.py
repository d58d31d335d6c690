"""
S3 file browser endpoints.

Routes:
- GET /api/files - List files under the managed prefix
- DELETE /api/files/<path:s3_key> - Delete a file (requires {"confirm": true})
- POST /api/files/<path:s3_key>/rename - Rename a file (copy, then delete)
"""
from flask import Blueprint, request, jsonify, current_app
from app.services.s3_service import get_s3_service
from app.utils.formatters import format_timestamp, format_file_size
from app.utils.validators import ValidationError, validate_managed_key
from app.routes.file_management.shared import file_operation

bp = Blueprint('s3_files', __name__)


def _format_entry(entry) -> dict:
    formatted = entry.to_dict()
    formatted['size_display'] = format_file_size(entry.size)
    formatted['last_modified_display'] = format_timestamp(entry.last_modified)
    return formatted


def _json_body() -> dict:
    """Request body as a JSON object; an absent body counts as empty."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


@bp.route('/api/files', methods=['GET'])
@file_operation('List S3 files')
def list_files():
    """
    List the files stored under the managed prefix.

    Returns:
        {
            "files": [{...}],
            "total": 45,
            "prefix": "uploads/"
        }
    """
    s3_service = get_s3_service(current_app)
    entries = s3_service.list_objects()

    return jsonify({
        'files': [_format_entry(entry) for entry in entries],
        'total': len(entries),
        'prefix': s3_service.config.prefix
    }), 200


@bp.route('/api/files/<path:s3_key>', methods=['DELETE'])
@file_operation('Delete S3 file')
def delete_file(s3_key: str):
    """
    Delete a single file.

    Request body:
        {
            "confirm": true  # Must be true to proceed
        }

    Returns:
        {
            "message": "File deleted successfully",
            "s3_key": "..."
        }
    """
    data = _json_body()

    # Require explicit confirmation
    if data.get('confirm') is not True:
        raise ValidationError('Confirmation required. Set "confirm": true in request body')

    s3_service = get_s3_service(current_app)
    validate_managed_key(s3_key, s3_service.config.prefix)

    s3_service.delete(s3_key)

    return jsonify({
        'message': 'File deleted successfully',
        's3_key': s3_key
    }), 200


@bp.route('/api/files/<path:s3_key>/rename', methods=['POST'])
@file_operation('Rename S3 file')
def rename_file(s3_key: str):
    """
    Rename a file within the managed prefix.

    Request body:
        {
            "new_name": "kitty.png"
        }

    Returns:
        {
            "message": "File renamed successfully",
            "old_key": "uploads/169900_cat.png",
            "file": {...}
        }
    """
    data = _json_body()

    s3_service = get_s3_service(current_app)
    validate_managed_key(s3_key, s3_service.config.prefix)

    entry = s3_service.rename(s3_key, data.get('new_name'))

    return jsonify({
        'message': 'File renamed successfully',
        'old_key': s3_key,
        'file': _format_entry(entry)
    }), 200
