"""
Upload routes for file management.
"""
from flask import Blueprint, request, jsonify, current_app
from app.models import PendingUpload
from app.services.s3_service import get_s3_service
from app.utils.formatters import format_file_size, format_timestamp
from app.utils.validators import ValidationError
from app.routes.file_management.shared import file_operation

bp = Blueprint('upload', __name__, url_prefix='/api/upload')


@bp.route('/file', methods=['POST'])
@file_operation('Upload')
def upload_file_direct():
    """
    Upload a file through the server to '<prefix><epoch millis>_<filename>'.

    Expected form data:
        - file: File object
    """
    if 'file' not in request.files:
        raise ValidationError('No file provided')

    file = request.files['file']
    if file.filename == '':
        raise ValidationError('Empty filename')

    pending = PendingUpload.from_file_storage(file)

    s3_service = get_s3_service(current_app)
    entry = s3_service.upload(pending)

    current_app.logger.info(f"Upload complete: {entry.key} ({format_file_size(entry.size)})")

    file_info = entry.to_dict()
    file_info['size_display'] = format_file_size(entry.size)
    file_info['last_modified_display'] = format_timestamp(entry.last_modified)

    return jsonify({
        'message': 'Upload complete',
        'file': file_info
    }), 201
