"""
Main routes for page rendering.
"""
from flask import Blueprint, render_template, current_app

bp = Blueprint('main', __name__)


@bp.route('/')
def index():
    """File manager page. The file list is fetched by the page script."""
    return render_template(
        'index.html',
        bucket_name=current_app.config.get('S3_BUCKET_NAME'),
        prefix=current_app.config.get('S3_PREFIX'),
        max_upload_size_mb=current_app.config.get('MAX_UPLOAD_SIZE_MB')
    )
