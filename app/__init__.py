"""
Flask application factory.
"""
from flask import Flask
import logging


def create_app(config_name=None, s3_client=None):
    """
    Create and configure Flask application.

    Args:
        config_name: Configuration name ('development', 'production', 'testing')
        s3_client: boto3-compatible S3 client to use instead of building one per request

    Returns:
        Configured Flask application
    """
    app = Flask(__name__)

    # Load configuration
    from app.config import get_config
    config_class = get_config(config_name)
    app.config.from_object(config_class)

    # Configure logging
    logging.basicConfig(
        level=logging.INFO if not app.config['DEBUG'] else logging.DEBUG,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if s3_client is not None:
        app.extensions['s3_client'] = s3_client

    # Validate AWS configuration (warn if missing, don't fail)
    if not app.config['TESTING']:
        try:
            from app.config import Config
            Config.validate_aws_config()
            app.logger.info("AWS configuration validated")
        except ValueError as e:
            app.logger.warning(f"AWS configuration warning: {e}")
            app.logger.warning("File operations will fail until the bucket and credentials are configured")

    app.logger.info(
        f"Bucket: {app.config.get('S3_BUCKET_NAME')}, region: {app.config.get('AWS_REGION')}, "
        f"prefix: {app.config.get('S3_PREFIX')}"
    )

    # Register blueprints
    from app.routes import main, upload
    from app.routes.file_management import s3_files_bp

    app.register_blueprint(main.bp)
    app.register_blueprint(upload.bp)
    app.register_blueprint(s3_files_bp)

    # Error handlers
    @app.errorhandler(404)
    def not_found(error):
        return {'error': 'Not found'}, 404

    @app.errorhandler(413)
    def too_large(error):
        return {'error': f"File exceeds maximum allowed size ({app.config['MAX_UPLOAD_SIZE_MB']} MB)"}, 413

    @app.errorhandler(500)
    def internal_error(error):
        app.logger.error(f"Internal error: {error}")
        return {'error': 'Internal server error'}, 500

    # Health check endpoint
    @app.route('/health')
    def health_check():
        return {
            'status': 'healthy',
            'app': 'S3 File Manager',
            'version': '1.0.0'
        }, 200

    app.logger.info(f"Flask app created successfully in {app.config.get('FLASK_ENV', 'development')} mode")

    return app
