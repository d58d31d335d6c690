"""
Application entry point.
Run this file to start the file manager on the Flask development server.
"""
import os

from app import create_app

app = create_app()

if __name__ == '__main__':
    app.run(
        host=os.getenv('HOST', '127.0.0.1'),
        port=int(os.getenv('PORT', '5000')),
        debug=app.config['DEBUG']
    )
