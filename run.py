"""
Development server for the plot availability API

    FLASK_ENV=development python run.py
"""

import os
from app import create_app

app = create_app(os.getenv('FLASK_ENV', 'development'))

if __name__ == '__main__':
    host = os.getenv('FLASK_HOST', '127.0.0.1')
    port = int(os.getenv('FLASK_PORT', 5000))
    app.logger.info(f'Serving plot availability on {host}:{port}')
    app.run(debug=app.config['DEBUG'], host=host, port=port)
