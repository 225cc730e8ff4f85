import os
from blog_proxy.main import create_app
import argparse


# Create the Flask application at module level
# This is required for gunicorn to find the app object
app = create_app()

if __name__ == '__main__':
    parser = argparse.ArgumentParser(
        description='Run the blog proxy API')
    parser.add_argument('--port', type=int, default=int(os.environ.get('PORT', '8000')),
                        help='Port to run the application on')
    parser.add_argument('--host', default='0.0.0.0',
                        help='Interface to bind to')
    args = parser.parse_args()

    # Debug mode should be controlled by FLASK_ENV, not hardcoded
    debug_mode = os.environ.get('FLASK_ENV', 'development') == 'development'
    app.run(host=args.host, port=args.port, debug=debug_mode)
