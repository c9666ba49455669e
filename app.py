#!/usr/bin/env python3
"""
Run script for the gym back office API
"""

import argparse
import os
import sys

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from gym_backoffice import create_app
from gym_backoffice.build import build_database
from gym_backoffice.logger import get_logger

logger = get_logger("gym_backoffice.run")


def parse_arguments():
    parser = argparse.ArgumentParser(description='Gym Back Office API')
    parser.add_argument('--build-only', action='store_true',
                        help='Create tables and insert critical data, then exit without starting the server')
    return parser.parse_args()


if __name__ == '__main__':
    args = parse_arguments()

    app = create_app()

    # Critical data is ALWAYS checked and inserted
    build_database(app)

    if args.build_only:
        logger.info("Build completed. Exiting without starting web server.")
        sys.exit(0)

    # FLASK_DEBUG: Enable/disable debug mode (default: False for security)
    debug_mode = os.environ.get('FLASK_DEBUG', 'False').lower() in ('true', '1', 'yes', 'on')

    # USE_RELOADER: Enable/disable auto-reloader (default: False in production)
    use_reloader = os.environ.get('USE_RELOADER', 'False').lower() in ('true', '1', 'yes', 'on')

    host = os.environ.get('FLASK_HOST', '127.0.0.1')
    port = int(os.environ.get('FLASK_PORT', '5000'))

    if debug_mode:
        logger.warning("DEBUG MODE ENABLED - Do not use in production!")

    logger.info(f"Starting server on {host}:{port} (debug={debug_mode}, reloader={use_reloader})")
    app.run(debug=debug_mode, host=host, port=port, use_reloader=use_reloader)
