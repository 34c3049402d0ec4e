"""
Family News Site
Application Entry Point

This file serves as the entry point for the Flask application.
It uses the application factory pattern defined in the familynews package.
Startup failures (missing configuration, unreachable database) end the
process with a non-zero exit status.
"""

import logging
import sys

from familynews import create_app
from familynews.config import Config, ConfigurationError

logger = logging.getLogger('familynews')

try:
    app = create_app()
except ConfigurationError as e:
    logger.critical('Configuration error: %s', e)
    sys.exit(1)
except Exception:
    logger.critical('Could not start the application', exc_info=True)
    sys.exit(1)

if __name__ == '__main__':
    app.run(debug=not Config.PRODUCTION, host='0.0.0.0', port=Config.PORT)
