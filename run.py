"""
Partner loyalty platform entry point.
"""
import logging
import os
import sys

from loyalty import create_app

logger = logging.getLogger('loyalty.run')

config_name = os.getenv('FLASK_ENV', 'production')

try:
    app = create_app(config_name)
    logger.info('Config: %s, routes: %d, DATABASE_URL %s', config_name,
                len(list(app.url_map.iter_rules())), 'set' if os.getenv('DATABASE_URL') else 'NOT SET')
except RuntimeError:
    logger.exception('Fatal error during app creation')
    sys.exit(1)

if __name__ == '__main__':
    app.run(
        host='0.0.0.0',
        port=int(os.getenv('PORT', 5000)),
        debug=os.getenv('FLASK_ENV') == 'development'
    )
