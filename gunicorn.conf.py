"""
Gunicorn configuration.
"""
import os

# Bind to the platform's PORT or default
bind = f"0.0.0.0:{os.getenv('PORT', '5000')}"

# Worker configuration
workers = int(os.getenv('GUNICORN_WORKERS', '2'))
worker_class = 'sync'
timeout = 120  # CSV imports and reports can run long
keepalive = 5

# Logging
accesslog = '-'  # stdout
errorlog = '-'   # stderr
loglevel = os.getenv('LOG_LEVEL', 'info').lower()
capture_output = True

# Process naming
proc_name = 'loyalty'

preload_app = True
graceful_timeout = 30


def on_starting(server):
    server.log.info('Starting loyalty server...')


def on_exit(server):
    server.log.info('Loyalty server shutting down...')
