"""
Gunicorn Configuration for EV Ledger
Production WSGI server settings

    gunicorn -c deployment/gunicorn_config.py "app:create_app('production')"
"""
import multiprocessing
import os

# Server Socket
bind = os.environ.get('GUNICORN_BIND', '127.0.0.1:8000')

# Worker Processes
workers = int(os.environ.get('GUNICORN_WORKERS', multiprocessing.cpu_count() * 2 + 1))
worker_class = 'sync'
timeout = 60

# Logging (application logs go to LOG_FILE, see config.py)
accesslog = os.environ.get('GUNICORN_ACCESS_LOG', '-')
errorlog = os.environ.get('GUNICORN_ERROR_LOG', '-')
loglevel = 'info'

# Process Naming
proc_name = 'ev-ledger'
