# Gunicorn configuration for Clinic-Slots
#   gunicorn -c gunicorn.conf.py
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "src"))

wsgi_app = "clinicslots.app:app"
bind = f"{os.environ.get('HOST', '0.0.0.0')}:{os.environ.get('PORT', 8000)}"

# Per-schedule booking locks live in process memory; a second worker
# could book the same last unit from another process.
workers = 1
worker_class = "uvicorn.workers.UvicornWorker"
timeout = 30
graceful_timeout = 30
keepalive = 5

accesslog = "-"
errorlog = "-"
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
proc_name = "clinic-slots"
