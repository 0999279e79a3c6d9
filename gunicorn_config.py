# gunicorn_config.py
import multiprocessing
import os

# Listen address and port
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")

# Workers: (2 * CPU cores) + 1
workers = int(os.getenv("GUNICORN_WORKERS", multiprocessing.cpu_count() * 2 + 1))

worker_class = "sync"

worker_connections = 1000

# Logs go to stdout/stderr unless a directory is configured
_log_dir = os.getenv("GUNICORN_LOG_DIR")
accesslog = os.path.join(_log_dir, "gunicorn_access.log") if _log_dir else "-"
errorlog = os.path.join(_log_dir, "gunicorn_error.log") if _log_dir else "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

proc_name = "gunicorn_homer"

# Snapshot imports and backups can take a while
timeout = 120
