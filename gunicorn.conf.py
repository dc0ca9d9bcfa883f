# gunicorn.conf.py
# gunicorn -c gunicorn.conf.py quotebook.main:app
import os

bind = f"0.0.0.0:{os.getenv('PORT', '8000')}"
workers = int(os.getenv("WEB_CONCURRENCY", "2"))
threads = int(os.getenv("WEB_THREADS", "2"))
worker_class = "uvicorn.workers.UvicornWorker"
# each worker opens its own engine; numbering is serialized in the database
preload_app = False
timeout = int(os.getenv("WEB_TIMEOUT", "60"))
graceful_timeout = 30
keepalive = 5
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
