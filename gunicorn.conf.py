# gunicorn.conf.py
import os

wsgi_app = "shipquote.main:app"
bind = f"0.0.0.0:{os.getenv('PORT', '3000')}"
workers = int(os.getenv("WEB_CONCURRENCY", "2"))
threads = int(os.getenv("WEB_THREADS", "4"))
worker_class = "uvicorn.workers.UvicornWorker"
# rate grid + redis client built in the master: a bad grid stops the boot
preload_app = True
timeout = 30
graceful_timeout = 15
keepalive = 5
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
