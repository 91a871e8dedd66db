"""Gunicorn production configuration.

Run from backend/: gunicorn -c ../gunicorn.conf.py app.main:app
"""
import multiprocessing
import os

bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.environ.get("GUNICORN_WORKERS", multiprocessing.cpu_count() * 2 + 1))
worker_class = "uvicorn.workers.UvicornWorker"
worker_connections = 1000
# CSV imports commit row by row; large files need headroom
timeout = int(os.environ.get("GUNICORN_TIMEOUT", 300))
keepalive = 5
max_requests = 1000
max_requests_jitter = 100
preload_app = True
accesslog = "-"
errorlog = "-"
loglevel = os.environ.get("GUNICORN_LOG_LEVEL", "info")
