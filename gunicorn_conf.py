import multiprocessing
import os

# Gunicorn configuration file
# Run with: gunicorn -c gunicorn_conf.py agency_dashboard.main:app

bind = os.getenv("BIND", "0.0.0.0:5000")

# Standard formula: (2 x num_cores) + 1
workers = int(os.getenv("WEB_CONCURRENCY", multiprocessing.cpu_count() * 2 + 1))
worker_class = "uvicorn.workers.UvicornWorker"

# Storage calls are the only suspension points; keep the timeout generous
timeout = 60
keepalive = 5

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

name = "agency_dashboard_api"
reload = False


def on_starting(server):
    # Create tables and the admin account once in the master, before workers fork
    import asyncio
    from agency_dashboard.database import engine
    from agency_dashboard.main import prepare_database

    async def bootstrap():
        await prepare_database()
        await engine.dispose()

    asyncio.run(bootstrap())
