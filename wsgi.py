"""
WSGI entry point for the web process.

    web:    gunicorn wsgi:app
    worker: python worker.py

Imports are processed by the RQ worker, so both processes must point at the
same REDIS_URL and DATABASE_URL.
"""
from leadhub import create_app

app = create_app()

if __name__ == '__main__':
    import os
    app.run(host='0.0.0.0', port=int(os.getenv('PORT', 8080)))
