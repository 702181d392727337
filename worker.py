"""
RQ worker entry point — processes bulk lead imports.

Usage: python worker.py
"""
from rq import Worker

from leadhub.extensions import get_queue
from leadhub.logging_config import configure_logging

if __name__ == '__main__':
    configure_logging()
    queue = get_queue()
    Worker([queue], connection=queue.connection).work()
