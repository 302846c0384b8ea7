#!/usr/bin/env python3
"""
Script to run the Creator/Brand Search API.

Usage:
    python run_api.py [--host HOST] [--port PORT] [--reload]

Examples:
    python run_api.py
    python run_api.py --host 0.0.0.0 --port 8080
    python run_api.py --reload  # For development
"""

import argparse
import logging

import uvicorn

from config import config


# Configure logging to filter out health check requests
class HealthCheckFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.getMessage().find("/health") == -1


def setup_logging():
    """Setup logging configuration to filter health checks."""
    access_logger = logging.getLogger("uvicorn.access")
    access_logger.addFilter(HealthCheckFilter())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run Creator/Brand Search API")
    parser.add_argument("--host", default=config.API_HOST, help=f"Host to bind (default: {config.API_HOST})")
    parser.add_argument("--port", type=int, default=config.API_PORT, help=f"Port to bind (default: {config.API_PORT})")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")
    parser.add_argument("--workers", type=int, default=config.API_WORKERS, help=f"Number of workers (default: {config.API_WORKERS})")
    return parser


def main():
    args = build_parser().parse_args()

    setup_logging()

    print(f"🚀 Starting Search API...")
    print(f"📍 Host: {args.host}")
    print(f"🔌 Port: {args.port}")
    print(f"🔄 Reload: {'Enabled' if args.reload else 'Disabled'}")
    print(f"👥 Workers: {args.workers}")
    print(f"📖 Documentation: http://{args.host}:{args.port}/docs")
    print(f"🔍 Health check: http://{args.host}:{args.port}/health")
    print("-" * 50)

    config.print_config()
    print("-" * 50)

    uvicorn.run(
        "app.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=args.workers if not args.reload else 1,
        access_log=True
    )


if __name__ == "__main__":
    main()
