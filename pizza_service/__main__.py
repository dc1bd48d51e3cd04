"""
Run the service with uvicorn.

    python -m pizza_service [port]
"""

import sys

import uvicorn

from pizza_service.core.config import get_settings


def main() -> None:
    settings = get_settings()
    port = int(sys.argv[1]) if len(sys.argv) > 1 else settings.api_port
    uvicorn.run("pizza_service.main:app", host=settings.api_host, port=port)


if __name__ == "__main__":
    main()
