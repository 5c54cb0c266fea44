"""Run the codeclass API with uvicorn.

Usage:
    python -m codeclass.run_server
"""
import logging

import uvicorn

from codeclass.core import config


def main() -> None:
    logging.basicConfig(
        level=config.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config.validate_runtime_config()
    uvicorn.run("codeclass.main:app", host=config.HOST, port=config.PORT, log_level=config.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
