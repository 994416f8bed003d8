"""Uvicorn server runner."""

import copy

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from finpilot.app import App
from finpilot.config import Config
from finpilot.web.server import create_fastapi_app

ACCESS_LOG_FORMAT = '%(asctime)s finpilot.access %(client_addr)s "%(request_line)s" %(status_code)s'
DEFAULT_LOG_FORMAT = "%(asctime)s finpilot.server %(levelname)s %(message)s"


def build_log_config(debug: bool) -> dict:
    """Uvicorn logging config with FinPilot formats; the module-level default is left untouched."""
    log_config = copy.deepcopy(LOGGING_CONFIG)
    log_config["formatters"]["access"]["fmt"] = ACCESS_LOG_FORMAT
    log_config["formatters"]["default"]["fmt"] = DEFAULT_LOG_FORMAT
    log_config["loggers"]["uvicorn"]["level"] = "DEBUG" if debug else "INFO"
    return log_config


def run_server(app: App, config: Config) -> None:
    fastapi_app = create_fastapi_app(app, config)
    uvicorn.run(
        fastapi_app,
        host=config.host,
        port=config.port,
        log_config=build_log_config(config.debug),
        access_log=True,
    )
