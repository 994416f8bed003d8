"""Application entry point for FinPilot backend server."""

from finpilot.app import App
from finpilot.config import Config
from finpilot.logging import setup_logging
from finpilot.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
