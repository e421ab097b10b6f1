"""Application entry point for the Doorman account server."""

from doorman.app import App
from doorman.config import Config
from doorman.logging import setup_logging
from doorman.web.runner import run_server


def main() -> None:
    # Missing required settings raise here, before anything starts
    config = Config()  # type: ignore[call-arg]
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
