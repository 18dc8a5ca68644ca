import logging
import os

from linkaudit.container import Container


def configure_logging() -> None:
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(container: Container | None = None):
    """Run a single link audit. Takes no arguments; everything comes from the environment."""
    configure_logging()
    container = container or Container()
    runner = container.link_audit_runner()
    return runner.run()


if __name__ == '__main__':
    main()
