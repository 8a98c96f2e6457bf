"""Entry point: ``python -m intro_curator``."""

import logging
import sys

from intro_curator.errors import ConfigurationError


def main() -> None:
    try:
        from intro_curator.clients import disc
    except ConfigurationError as exc:
        logging.getLogger("intro_curator").error("Refusing to start: %s", exc)
        sys.exit(1)

    disc.run()


if __name__ == "__main__":
    main()
