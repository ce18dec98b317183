"""Create the usertx schema in the configured database."""

from usertx.config import load_config
from usertx.core.config import AppSettings
from usertx.logging import configure_logging


def main() -> None:
    settings = AppSettings()
    configure_logging(settings.log_level)
    config = load_config(settings)
    print(f"Database initialized at {config.settings.database_url}.")


if __name__ == "__main__":
    main()
