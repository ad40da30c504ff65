from dairybill.cli.app import main_menu
from dairybill.db import initialize_db
from dairybill.logging import configure_logging, reconfigure


def main() -> None:
    configure_logging()
    initialize_db()
    reconfigure()
    main_menu()


if __name__ == "__main__":
    main()
