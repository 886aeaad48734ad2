import logging
import sys

from PySide6.QtWidgets import QApplication

from formfield.config import Settings
from formfield.ui.auth_window import AuthWindow


def main() -> int:
    settings = Settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication(sys.argv)
    win = AuthWindow(settings=settings)
    win.resize(560, 820)
    win.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
