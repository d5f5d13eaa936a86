import sys

from PySide6.QtWidgets import QApplication

from addonpacker.ui.main_window import MainWindow


def main():
    app = QApplication.instance() or QApplication(sys.argv)
    window = MainWindow()
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
