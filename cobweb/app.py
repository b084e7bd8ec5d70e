import logging
import sys

from PyQt5.QtWidgets import QApplication, QDesktopWidget

from .config import loadConfig
from .ui import CobwebPanel


class CobwebApp(CobwebPanel):

    def __init__(self, title="Cobweb Plot", argv=None):
        argv = sys.argv if argv is None else argv
        self.app = QApplication(argv)
        self.configFile = argv[1] if len(argv) > 1 else None
        config = loadConfig(self.configFile)
        logging.basicConfig(
            level=config["logLevel"],
            format="%(asctime)s %(levelname)s %(name)s: %(message)s"
        )
        super().__init__(config)
        self.setWindowTitle(title)

    def run(self):
        screen = QDesktopWidget().screenGeometry()
        self.show()
        x = ((screen.width() - self.width()) // 2) if screen.width() > self.width() else 0
        y = ((screen.height() - self.height()) // 2) if screen.height() > self.height() else 0
        self.move(x, y)
        return self.app.exec_()
