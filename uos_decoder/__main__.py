import logging
import sys

from PyQt5.QtWidgets import QApplication

from uos_decoder.app import UOSDecoderApp


def main():
    """Entry point for the application"""
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(name)s %(levelname)s %(message)s')
    qt_app = QApplication(sys.argv)
    decoder_app = UOSDecoderApp()
    decoder_app.show()
    sys.exit(qt_app.exec_())


if __name__ == "__main__":
    main()
