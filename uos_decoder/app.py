import logging
from typing import Any, Dict, List

from PyQt5.QtWidgets import (QApplication, QMainWindow, QTextEdit, QTreeWidget, QTreeWidgetItem,
                             QVBoxLayout, QHBoxLayout, QWidget, QPushButton, QLabel)
from PyQt5.QtCore import QThread, pyqtSignal

from uos_decoder.core.collector import FrameCollector
from uos_decoder.core.decoders import UOSDecoder
from uos_decoder.core.errors import UOSDecodeError
from uos_decoder.core.models import PartialAssembly
from uos_decoder.core.networks import get_networks

logger = logging.getLogger(__name__)


class UOSDecoderApp(QMainWindow):
    def __init__(self, networks=None):
        super().__init__()
        self.setWindowTitle("UOS Payload Decoder")
        self.setGeometry(100, 100, 1000, 800)

        self.decoder = UOSDecoder(networks if networks is not None else get_networks())
        self.collector = FrameCollector()
        self.decoder_thread = None

        self.init_ui()

    def init_ui(self):
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        layout = QVBoxLayout(central_widget)

        self.hex_edit = QTextEdit()
        self.hex_edit.setPlaceholderText("Paste the scanned QR hex data (e.g. 4...0ec11ec)")
        layout.addWidget(self.hex_edit)

        buttons = QHBoxLayout()
        self.decode_button = QPushButton("Decode")
        self.decode_button.clicked.connect(self.decode_data)
        buttons.addWidget(self.decode_button)

        self.reset_button = QPushButton("Reset frames")
        self.reset_button.clicked.connect(self.reset_frames)
        buttons.addWidget(self.reset_button)
        layout.addLayout(buttons)

        self.progress_label = QLabel("")
        layout.addWidget(self.progress_label)

        self.tree_widget = QTreeWidget()
        self.tree_widget.setHeaderLabels(["Name", "Value", "Type", "Offset", "Length"])
        layout.addWidget(self.tree_widget)

    def decode_data(self):
        hex_text = ''.join(self.hex_edit.toPlainText().split())

        if not hex_text:
            self.tree_widget.clear()
            self.statusBar().showMessage("No hex data provided.")
            return

        self.start_decoding(hex_text, None)

    def start_decoding(self, raw: str, reassembled: bytes):
        self.statusBar().showMessage("Decoding...")
        self.decode_button.setEnabled(False)

        # The previous thread may still be returning from run() after emitting its result
        if self.decoder_thread is not None:
            self.decoder_thread.wait()

        self.decoder_thread = DecoderThread(self.decoder, raw, reassembled)
        self.decoder_thread.decoding_complete.connect(self.handle_result)
        self.decoder_thread.error_occurred.connect(self.display_error)
        self.decoder_thread.finished.connect(self.thread_finished)
        self.decoder_thread.start()

    def thread_finished(self):
        # A late signal from a replaced thread must not re-enable decoding
        if self.decoder_thread is None or self.decoder_thread.isFinished():
            self.decode_button.setEnabled(True)

    def handle_result(self, result):
        if not isinstance(result, PartialAssembly):
            self.collector.reset()
            self.progress_label.setText("")
            self.display_decoded_data(self.decoder.describe(result))
            return

        try:
            is_new = self.collector.add(result)
        except UOSDecodeError as e:
            self.display_error(str(e))
            return

        self.display_decoded_data(self.decoder.describe(result))
        collected = self.collector.frame_count - len(self.collector.missing_frames())
        self.progress_label.setText(f"Frames collected: {collected}/{self.collector.frame_count}")
        if not is_new:
            self.statusBar().showMessage(f"Frame {result.current_frame} already scanned.", 5000)
        elif self.collector.is_complete():
            payload = self.collector.reassemble()
            self.collector.reset()
            self.start_decoding('', payload)
        else:
            self.statusBar().showMessage(
                f"Scan the next frame, missing {self.collector.missing_frames()}", 5000)

    def reset_frames(self):
        self.collector.reset()
        self.progress_label.setText("")
        self.statusBar().showMessage("Frames cleared.", 5000)

    def display_decoded_data(self, decoded_items: List[Dict[str, Any]]):
        self.tree_widget.clear()
        for item in decoded_items:
            self.tree_widget.addTopLevelItem(QTreeWidgetItem([
                item['name'], str(item['value']), item['type'],
                item.get('offset', ''), item.get('length', '')
            ]))
        self.statusBar().showMessage("Decoding complete.", 5000)

    def display_error(self, error_message: str):
        self.tree_widget.clear()
        self.tree_widget.addTopLevelItem(QTreeWidgetItem(['Error', error_message, 'Error', '', '']))
        self.statusBar().showMessage(f"Error: {error_message}", 5000)


class DecoderThread(QThread):
    decoding_complete = pyqtSignal(object)
    error_occurred = pyqtSignal(str)

    def __init__(self, decoder: UOSDecoder, raw: str, reassembled: bytes = None):
        super().__init__()
        self.decoder = decoder
        self.raw = raw
        self.reassembled = reassembled

    def run(self):
        try:
            if self.reassembled is not None:
                result = self.decoder.decode_bytes(self.reassembled, multipart_complete=True)
            else:
                result = self.decoder.decode_scan(self.raw)
            self.decoding_complete.emit(result)
        except UOSDecodeError as e:
            logger.warning("Decoding failed: %s", e)
            self.error_occurred.emit(f"Decoding failed: {e}")


if __name__ == "__main__":
    import sys
    app = QApplication(sys.argv)
    decoder_app = UOSDecoderApp()
    decoder_app.show()
    sys.exit(app.exec_())
