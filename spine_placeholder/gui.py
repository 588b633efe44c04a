#!/usr/bin/env python3
"""Spine placeholder generator - minimal PySide6 UI

Provides:
- Browse buttons for the Spine JSON and the images output folder
- Overwrite toggle and Spine JSON version override
- Log panel fed from a background thread while placeholders are written
- Persistent config stored in the platform AppConfigLocation as JSON
"""
import os
import sys

from .generator import GeneratorOptions, SpineInputError, run as run_generator
from .settings import load_config, save_config

# Offered in the version combo; an empty entry keeps the file's own version
DEFAULT_VERSIONS = ["", "4.3.39-beta", "4.2.43", "4.2", "4.1", "4.0", "3.8"]

# Import PySide6 with a friendly error if it's not installed
try:
    from PySide6.QtCore import QStandardPaths, QThread, Signal
    from PySide6.QtWidgets import (
        QApplication,
        QCheckBox,
        QComboBox,
        QFileDialog,
        QHBoxLayout,
        QLabel,
        QLineEdit,
        QMainWindow,
        QMessageBox,
        QPushButton,
        QTextEdit,
        QVBoxLayout,
        QWidget,
    )
except ModuleNotFoundError:
    print("PySide6 is not installed. Install with: pip install spine-placeholder[gui]")
    sys.exit(1)


class GeneratorThread(QThread):
    log_line = Signal(str)
    finished_with = Signal(object)

    def __init__(self, options, parent=None):
        super().__init__(parent)
        self.options = options

    def run(self):
        try:
            result = run_generator(self.options, log_callback=self.log_line.emit)
        except (SpineInputError, OSError) as e:
            self.log_line.emit(f"ERROR: {e}")
            result = None
        self.finished_with.emit(result)


class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("Spine Placeholder Generator")

        self.config_path = self._make_config_path()
        self.config = load_config(self.config_path)
        self.worker = None

        central = QWidget()
        layout = QVBoxLayout()

        # Spine JSON selection
        input_layout = QHBoxLayout()
        self.input_display = QLineEdit(self.config.get("input_json", ""))
        browse_input = QPushButton("Browse...")
        browse_input.clicked.connect(self.browse_input)
        input_layout.addWidget(QLabel("Spine JSON:"))
        input_layout.addWidget(self.input_display)
        input_layout.addWidget(browse_input)

        # Images output folder (empty = skeleton.images from the JSON)
        output_layout = QHBoxLayout()
        self.output_display = QLineEdit(self.config.get("output_folder", ""))
        self.output_display.setPlaceholderText("skeleton.images or ./images/")
        browse_output = QPushButton("Browse...")
        browse_output.clicked.connect(self.browse_output)
        output_layout.addWidget(QLabel("Images folder:"))
        output_layout.addWidget(self.output_display)
        output_layout.addWidget(browse_output)

        options_layout = QHBoxLayout()
        self.overwrite_cb = QCheckBox("Overwrite existing images")
        self.overwrite_cb.setChecked(bool(self.config.get("overwrite", False)))
        self.version_combo = QComboBox()
        self.version_combo.setEditable(True)
        self.version_combo.addItems(DEFAULT_VERSIONS)
        self.version_combo.setCurrentText(self.config.get("force_version", ""))
        self.version_combo.setToolTip('Select or type a Spine JSON version to write into skeleton.spine')
        options_layout.addWidget(self.overwrite_cb)
        options_layout.addWidget(QLabel("JSON Spine version:"))
        options_layout.addWidget(self.version_combo)

        self.generate_btn = QPushButton("Generate placeholders")
        self.generate_btn.clicked.connect(self.start_generation)

        self.info_panel = QTextEdit()
        self.info_panel.setReadOnly(True)

        layout.addLayout(input_layout)
        layout.addLayout(output_layout)
        layout.addLayout(options_layout)
        layout.addWidget(self.generate_btn)
        layout.addWidget(self.info_panel)
        central.setLayout(layout)
        self.setCentralWidget(central)

    def _make_config_path(self):
        loc = QStandardPaths.writableLocation(QStandardPaths.AppConfigLocation)
        if not loc:
            loc = os.path.join(os.path.expanduser("~"), ".spine_placeholder")
        return os.path.join(loc, "config.json")

    def _save_config(self):
        try:
            save_config(self.config_path, self.config)
        except OSError as e:
            QMessageBox.warning(self, "Save Error", f"Could not save config: {e}")

    def browse_input(self):
        start = os.path.dirname(self.input_display.text()) or os.path.expanduser("~")
        path, _ = QFileDialog.getOpenFileName(self, "Select Spine JSON", start, "Spine JSON (*.json)")
        if path:
            self.input_display.setText(path)

    def browse_output(self):
        start = self.output_display.text() or os.path.dirname(self.input_display.text()) or os.path.expanduser("~")
        folder = QFileDialog.getExistingDirectory(self, "Select images folder", start)
        if folder:
            self.output_display.setText(folder)

    def start_generation(self):
        input_path = self.input_display.text().strip()
        if not input_path:
            QMessageBox.warning(self, "No input", "Select a Spine JSON file first.")
            return

        self.config["input_json"] = input_path
        self.config["output_folder"] = self.output_display.text().strip()
        self.config["overwrite"] = self.overwrite_cb.isChecked()
        self.config["force_version"] = self.version_combo.currentText().strip()
        self._save_config()

        options = GeneratorOptions(
            input_path=input_path,
            out_dir=self.config["output_folder"] or None,
            overwrite=self.config["overwrite"],
            force_version=self.config["force_version"] or None,
        )
        self.info_panel.clear()
        self.generate_btn.setEnabled(False)
        self.worker = GeneratorThread(options, self)
        self.worker.log_line.connect(self.info_panel.append)
        self.worker.finished_with.connect(self.on_finished)
        self.worker.start()

    def on_finished(self, result):
        self.generate_btn.setEnabled(True)
        if result is None:
            QMessageBox.warning(self, "Generation failed", "See the log panel for details.")
            return
        msg = [
            f"Created: {result.created}",
            f"Skipped (exists): {result.skipped}",
        ]
        if result.failed:
            msg.append(f"Failed: {result.failed}")
        if result.created_files:
            msg.append("")
            msg.extend(os.path.basename(p) for p in result.created_files[:20])
            if len(result.created_files) > 20:
                msg.append(f"... and {len(result.created_files) - 20} more")
        QMessageBox.information(self, "Process complete", "\n".join(msg))


def main():
    app = QApplication(sys.argv)
    w = MainWindow()
    w.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
