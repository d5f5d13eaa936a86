import logging
import os

from PySide6.QtCore import Qt, QObject, QThread, Signal
from PySide6.QtWidgets import (
    QMainWindow,
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QFileDialog,
    QListWidget,
    QListWidgetItem,
    QPlainTextEdit,
    QSplitter,
    QMessageBox,
    QProgressBar,
    QCheckBox
)

from addonpacker.config import (
    APP_NAME,
    APP_VERSION,
    DEFAULT_CONFIG_NAME,
    PackerConfig,
    load_config,
    save_config,
)
from addonpacker.core.packer import run_packer
from addonpacker.core.manifest import build_manifest_dict, write_manifest_json
from addonpacker.errors import PackerError


class LogBridge(QObject):
    message = Signal(str)


class QtLogHandler(logging.Handler):
    """Forwards log records to the log pane; safe to emit from the worker thread."""

    def __init__(self, bridge: LogBridge):
        super().__init__()
        self.bridge = bridge

    def emit(self, record):
        self.bridge.message.emit(self.format(record))


class PackWorker(QObject):
    progress = Signal(int, int, str, str, int)   # pack index, pack count, pack, addon, bytes so far
    finished = Signal(object, object)  # summaries, error (None on success)

    def __init__(self, config: PackerConfig):
        super().__init__()
        self.config = config

    def run(self):
        def _progress(p):
            self.progress.emit(p.pack_index, p.pack_count, p.pack, p.addon, p.total_size)

        try:
            summaries = run_packer(self.config, progress_cb=_progress)
        except Exception as e:
            # thread boundary: anything uncaught here would leave the UI locked
            self.finished.emit([], e)
            return
        self.finished.emit(summaries, None)


class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle(f"{APP_NAME} (v{APP_VERSION})")
        self.setMinimumSize(960, 620)

        # State
        self._last_summaries = []
        self._last_config = None
        self._pack_thread = None
        self._pack_worker = None

        root = QWidget()
        self.setCentralWidget(root)

        main_layout = QVBoxLayout(root)
        main_layout.setContentsMargins(12, 12, 12, 12)
        main_layout.setSpacing(10)

        # -------------------------
        # Input / Output rows
        # -------------------------
        self.input_edit = QLineEdit()
        self.input_edit.setPlaceholderText("Select input folder (one subfolder per addon pack)...")

        btn_input = QPushButton("Browse...")
        btn_input.clicked.connect(self.pick_input_folder)

        input_row = QHBoxLayout()
        input_row.addWidget(QLabel("Input:"))
        input_row.addWidget(self.input_edit, 1)
        input_row.addWidget(btn_input)

        self.output_edit = QLineEdit()
        self.output_edit.setPlaceholderText("Select output folder (wiped on every run)...")

        btn_output = QPushButton("Browse...")
        btn_output.clicked.connect(self.pick_output_folder)

        output_row = QHBoxLayout()
        output_row.addWidget(QLabel("Output:"))
        output_row.addWidget(self.output_edit, 1)
        output_row.addWidget(btn_output)

        main_layout.addLayout(input_row)
        main_layout.addLayout(output_row)

        # -------------------------
        # Options
        # -------------------------
        opt_row = QHBoxLayout()

        self.ignored_edit = QLineEdit()
        self.ignored_edit.setPlaceholderText("Ignored packs (comma-separated)")

        self.cb_whitelist = QCheckBox("Model whitelist (models.json)")

        opt_row.addWidget(QLabel("Ignore:"))
        opt_row.addWidget(self.ignored_edit, 1)
        opt_row.addWidget(self.cb_whitelist)

        main_layout.addLayout(opt_row)

        # -------------------------
        # Buttons
        # -------------------------
        btn_row = QHBoxLayout()

        self.btn_load = QPushButton("Load Config")
        self.btn_load.clicked.connect(self.on_load_config_clicked)

        self.btn_save = QPushButton("Save Config")
        self.btn_save.clicked.connect(self.on_save_config_clicked)

        self.btn_run = QPushButton("Run")
        self.btn_run.clicked.connect(self.on_run_clicked)

        self.btn_export = QPushButton("Export Summary")
        self.btn_export.setEnabled(False)  # enabled after a successful run
        self.btn_export.clicked.connect(self.on_export_summary_clicked)

        btn_row.addWidget(self.btn_load)
        btn_row.addWidget(self.btn_save)
        btn_row.addStretch(1)
        btn_row.addWidget(self.btn_run)
        btn_row.addWidget(self.btn_export)

        main_layout.addLayout(btn_row)

        # -------------------------
        # Progress
        # -------------------------
        prog_row = QHBoxLayout()

        self.progress = QProgressBar()
        self.progress.setRange(0, 100)
        self.progress.setValue(0)

        self.status_label = QLabel("")

        prog_row.addWidget(QLabel("Progress:"))
        prog_row.addWidget(self.progress, 1)
        prog_row.addWidget(self.status_label)

        main_layout.addLayout(prog_row)

        # -------------------------
        # Results + Logs
        # -------------------------
        splitter = QSplitter(Qt.Horizontal)

        results_panel = QWidget()
        results_layout = QVBoxLayout(results_panel)
        results_layout.setContentsMargins(0, 0, 0, 0)

        results_layout.addWidget(QLabel("Results"))
        self.results_list = QListWidget()
        results_layout.addWidget(self.results_list, 1)

        logs_panel = QWidget()
        logs_layout = QVBoxLayout(logs_panel)
        logs_layout.setContentsMargins(0, 0, 0, 0)

        logs_layout.addWidget(QLabel("Log"))
        self.log_box = QPlainTextEdit()
        self.log_box.setReadOnly(True)
        self.log_box.setPlaceholderText("Logs will appear here...")
        logs_layout.addWidget(self.log_box, 1)

        splitter.addWidget(results_panel)
        splitter.addWidget(logs_panel)
        splitter.setSizes([520, 440])

        main_layout.addWidget(splitter, 1)

        # Route core logging into the log pane
        self._log_bridge = LogBridge()
        self._log_bridge.message.connect(self.log)
        self._log_handler = QtLogHandler(self._log_bridge)
        self._log_handler.setFormatter(logging.Formatter("%(message)s"))
        self._log_handler.setLevel(logging.INFO)
        logging.getLogger("addonpacker").addHandler(self._log_handler)
        logging.getLogger("addonpacker").setLevel(logging.INFO)

        self.log("Ready. Choose folders, then Run.")

        # Stable IDs for UI tests
        self.input_edit.setObjectName("input_edit")
        self.output_edit.setObjectName("output_edit")
        self.ignored_edit.setObjectName("ignored_edit")
        self.cb_whitelist.setObjectName("cb_whitelist")
        self.btn_run.setObjectName("btn_run")
        self.btn_export.setObjectName("btn_export")
        self.results_list.setObjectName("results_list")
        self.log_box.setObjectName("log_box")
        self.progress.setObjectName("progress")

    def closeEvent(self, event):
        logging.getLogger("addonpacker").removeHandler(self._log_handler)
        super().closeEvent(event)

    # -------------------------
    # UI Helpers
    # -------------------------
    def log(self, msg: str):
        self.log_box.appendPlainText(msg)

    def add_result(self, level: str, message: str):
        text = f"[{level}] {message}"
        item = QListWidgetItem(text)

        lvl = level.upper().strip()
        if lvl == "ERROR":
            item.setForeground(Qt.red)
        elif lvl == "WARNING":
            item.setForeground(Qt.darkYellow)
        else:
            item.setForeground(Qt.darkGreen)

        self.results_list.addItem(item)

    def pick_input_folder(self):
        folder = QFileDialog.getExistingDirectory(self, "Select Input Folder")
        if folder:
            self.input_edit.setText(os.path.normpath(folder))
            self.log(f"Input folder set: {folder}")

    def pick_output_folder(self):
        folder = QFileDialog.getExistingDirectory(self, "Select Output Folder")
        if folder:
            self.output_edit.setText(os.path.normpath(folder))
            self.log(f"Output folder set: {folder}")

    def _read_config_from_editor(self):
        input_path = self.input_edit.text().strip()
        output_path = self.output_edit.text().strip()

        if not input_path or not os.path.isdir(input_path):
            QMessageBox.warning(self, "Missing Input", "Please choose a valid input folder.")
            return None

        if not output_path:
            QMessageBox.warning(self, "Missing Output", "Please choose an output folder.")
            return None

        ignored = {x.strip() for x in self.ignored_edit.text().split(",") if x.strip()}

        return PackerConfig(
            input_root=input_path,
            output_root=output_path,
            ignored_packs=ignored,
            model_whitelist=self.cb_whitelist.isChecked(),
        )

    def _apply_config_to_editor(self, config: PackerConfig):
        self.input_edit.setText(config.input_root)
        self.output_edit.setText(config.output_root)
        self.ignored_edit.setText(", ".join(sorted(config.ignored_packs)))
        self.cb_whitelist.setChecked(bool(config.model_whitelist))

    # -------------------------
    # Config
    # -------------------------
    def on_load_config_clicked(self):
        path, _ = QFileDialog.getOpenFileName(self, "Load Config", DEFAULT_CONFIG_NAME, "JSON (*.json)")
        if not path:
            return
        try:
            config = load_config(path)
        except PackerError as e:
            QMessageBox.critical(self, "Load Failed", str(e))
            return
        self._apply_config_to_editor(config)
        self.add_result("INFO", f"Config loaded: {path}")

    def on_save_config_clicked(self):
        config = self._read_config_from_editor()
        if config is None:
            return
        path, _ = QFileDialog.getSaveFileName(self, "Save Config", DEFAULT_CONFIG_NAME, "JSON (*.json)")
        if not path:
            return
        try:
            written = save_config(path, config)
        except OSError as e:
            QMessageBox.critical(self, "Save Failed", str(e))
            return
        self.add_result("INFO", f"Config saved: {written}")

    # -------------------------
    # Run
    # -------------------------
    def on_run_clicked(self):
        config = self._read_config_from_editor()
        if config is None:
            return

        self.results_list.clear()
        self._last_summaries = []
        self._last_config = config
        self.progress.setValue(0)

        self.btn_run.setEnabled(False)
        self.btn_load.setEnabled(False)
        self.btn_export.setEnabled(False)

        self.log("---- RUN START ----")
        self.log(f"Input:     {config.input_root}")
        self.log(f"Output:    {config.output_root}")
        self.log(f"Whitelist: {'on' if config.model_whitelist else 'off'}")

        self._pack_thread = QThread()
        self._pack_worker = PackWorker(config)
        self._pack_worker.moveToThread(self._pack_thread)

        self._pack_thread.started.connect(self._pack_worker.run)
        self._pack_worker.progress.connect(self._on_pack_progress)
        self._pack_worker.finished.connect(self._on_pack_finished)

        self._pack_worker.finished.connect(self._pack_thread.quit)
        self._pack_worker.finished.connect(self._pack_worker.deleteLater)
        self._pack_thread.finished.connect(self._pack_thread.deleteLater)

        self._pack_thread.start()

    def _on_pack_progress(self, pack_index: int, pack_count: int, pack: str, addon: str, total_size: int):
        done = pack_index if not addon else pack_index - 1
        self.progress.setValue(int((done / max(pack_count, 1)) * 100))
        mb = total_size / (1024 * 1024)
        self.status_label.setText(f"{pack} / {addon} ({mb:.2f} MB)" if addon else f"{pack} ({mb:.2f} MB)")

    def _on_pack_finished(self, summaries, error):
        self.btn_run.setEnabled(True)
        self.btn_load.setEnabled(True)

        if error is not None:
            self.add_result("ERROR", f"Run aborted: {error}")
            self.log("---- RUN ABORTED ----")
            return

        self._last_summaries = summaries or []
        for s in self._last_summaries:
            mb = s.total_size / (1024 * 1024)
            mode = "whitelist" if s.whitelist else "full"
            self.add_result(
                "INFO",
                f"{s.pack} ({mode}): {len(s.addons)} addon(s), copied={s.copied}, dropped={s.dropped}, {mb:.2f} MB",
            )

        self.progress.setValue(100)
        self.btn_export.setEnabled(True)
        self.add_result("INFO", f"Run done: {len(self._last_summaries)} pack(s).")
        self.log("---- RUN DONE ----")

    def on_export_summary_clicked(self):
        if self._last_config is None or not self._last_summaries:
            QMessageBox.information(self, "Nothing to Export", "Run the packer first.")
            return

        path, _ = QFileDialog.getSaveFileName(self, "Export Summary", "summary.json", "JSON (*.json)")
        if not path:
            return

        manifest = build_manifest_dict(APP_NAME, APP_VERSION, self._last_config, self._last_summaries)
        try:
            written = write_manifest_json(manifest, path)
        except OSError as e:
            self.add_result("ERROR", f"EXPORT_FAILED: {e}")
            QMessageBox.critical(self, "Export Failed", f"Export failed:\n{e}")
            return

        self.add_result("INFO", f"Summary written: {written}")
        self.log(f"Summary exported: {written}")
