"""
main.py

FlowFocus - Accessible Flowchart Viewer

PyQt6 application that shows a directed flowchart with:
- Curved, labelled arrows laid out on a grid around the viewport centre
- Keyboard traversal of nodes and their entering/exiting edge controls
- Focus highlights drawn exactly over the edge a control stands for

Usage:
    python main.py [--graph PATH] [--sample NAME] [--list-samples]

Dependencies:
    pip install PyQt6 platformdirs tomli-w

Environment:
    FLOWFOCUS_TRACE=1 (optional debug tracing to stderr)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import QApplication, QFileDialog, QGraphicsItem, QMainWindow, QMessageBox

from canvas import EdgeControlItem, FlowchartScene, FlowchartView, FlowNodeItem
from debug_trace import close_log, trace, trace_exception
from graphs import load_graph_file, load_sample, sample_names
from models import GraphSpec
from settings import SettingsManager, get_settings


class MainWindow(QMainWindow):
    """Main application window for FlowFocus.

    Args:
        settings_manager: The SettingsManager instance for application settings.
        graph: Graph shown at startup.
    """

    def __init__(self, settings_manager: SettingsManager, graph: GraphSpec):
        super().__init__()
        self.settings_manager = settings_manager

        self.scene = FlowchartScene()
        self.view = FlowchartView(self.scene)
        self.setCentralWidget(self.view)

        self.scene.focusItemChanged.connect(self._on_focus_changed)
        self._build_menus()
        self.load_graph(graph)

    def _build_menus(self) -> None:
        file_menu = self.menuBar().addMenu("&File")

        open_act = QAction("&Open Graph...", self)
        open_act.setShortcut(QKeySequence.StandardKey.Open)
        open_act.triggered.connect(self.open_graph)
        file_menu.addAction(open_act)

        samples_menu = file_menu.addMenu("&Samples")
        for name in sample_names():
            act = QAction(name, self)
            act.triggered.connect(lambda checked=False, n=name: self.load_graph(load_sample(n)))
            samples_menu.addAction(act)

        file_menu.addSeparator()
        quit_act = QAction("&Quit", self)
        quit_act.setShortcut(QKeySequence.StandardKey.Quit)
        quit_act.triggered.connect(self.close)
        file_menu.addAction(quit_act)

        view_menu = self.menuBar().addMenu("&View")
        relayout_act = QAction("&Relayout", self)
        relayout_act.setShortcut(QKeySequence("F5"))
        relayout_act.triggered.connect(self.view.schedule_layout)
        view_menu.addAction(relayout_act)

    def load_graph(self, graph: GraphSpec) -> None:
        trace(f"Loading graph {graph.name!r}", "MAIN")
        self.scene.clear_graph()
        self.scene.load_graph(graph)
        self.setWindowTitle(f"FlowFocus - {graph.name}")
        self.view.schedule_layout()
        nodes = self.scene.nodes()
        if nodes:
            self.scene.move_focus(nodes[0])

    def open_graph(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Open Graph", "", "Graph JSON (*.json);;All Files (*)")
        if not path:
            return
        try:
            graph = load_graph_file(path)
        except (OSError, ValueError) as e:
            QMessageBox.critical(self, "Open Graph failed", f"{path}\n\n{e}")
            return
        self.load_graph(graph)

    def _on_focus_changed(self, new_focus: Optional[QGraphicsItem], old_focus, reason) -> None:
        if isinstance(new_focus, EdgeControlItem):
            d = new_focus.descriptor()
            self.statusBar().showMessage(f"{d.display_name}: {d.help_text}")
        elif isinstance(new_focus, FlowNodeItem):
            headings = ", ".join(new_focus.list_headings())
            message = new_focus.accessible_name
            if new_focus.help_text:
                message += f" - {new_focus.help_text}"
            if headings:
                message += f" ({headings})"
            self.statusBar().showMessage(message)
        else:
            self.statusBar().clearMessage()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="flowfocus", description="Accessible flowchart viewer")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--graph", type=Path, help="Path to a graph JSON file")
    source.add_argument("--sample", help="Name of a bundled sample graph")
    parser.add_argument("--list-samples", action="store_true", help="List bundled sample graphs and exit")
    return parser.parse_args(argv)


def resolve_graph(args: argparse.Namespace, settings_manager: SettingsManager) -> GraphSpec:
    """Pick the graph named on the command line, or the configured default sample.

    Raises:
        FileNotFoundError: If ``--graph`` names a missing file.
        ValueError: If the graph data is invalid.
        KeyError: If the sample name is unknown.
    """
    if args.graph is not None:
        return load_graph_file(args.graph)
    return load_sample(args.sample or settings_manager.settings.default_sample)


def main(argv: Optional[List[str]] = None) -> int:
    """Application entry point."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = parse_args(argv)
    if args.list_samples:
        for name in sample_names():
            print(name)
        return 0

    trace("Loading settings", "MAIN")
    settings_manager = get_settings()
    settings_manager.ensure_file_complete()

    try:
        graph = resolve_graph(args, settings_manager)
    except (OSError, ValueError, KeyError) as e:
        print(f"flowfocus: {e}", file=sys.stderr)
        return 2

    trace("Application starting", "MAIN")
    app = QApplication(sys.argv[:1])

    def save_on_quit():
        trace("Saving settings on quit", "MAIN")
        settings_manager.save()
        close_log()

    app.aboutToQuit.connect(save_on_quit)

    trace("Creating MainWindow", "MAIN")
    w = MainWindow(settings_manager, graph)
    w.resize(1200, 900)
    w.show()
    w.view.setFocus(Qt.FocusReason.OtherFocusReason)
    trace("Entering event loop", "MAIN")
    return app.exec()


if __name__ == "__main__":
    # Set up global exception handler to catch crashes
    def excepthook(exc_type, exc_value, exc_tb):
        import traceback
        trace("UNCAUGHT EXCEPTION:", "CRASH")
        trace("".join(traceback.format_exception(exc_type, exc_value, exc_tb)), "CRASH")
        close_log()
        sys.__excepthook__(exc_type, exc_value, exc_tb)

    sys.excepthook = excepthook

    try:
        sys.exit(main())
    except Exception as e:
        trace(f"FATAL: {type(e).__name__}: {e}", "CRASH")
        trace_exception("Fatal exception")
        close_log()
        raise
