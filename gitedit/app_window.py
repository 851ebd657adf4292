if __name__ == "__main__":
    import sys
    print("Please run the main app: git_commit_edit.py")
    sys.exit(1)

import logging

from PySide6.QtWidgets import (
    QAbstractItemView, QHBoxLayout, QListWidget, QListWidgetItem, QMainWindow,
    QMenu, QMessageBox, QPushButton, QVBoxLayout, QWidget
)
from PySide6.QtGui import QAction, QFont
from PySide6.QtCore import Qt

from gitedit.actions import ActionContext, default_actions
from gitedit.dialogs import MessageBoxPresenter, ask_new_message, ask_rebase_todo
from gitedit.errors import GitCommandError
from gitedit.git_helpers import get_commit_ref, get_current_branch, get_git_history, get_head_sha
from gitedit.model import Selection

logger = logging.getLogger(__name__)

SHA_ROLE = Qt.UserRole


class CommitEditingWindow(QMainWindow):
    def __init__(self, repo_path, gate, repositories, branches, settings):
        super().__init__()
        self.repo_path = repo_path
        self.gate = gate
        self.repositories = repositories
        self.branches = branches

        # Persistence
        self.settings = settings
        self.current_font_size = self.settings.value("font_size", 10, type=int)

        self.presenter = MessageBoxPresenter(self)
        self.commit_actions = default_actions(
            gate,
            ask_new_message(self, self.current_font_size),
            ask_rebase_todo(self, self.current_font_size),
        )

        self.resize(1000, 800)
        self.setup_ui()
        self.load_history()

    def update_window_title(self):
        """Updates window title with branch, HEAD, and path."""
        try:
            branch = get_current_branch(self.repo_path)
            head_sha = get_head_sha(self.repo_path)
        except GitCommandError:
            branch, head_sha = "Unknown", "Unknown"
        self.setWindowTitle(f"git_commit_edit.py : branch={branch}, HEAD={head_sha}, path={self.repo_path}")

    def setup_ui(self):
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        layout = QVBoxLayout(central_widget)

        self.list_widget = QListWidget(self)
        self.list_widget.setSelectionMode(QAbstractItemView.ExtendedSelection)
        self.list_widget.setContextMenuPolicy(Qt.CustomContextMenu)
        self.list_widget.customContextMenuRequested.connect(self.show_context_menu)
        self.list_widget.itemSelectionChanged.connect(self.prefetch_selection)
        self.update_font()
        layout.addWidget(self.list_widget)

        # Bottom Control Bar
        controls_layout = QHBoxLayout()

        self.zoom_in_btn = QPushButton("Zoom In (+)")
        self.zoom_out_btn = QPushButton("Zoom Out (-)")
        self.refresh_btn = QPushButton("Refresh")
        self.exit_btn = QPushButton("Exit")

        for btn in [self.zoom_in_btn, self.zoom_out_btn, self.refresh_btn, self.exit_btn]:
            btn.setMinimumHeight(40)
            btn.setMinimumWidth(120)

        self.zoom_in_btn.clicked.connect(self.handle_zoom_in)
        self.zoom_out_btn.clicked.connect(self.handle_zoom_out)
        self.refresh_btn.clicked.connect(self.handle_refresh)
        self.exit_btn.clicked.connect(self.close)

        controls_layout.addWidget(self.zoom_in_btn)
        controls_layout.addWidget(self.zoom_out_btn)
        controls_layout.addStretch()
        controls_layout.addWidget(self.refresh_btn)
        controls_layout.addWidget(self.exit_btn)
        layout.addLayout(controls_layout)

    def handle_zoom_in(self):
        self.current_font_size += 1
        self.update_font()

    def handle_zoom_out(self):
        if self.current_font_size > 6:
            self.current_font_size -= 1
            self.update_font()

    def update_font(self):
        self.list_widget.setFont(QFont("Monospace", self.current_font_size))
        self.settings.setValue("font_size", self.current_font_size)

    def handle_refresh(self):
        # fetch/push may have happened outside the tool
        self.branches.invalidate(self.repo_path)
        self.load_history()

    def selected_commits(self):
        commits = []
        for item in self.list_widget.selectedItems():
            commits.append(get_commit_ref(self.repo_path, item.data(SHA_ROLE)))
        return Selection(commits)

    def prefetch_selection(self):
        items = self.list_widget.selectedItems()
        if len(items) == 1:
            self.branches.request(self.repo_path, items[0].data(SHA_ROLE))

    def show_context_menu(self, position):
        item = self.list_widget.itemAt(position)
        if not item:
            return
        if not item.isSelected():
            self.list_widget.setCurrentItem(item)

        try:
            context = ActionContext(self.selected_commits(), self.repositories, self.branches, self.presenter)
        except GitCommandError as e:
            QMessageBox.critical(self, "Error", str(e))
            return

        menu = self.build_menu(context)
        menu.exec(self.list_widget.mapToGlobal(position))

    def build_menu(self, context):
        """Builds the context menu, presenting each action as the gate decides."""
        menu = QMenu(self)
        menu.setToolTipsVisible(True)
        for action in self.commit_actions:
            presentation = action.update(context)
            q_action = QAction(action.text, self)
            q_action.setVisible(presentation.visible)
            q_action.setEnabled(presentation.enabled)
            if presentation.reason:
                q_action.setToolTip(presentation.reason)
            q_action.triggered.connect(lambda checked=False, a=action: self.run_action(a, context))
            menu.addAction(q_action)
        return menu

    def run_action(self, action, context):
        logger.info("Running %s", action.text)
        if action.perform(context):
            QMessageBox.information(self, "Success", "History rewritten successfully.")
        self.load_history()

    def load_history(self):
        """Fetches git history and populates the list widget."""
        self.update_window_title()
        self.list_widget.clear()
        try:
            for sha, subject in get_git_history(self.repo_path):
                item = QListWidgetItem(f"{sha[:8]} {subject}")
                item.setData(SHA_ROLE, sha)
                self.list_widget.addItem(item)
        except GitCommandError as e:
            QMessageBox.critical(self, "Error", str(e))

    def select_commit(self, commit_sha):
        """Selects the listed commit whose SHA starts with commit_sha."""
        for i in range(self.list_widget.count()):
            item = self.list_widget.item(i)
            if item.data(SHA_ROLE).startswith(commit_sha):
                self.list_widget.setCurrentItem(item)
                self.list_widget.scrollToItem(item)
                return True
        return False
