if __name__ == "__main__":
    import sys
    print("Please run the main app: git_commit_edit.py")
    sys.exit(1)

from PySide6.QtWidgets import (
    QDialog, QHBoxLayout, QLabel, QMessageBox, QPushButton, QTextEdit, QVBoxLayout
)
from PySide6.QtGui import QFont


class MessageBoxPresenter:
    """Shows gate denials and git failures as modal error boxes."""
    def __init__(self, parent=None):
        self.parent = parent

    def show_error(self, message, title):
        QMessageBox.critical(self.parent, title, message)


class _EditorDialog(QDialog):
    """Base dialog: a header label, a monospace editor and centered buttons."""
    def __init__(self, title, header, text, apply_text, font_size=10, parent=None):
        super().__init__(parent)
        self.setWindowTitle(title)
        self.setMinimumSize(600, 400)

        layout = QVBoxLayout(self)
        layout.addWidget(QLabel(header))

        self.editor = QTextEdit()
        self.editor.setFont(QFont("Courier New", font_size))
        self.editor.setPlainText(text)
        layout.addWidget(self.editor)

        btn_layout = QHBoxLayout()
        btn_layout.addStretch()

        self.apply_btn = QPushButton(apply_text)
        self.discard_btn = QPushButton("Cancel")
        for btn in [self.apply_btn, self.discard_btn]:
            btn.setMinimumWidth(120)
            btn.setMinimumHeight(40)

        self.apply_btn.clicked.connect(self.accept)
        self.discard_btn.clicked.connect(self.reject)

        btn_layout.addWidget(self.apply_btn)
        btn_layout.addWidget(self.discard_btn)
        btn_layout.addStretch()
        layout.addLayout(btn_layout)

    def get_text(self):
        return self.editor.toPlainText().strip()


class RewordDialog(_EditorDialog):
    """Dialog for editing commit message."""
    def __init__(self, sha, current_message, font_size=10, parent=None):
        super().__init__(f"Edit Commit Message: {sha}", f"Edit commit message for: <b>{sha}</b>",
                         current_message, "Apply", font_size, parent)


class RebaseTodoDialog(_EditorDialog):
    """Dialog for editing the rebase todo (pick / reword / squash / fixup / drop)."""
    def __init__(self, sha, todo_lines, font_size=10, parent=None):
        super().__init__(f"Interactive Rebase from {sha}",
                         "Edit the rebase plan, oldest commit first. Removing a line drops the commit.",
                         "\n".join(todo_lines), "Start Rebasing", font_size, parent)

    def get_todo(self):
        return self.get_text().splitlines()


def ask_new_message(parent, font_size=10):
    """Returns a message_provider for RewordCommitAction backed by RewordDialog."""
    def provider(commit, current_message):
        dialog = RewordDialog(commit.short_sha, current_message, font_size, parent)
        if dialog.exec() == QDialog.Accepted:
            return dialog.get_text()
        return None
    return provider


def ask_rebase_todo(parent, font_size=10):
    """Returns a todo_editor for InteractiveRebaseAction backed by RebaseTodoDialog."""
    def editor(commit, todo_lines):
        dialog = RebaseTodoDialog(commit.short_sha, todo_lines, font_size, parent)
        if dialog.exec() == QDialog.Accepted:
            return dialog.get_todo()
        return None
    return editor
