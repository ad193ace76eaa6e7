import subprocess
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from clipboard_interface import read_clipboard, write_clipboard
from document_store import DocumentStore
from editor_session import EditorSession
from errors import ExternalIOFailure

CONFIG = {
    "CLIPBOARD_PASTE_COMMAND": ["paste-cmd"],
    "CLIPBOARD_COPY_COMMAND": ["copy-cmd"],
}


def test_read_clipboard_uses_configured_command():
    with patch("subprocess.run", return_value=SimpleNamespace(stdout="a,b\n1,2")) as run:
        assert read_clipboard(CONFIG) == "a,b\n1,2"

    assert run.call_args.args[0] == ["paste-cmd"]


def test_missing_clipboard_tool_is_external_io_failure():
    with patch("subprocess.run", side_effect=FileNotFoundError()):
        with pytest.raises(ExternalIOFailure) as info:
            read_clipboard(CONFIG)

    assert "paste-cmd" in str(info.value)


def test_failed_copy_is_external_io_failure():
    err = subprocess.CalledProcessError(1, ["copy-cmd"])
    with patch("subprocess.run", side_effect=err):
        with pytest.raises(ExternalIOFailure):
            write_clipboard("x", CONFIG)


def test_session_pastes_from_clipboard():
    session = EditorSession(config=CONFIG)
    with patch("subprocess.run", return_value=SimpleNamespace(stdout="a\tb\n1\t2\n")):
        assert session.paste_from_clipboard()

    assert session.document.headers == ["a", "b"]
    assert session.document.rows == [["1", "2"]]


def test_session_copies_rows_as_tsv():
    session = EditorSession(DocumentStore(["a", "b"], [["1", "x"], ["2", "y"]]), config=CONFIG)
    expected = session.document.to_frame().iloc[[1]].to_csv(sep="\t", index=False)

    with patch("subprocess.run") as run:
        assert session.copy_rows([1])

    assert run.call_args.kwargs["input"] == expected
    assert expected == "a\tb\n2\ty\n"


def test_session_reports_clipboard_failure():
    messages = []
    session = EditorSession(set_status_cb=lambda m, _=None: messages.append(m), config=CONFIG)
    with patch("subprocess.run", side_effect=FileNotFoundError()):
        assert not session.paste_from_clipboard()

    assert messages[-1] == "Clipboard command not found: paste-cmd"
