from pathlib import Path
from unittest import mock

import pytest

from taskplanner.server import create_app, main, prepare
from taskplanner.storage import Task


@pytest.fixture
def web_dir(tmp_path):
    root = tmp_path / "web"
    (root / "js").mkdir(parents=True)
    (root / "index.html").write_text("<html><body>planner</body></html>", encoding="utf-8")
    (root / "style.css").write_text("body { margin: 0; }\n", encoding="utf-8")
    (root / "js" / "app.js").write_bytes(b"console.log('ready');\n" * 50)
    return root


def _walk(root):
    return [path for path in sorted(root.rglob("*")) if path.is_file()]


def test_prepare_creates_database(tmp_path):
    db_file = tmp_path / "scheduler.db"
    store = prepare(str(db_file))
    assert db_file.exists()
    assert store.get_tasks(10) == []


def test_prepare_keeps_existing_database(tmp_path):
    db_file = str(tmp_path / "scheduler.db")
    store = prepare(db_file)
    new_id = store.add_task(Task(date="20240101", title="keep"))
    again = prepare(db_file)
    assert again.get_task(str(new_id)).title == "keep"


def test_app_serves_web_files(tmp_path, web_dir):
    app = create_app(str(tmp_path / "scheduler.db"), str(web_dir))
    client = app.test_client()
    files = _walk(web_dir)
    assert len(files) == 3
    for path in files:
        url = "/" + path.relative_to(web_dir).as_posix()
        resp = client.get(url)
        assert resp.status_code == 200
        assert len(resp.data) == len(path.read_bytes()), url


def test_app_serves_index(tmp_path, web_dir):
    app = create_app(str(tmp_path / "scheduler.db"), str(web_dir))
    resp = app.test_client().get("/")
    assert resp.status_code == 200
    assert b"planner" in resp.data


def test_app_missing_file(tmp_path, web_dir):
    app = create_app(str(tmp_path / "scheduler.db"), str(web_dir))
    assert app.test_client().get("/nothing.txt").status_code == 404


def test_app_has_api(tmp_path, web_dir):
    app = create_app(str(tmp_path / "scheduler.db"), str(web_dir))
    resp = app.test_client().get("/api/tasks")
    assert resp.get_json() == {"tasks": []}


def test_main_default_port(tmp_path, web_dir, monkeypatch, capsys):
    monkeypatch.delenv("TODO_PORT", raising=False)
    db_file = str(tmp_path / "scheduler.db")
    with mock.patch("flask.Flask.run") as fake_run:
        code = main(["--db", db_file, "--web", str(web_dir)])
    assert code == 0
    fake_run.assert_called_once_with(host="0.0.0.0", port=7540)
    assert "setting to default" in capsys.readouterr().out
    assert Path(db_file).exists()


def test_main_port_from_environment(tmp_path, web_dir, monkeypatch):
    monkeypatch.setenv("TODO_PORT", "127.0.0.1:8081")
    with mock.patch("flask.Flask.run") as fake_run:
        code = main(["--db", str(tmp_path / "scheduler.db"), "--web", str(web_dir)])
    assert code == 0
    fake_run.assert_called_once_with(host="127.0.0.1", port=8081)


def test_main_bad_address(tmp_path, web_dir, monkeypatch, capsys):
    monkeypatch.setenv("TODO_PORT", "7540")
    code = main(["--db", str(tmp_path / "scheduler.db"), "--web", str(web_dir)])
    assert code == 1
    assert "invalid listen address" in capsys.readouterr().out