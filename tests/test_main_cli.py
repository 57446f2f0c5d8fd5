from pathlib import Path

import main
from main import _parse_args
from chirpy.database import Database
from chirpy.security import verify_password


def test_default_command_invokes_serve() -> None:
    args = _parse_args([])
    assert args.command == "serve"


def test_default_command_accepts_options_without_subcommand() -> None:
    args = _parse_args(["--host", "127.0.0.1", "--port", "9090"])
    assert args.command == "serve"
    assert args.host == "127.0.0.1"
    assert args.port == 9090


def test_serve_defaults_to_port_8080() -> None:
    args = _parse_args(["serve"])
    assert args.port == 8080


def test_create_user_subcommand_parses_email() -> None:
    args = _parse_args(["create-user", "a@b.com"])
    assert args.command == "create-user"
    assert args.email == "a@b.com"


def test_create_user_stores_hashed_password(tmp_path: Path, monkeypatch) -> None:
    database = Database(tmp_path / "cli.sqlite3")
    database.initialize()
    monkeypatch.setattr(main, "getpass", lambda prompt="": "pw")

    assert main._create_user(database, " cli@example.com ") == 0

    user = database.get_user_by_email("cli@example.com")
    assert user is not None
    assert verify_password("pw", user.hashed_password)


def test_create_user_aborts_on_mismatched_passwords(tmp_path: Path, monkeypatch) -> None:
    database = Database(tmp_path / "cli.sqlite3")
    database.initialize()
    answers = iter(["one", "two"] * 3)
    monkeypatch.setattr(main, "getpass", lambda prompt="": next(answers))

    assert main._create_user(database, "cli@example.com") == 1
    assert database.list_users() == []


def test_init_db_creates_database(tmp_path: Path, monkeypatch) -> None:
    db_file = tmp_path / "init.sqlite3"
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DB_URL", str(db_file))

    assert main.main(["init-db"]) == 0
    assert db_file.exists()
