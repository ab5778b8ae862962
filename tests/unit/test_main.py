import pytest

from app.main import parse_args, run


@pytest.mark.unit
def test_cli_dry_run_succeeds(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)

    assert run(["--dry-run-startup"]) == 0


@pytest.mark.unit
def test_cli_flags_override_environment() -> None:
    args = parse_args(["--host", "127.0.0.1", "--port", "9001", "--reload"])

    assert (args.host, args.port, args.reload, args.dry_run_startup) == ("127.0.0.1", 9001, True, False)


@pytest.mark.unit
def test_cli_rejects_non_integer_port() -> None:
    with pytest.raises(SystemExit):
        parse_args(["--port", "eighty"])
