import json

import pytest

from rugradar import main

TOKEN = "0x6982508145454ce325ddbe47a25d4ec3d2311933"


@pytest.fixture(autouse=True)
def plain_terminal(monkeypatch):
    monkeypatch.setattr(main.colorama, "init", lambda **kwargs: None)


def test_invalid_address_exit_code(capsys):
    assert main.main(["scan", "0x123"]) == main.EXIT_INVALID_INPUT
    assert "Invalid token address" in capsys.readouterr().err


def test_unsupported_chain_exit_code(capsys):
    assert main.main(["scan", TOKEN, "--chain", "solana"]) == main.EXIT_INVALID_INPUT
    assert "Unsupported chain" in capsys.readouterr().err


def test_chains_command(capsys):
    assert main.main(["chains"]) == 0
    out = capsys.readouterr().out
    assert "Ethereum" in out
    assert "monad" in out


def test_json_scan(monkeypatch, capsys, make_result):
    result = make_result()

    class StubScanner:
        async def scan(self, address, chain=None):
            return result

    monkeypatch.setattr(main, "RugScanner", StubScanner)
    assert main.main(["scan", TOKEN, "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["token_address"] == TOKEN
    assert payload["risk_level"] == "LOW"


def test_console_scan(monkeypatch, capsys, make_result):
    result = make_result()

    class StubScanner:
        async def scan(self, address, chain=None):
            return result

    monkeypatch.setattr(main, "RugScanner", StubScanner)
    assert main.main(["--log-level", "WARNING", "scan", TOKEN, "--chain", "eth"]) == 0
    assert "RUG RADAR" in capsys.readouterr().out


def test_command_is_required():
    with pytest.raises(SystemExit):
        main.build_parser().parse_args([])
