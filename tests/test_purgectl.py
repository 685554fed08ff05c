"""
Tests for the purgectl command-line interface.
"""

import argparse

import pytest

from purgectl.main import main, parse_target


class TestParseTarget:

    def test_valid(self):
        assert parse_target("10.64.0.12:4827") == ("10.64.0.12", 4827)

    @pytest.mark.parametrize("value", ["localhost:4827", "10.0.0.1", "10.0.0.1:", "10.0.0.1:99999"])
    def test_invalid(self, value):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_target(value)


def test_requires_target_or_config():
    with pytest.raises(SystemExit) as exc:
        main(["http://example.org/"])

    assert exc.value.code == 2


def test_target_and_config_are_exclusive(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main(["-t", "127.0.0.1:4827", "-c", str(tmp_path / "c.toml"), "http://example.org/"])

    assert exc.value.code == 2


def test_purge_to_target(udp_listener, reference_packets, capsys):
    _, port = udp_listener.getsockname()

    code = main(["-t", f"127.0.0.1:{port}", "test.com"])

    assert code == 0
    assert udp_listener.recv(65535) == reference_packets[0]
    assert "127.0.0.1" in capsys.readouterr().out


def test_purge_with_config(tmp_path, udp_listener, reference_packets):
    _, port = udp_listener.getsockname()
    path = tmp_path / "config.toml"
    path.write_text(
        "[[routes]]\n"
        "pattern = \"/^https:/\"\n"
        "host = \"127.0.0.1\"\n"
        f"port = {port}\n"
    )

    code = main(["-c", str(path), "test.com", "https://example.org/"])

    # test.com has no route
    assert code == 1
    header = udp_listener.recv(65535)
    assert header[22:42] == b"https://example.org/"


def test_config_error_exit_code(tmp_path):
    assert main(["-c", str(tmp_path / "missing.toml"), "http://example.org/"]) == 1


def test_ttl_out_of_range():
    assert main(["-t", "127.0.0.1:4827", "--ttl", "300", "http://example.org/"]) == 1
