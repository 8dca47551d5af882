# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest
from fakes import FakeTransport, redirect, respond

from requiem.cli.main import build_options, build_parser, main

URL = "http://api.test/200.json"


def _transport():
    return FakeTransport(
        {
            URL: respond(200, {"Content-Type": "application/json"}, [b'{"b": 1, "a": [1, 2]}']),
            "http://api.test/500": respond(500, chunks=[b"broken"]),
            "http://api.test/moved": redirect("/200.json"),
        }
    )


def test_build_options_from_arguments():
    args = build_parser().parse_args(
        [
            "http://api.test/x",
            "-X",
            "post",
            "-H",
            "X-Test: 1",
            "-H",
            "Accept:application/json",
            "--json-body",
            '{"hello": "world"}',
            "--max-redirects",
            "2",
            "--expect-status",
            "201",
            "--timeout",
            "1.5",
            "--insecure",
        ]
    )
    assert build_options(args) == {
        "url": "http://api.test/x",
        "method": "post",
        "headers": {"X-Test": "1", "Accept": "application/json"},
        "body_json": {"hello": "world"},
        "follow_redirects": 2,
        "throw_on_error_response": 201,
        "timeout": 1.5,
        "verify": False,
    }


def test_build_options_no_follow_and_fail():
    args = build_parser().parse_args(["http://api.test/x", "--no-follow", "--fail", "-d", "raw"])
    options = build_options(args)
    assert options["follow_redirects"] is False
    assert options["throw_on_error_response"] is True
    assert options["body"] == "raw"


def test_conflicting_flags_are_rejected():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["http://api.test/x", "--no-follow", "--max-redirects", "1"])


def test_main_prints_body(capsys):
    assert main([URL], transport=_transport()) == 0
    assert capsys.readouterr().out == '{"b": 1, "a": [1, 2]}'


def test_main_pretty_prints_json_with_headers(capsys):
    assert main(["http://api.test/moved", "--json", "-i"], transport=_transport()) == 0
    out = capsys.readouterr().out
    assert out.startswith(f"200 {URL}\ncontent-type: application/json\n\n")
    assert '"a": [\n' in out


def test_main_reports_requiem_errors(capsys):
    assert main(["http://api.test/500", "--fail"], transport=_transport()) == 1
    err = capsys.readouterr().err
    assert 'requiem: InvalidStatusCode: Received invalid status code from "http://api.test/500": 500' in err


def test_main_reports_invalid_urls(capsys):
    assert main(["nope"], transport=_transport()) == 1
    assert "InvalidUrl" in capsys.readouterr().err


def test_main_rejects_malformed_headers():
    with pytest.raises(SystemExit) as exc_info:
        main([URL, "-H", "no-colon"], transport=_transport())
    assert exc_info.value.code == 2


def test_main_rejects_unknown_log_level():
    with pytest.raises(SystemExit) as exc_info:
        main([URL, "--log-level", "chatty"], transport=_transport())
    assert exc_info.value.code == 2
