"""Provisioning script argument handling."""

import pytest

from scripts.create_invite_code import generate_invite_code, parse_args


def test_generated_codes_avoid_look_alike_characters() -> None:
    code = generate_invite_code()
    assert len(code) == 12
    assert not set(code) & set("01IO")


def test_parse_args_validates_literal_code() -> None:
    args = parse_args(["WELCOME2025", "--expires-in-days", "30", "--description", "launch"])
    assert (args.code, args.expires_in_days, args.description) == ("WELCOME2025", 30, "launch")


def test_parse_args_generates_code_when_omitted() -> None:
    assert len(parse_args([]).code) == 12


@pytest.mark.parametrize("argv", [["bad code"], ["OK", "--expires-in-days", "0"]])
def test_parse_args_rejects(argv: list[str]) -> None:
    with pytest.raises(SystemExit):
        parse_args(argv)
