"""Tests for unbound_ctl.parser."""

from __future__ import annotations

import pytest

from unbound_ctl.models import ServerSettings
from unbound_ctl.parser import (
    Blank,
    BlockState,
    Comment,
    Directive,
    Unrecognized,
    classify_line,
    next_state,
    parse_config,
    split_document,
)


def test_parse_sample_document(sample_document: str) -> None:
    parsed = parse_config(sample_document)

    assert parsed.before == "# global"
    assert parsed.after == "remote-control:\n    control-enable: no"
    assert parsed.settings == ServerSettings(
        verbosity="2",
        interfaces=["127.0.0.1"],
        do_ip4=True,
        do_ip6=False,
    )


def test_parse_empty_document_yields_defaults() -> None:
    parsed = parse_config("")

    assert parsed.before == ""
    assert parsed.after == ""
    assert parsed.settings == ServerSettings()


def test_document_without_server_block_is_all_before() -> None:
    content = "# nothing here\nremote-control:\n    control-enable: yes"
    parsed = parse_config(content)

    assert parsed.before == content
    assert parsed.after == ""
    assert parsed.settings == ServerSettings()


def test_header_match_is_case_insensitive_and_tolerates_spaces() -> None:
    parsed = parse_config("  SERVER :  \n    port: 5353")

    assert parsed.before == ""
    assert parsed.settings.port == "5353"


def test_header_with_trailing_text_is_not_a_header() -> None:
    parsed = parse_config("server: # inline\n    port: 5353")

    assert parsed.before == "server: # inline\n    port: 5353"
    assert parsed.settings.port == "53"


def test_crlf_line_endings() -> None:
    parsed = parse_config("# top\r\nserver:\r\n    port: 5353\r\n    interface: ::1\r\n")

    assert parsed.before == "# top"
    assert parsed.settings.port == "5353"
    assert parsed.settings.interfaces == ["::1"]
    assert parsed.settings.custom_server_options == ""
    assert parsed.after == ""


def test_list_directives_append_in_file_order_with_duplicates() -> None:
    parsed = parse_config(
        "server:\n"
        "    interface: 10.0.0.1\n"
        "    access-control: 10.0.0.0/8 allow\n"
        "    interface: ::1\n"
        "    interface: 10.0.0.1\n"
        "    access-control: 0.0.0.0/0 refuse\n"
    )

    assert parsed.settings.interfaces == ["10.0.0.1", "::1", "10.0.0.1"]
    assert parsed.settings.access_controls == ["10.0.0.0/8 allow", "0.0.0.0/0 refuse"]


def test_scalar_directives_last_one_wins() -> None:
    parsed = parse_config("server:\n    verbosity: 2\n    verbosity: 4\n")
    assert parsed.settings.verbosity == "4"


def test_boolean_last_valid_value_wins_and_invalid_is_ignored() -> None:
    parsed = parse_config("server:\n    do-ip4: TRUE\n    do-ip4: off\n    do-ip4: maybe\n")
    assert parsed.settings.do_ip4 is False


def test_unparseable_boolean_keeps_default() -> None:
    parsed = parse_config("server:\n    hide-version: sometimes\n    qname-minimisation:\n")

    assert parsed.settings.hide_version is False
    assert parsed.settings.qname_minimisation is True
    assert parsed.settings.custom_server_options == ""


def test_all_boolean_directives_are_recognised() -> None:
    parsed = parse_config(
        "server:\n"
        "    do-ip4: no\n"
        "    do-ip6: no\n"
        "    do-udp: no\n"
        "    do-tcp: no\n"
        "    hide-identity: yes\n"
        "    hide-version: yes\n"
        "    qname-minimisation: no\n"
        "    harden-dnssec-stripped: no\n"
    )

    assert parsed.settings == ServerSettings(
        do_ip4=False,
        do_ip6=False,
        do_udp=False,
        do_tcp=False,
        hide_identity=True,
        hide_version=True,
        qname_minimisation=False,
        harden_dnssec_stripped=False,
    )


def test_quoted_values_are_unwrapped_once() -> None:
    parsed = parse_config('server:\n    interface: "::1"\n    port: "53\n    verbosity: ""3""\n')

    assert parsed.settings.interfaces == ["::1"]
    assert parsed.settings.port == '"53'
    assert parsed.settings.verbosity == '"3"'


def test_unrecognised_lines_become_custom_options_in_order() -> None:
    parsed = parse_config(
        "server:\n"
        "    # tuned for the lab\n"
        "    prefetch: yes\n"
        "    port: 5353\n"
        "\n"
        "      weird line without colon\n"
        '    private-domain: "example.lan"\n'
        "forward-zone:\n"
        '    name: "."\n'
    )

    assert parsed.settings.port == "5353"
    assert parsed.settings.custom_server_options == (
        '# tuned for the lab\nprefetch: yes\n\nweird line without colon\nprivate-domain: "example.lan"'
    )
    assert parsed.after == 'forward-zone:\n    name: "."\n'


def test_keys_are_case_sensitive() -> None:
    parsed = parse_config("server:\n    Verbosity: 4")

    assert parsed.settings.verbosity == "1"
    assert parsed.settings.custom_server_options == "Verbosity: 4"


def test_unindented_comment_and_blank_lines_stay_in_block() -> None:
    parsed = parse_config("server:\n    port: 1\n# note\n\n    verbosity: 3\nauth-zone:\n    name: x")

    assert parsed.settings.port == "1"
    assert parsed.settings.verbosity == "3"
    assert parsed.settings.custom_server_options == "# note\n"
    assert parsed.after == "auth-zone:\n    name: x"


def test_second_server_header_belongs_to_after() -> None:
    parsed = parse_config("server:\n    port: 1\nremote-control:\nserver:\n    port: 2")

    assert parsed.settings.port == "1"
    assert parsed.after == "remote-control:\nserver:\n    port: 2"


def test_empty_value_overwrites_scalar() -> None:
    parsed = parse_config("server:\n    port:\n")
    assert parsed.settings.port == ""


def test_split_document_drops_header_line() -> None:
    before, body, after = split_document("a\nserver:\n    b\nc\n    d")

    assert before == ["a"]
    assert body == ["    b"]
    assert after == ["c", "    d"]


@pytest.mark.parametrize(
    ("state", "line", "expected"),
    [
        (BlockState.BEFORE_BLOCK, "server:", BlockState.IN_BLOCK),
        (BlockState.BEFORE_BLOCK, "    port: 53", BlockState.BEFORE_BLOCK),
        (BlockState.IN_BLOCK, "    port: 53", BlockState.IN_BLOCK),
        (BlockState.IN_BLOCK, "# comment", BlockState.IN_BLOCK),
        (BlockState.IN_BLOCK, "", BlockState.IN_BLOCK),
        (BlockState.IN_BLOCK, "\t", BlockState.IN_BLOCK),
        (BlockState.IN_BLOCK, "stub-zone:", BlockState.AFTER_BLOCK),
        (BlockState.IN_BLOCK, "server:", BlockState.AFTER_BLOCK),
        (BlockState.AFTER_BLOCK, "server:", BlockState.AFTER_BLOCK),
        (BlockState.AFTER_BLOCK, "    port: 53", BlockState.AFTER_BLOCK),
    ],
)
def test_next_state_transitions(state: BlockState, line: str, expected: BlockState) -> None:
    assert next_state(state, line) is expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("   ", Blank()),
        ("  # keep me  ", Comment("# keep me")),
        ("    port : 5353", Directive("port", "5353")),
        ('interface: "::1"', Directive("interface", "::1")),
        ("    prefetch: yes", Unrecognized("prefetch: yes")),
        ("    include /etc/unbound/extra.conf", Unrecognized("include /etc/unbound/extra.conf")),
    ],
)
def test_classify_line(raw: str, expected: object) -> None:
    assert classify_line(raw) == expected
