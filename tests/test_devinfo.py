"""Tests for the mDNS device-info lookup."""

from unittest.mock import MagicMock, patch

import pytest

from lanwake.core.commands import CommandLaunchError
from lanwake.core.devinfo import (
    build_query,
    device_model,
    device_model_text,
    extract_model,
    instance_name,
    iter_tokens,
    parse_dig_output,
)

DIG_ANSWER = [
    "; <<>> DiG 9.10.6 <<>> @192.168.1.9 -p5353 macmini._device-info._tcp.local TXT",
    "; (1 server found)",
    ";; global options: +cmd",
    ";; Got answer:",
    ";; ->>HEADER<<- opcode: QUERY, status: NOERROR, id: 4242",
    "",
    ";; ANSWER SECTION:",
    'macmini._device-info._tcp.local. 10 IN\tTXT\t"model=Macmini6,2" "osxvers=18"',
    "",
    ";; Query time: 3 msec",
]

DIG_NO_ANSWER = [
    "; <<>> DiG 9.10.6 <<>> @224.0.0.251 -p5353 nobody._device-info._tcp.local TXT",
    ";; connection timed out; no servers could be reached",
]


class TestBuildQuery:
    """Tests for build_query."""

    def test_multicast_when_no_server(self) -> None:
        """Should target the mDNS multicast group when no server is given."""
        assert (
            build_query(None, "macmini")
            == "dig @224.0.0.251 -p5353 macmini._device-info._tcp.local TXT"
        )

    def test_multicast_when_empty_server(self) -> None:
        """Should treat an empty server like a missing one."""
        assert build_query("", "macmini").startswith("dig @224.0.0.251 ")

    def test_explicit_server_and_fields(self) -> None:
        """Should place every field in the query."""
        assert (
            build_query("192.168.1.9", "nas", 53, "_smb._tcp", "example", "SRV")
            == "dig @192.168.1.9 -p53 nas._smb._tcp.example SRV"
        )

    def test_record_name_with_space_is_quoted(self) -> None:
        """Should quote a record name that contains a space."""
        assert (
            build_query(None, "Living Room")
            == "dig @224.0.0.251 -p5353 'Living Room._device-info._tcp.local' TXT"
        )


class TestExtractModel:
    """Tests for extract_model."""

    def test_plain_pair(self) -> None:
        """Should return the value after model=."""
        assert extract_model("model=AirPort4,88") == "AirPort4,88"

    def test_quoted_pair(self) -> None:
        """Should ignore the surrounding quotes."""
        assert extract_model('"model=Macmini6,2"') == "Macmini6,2"

    def test_missing_key(self) -> None:
        """Should return None when there is no model key."""
        assert extract_model('"osxvers=18"') is None

    def test_key_without_value(self) -> None:
        """Should return None when nothing follows the key."""
        assert extract_model("model=") is None

    def test_value_only_taken_right_after_key(self) -> None:
        """Should skip tokens until the model key has been seen."""
        assert extract_model('"osxvers=18" "model=iMac20,1"') == "iMac20,1"

    def test_key_must_match_exactly(self) -> None:
        """Should not treat a longer key as the model key."""
        assert extract_model("models=foo") is None

    def test_repeated_key_stays_armed(self) -> None:
        """Should keep waiting for a value after a repeated key."""
        assert extract_model("model=model=X1") == "X1"

    def test_tokens_skip_empties(self) -> None:
        """Should not yield empty tokens between delimiters."""
        assert list(iter_tokens('"model=A"')) == ["model", "A"]


class TestParseDigOutput:
    """Tests for parse_dig_output."""

    def test_extracts_from_answer(self) -> None:
        """Should pull the model out of a dig answer section."""
        assert parse_dig_output(DIG_ANSWER) == "Macmini6,2"

    def test_no_equals_token(self) -> None:
        """Should return None when no line carries a key=value token."""
        assert parse_dig_output(DIG_NO_ANSWER) is None

    def test_first_equals_token_decides(self) -> None:
        """Should look only at the first key=value token."""
        lines = ['x. 10 IN TXT "osxvers=18" "model=Macmini6,2"']
        assert parse_dig_output(lines) is None


class TestInstanceName:
    """Tests for instance_name."""

    def test_strips_local_suffix(self) -> None:
        """Should drop a trailing .local."""
        assert instance_name("macmini.local") == "macmini"

    def test_strips_trailing_dot(self) -> None:
        """Should drop a trailing root dot as well."""
        assert instance_name("macmini.local.") == "macmini"

    def test_plain_name_unchanged(self) -> None:
        """Should leave a bare name alone."""
        assert instance_name("macmini") == "macmini"


class TestDeviceModel:
    """Tests for device_model."""

    def test_queries_host_ip(self) -> None:
        """Should send the query to the host's own address."""
        runner = MagicMock(return_value=DIG_ANSWER)
        assert device_model("macmini", "192.168.1.9", runner=runner) == "Macmini6,2"
        runner.assert_called_once_with(
            "dig @192.168.1.9 -p5353 macmini._device-info._tcp.local TXT", timeout=None
        )

    def test_multicast_without_ip(self) -> None:
        """Should fall back to the multicast group without an address."""
        runner = MagicMock(return_value=DIG_ANSWER)
        device_model("macmini.local", runner=runner)
        assert runner.call_args[0][0] == "dig @224.0.0.251 -p5353 macmini._device-info._tcp.local TXT"

    def test_not_found(self) -> None:
        """Should return None when no model is advertised."""
        assert device_model("nobody", runner=MagicMock(return_value=DIG_NO_ANSWER)) is None

    def test_text_variant_empty_when_not_found(self) -> None:
        """Should return an empty string from the text variant."""
        assert device_model_text("nobody", runner=MagicMock(return_value=DIG_NO_ANSWER)) == ""

    @patch("lanwake.core.commands.subprocess.run")
    def test_through_subprocess(self, mock_run: MagicMock) -> None:
        """Should run dig and parse its output end to end."""
        mock_run.return_value = MagicMock(returncode=0, stdout="\n".join(DIG_ANSWER), stderr="")
        assert device_model("macmini", "192.168.1.9") == "Macmini6,2"
        assert mock_run.call_args[0][0][:3] == ["dig", "@192.168.1.9", "-p5353"]

    @patch("lanwake.core.commands.subprocess.run")
    def test_name_with_apostrophe(self, mock_run: MagicMock) -> None:
        """Should pass a name containing an apostrophe to dig as one argument."""
        mock_run.return_value = MagicMock(returncode=0, stdout="\n".join(DIG_ANSWER), stderr="")
        assert device_model("Bob's iMac", "192.168.1.9") == "Macmini6,2"
        assert mock_run.call_args[0][0] == [
            "dig",
            "@192.168.1.9",
            "-p5353",
            "Bob's iMac._device-info._tcp.local",
            "TXT",
        ]

    @patch("lanwake.core.commands.subprocess.run")
    def test_name_with_space(self, mock_run: MagicMock) -> None:
        """Should pass a name containing a space to dig as one argument."""
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        assert device_model("Living Room", "192.168.1.9") is None
        assert mock_run.call_args[0][0] == [
            "dig",
            "@192.168.1.9",
            "-p5353",
            "Living Room._device-info._tcp.local",
            "TXT",
        ]

    @patch("lanwake.core.commands.subprocess.run", side_effect=FileNotFoundError)
    def test_launch_failure_raises(self, _: MagicMock) -> None:
        """Should raise CommandLaunchError when dig cannot start."""
        with pytest.raises(CommandLaunchError):
            device_model("macmini")
