"""Configuration, credentials and host key settings."""

import warnings
from unittest.mock import MagicMock

import paramiko
import pytest

from sftppy import Basic, Config, ConfigurationError, HostKeys, Key, Timeout
from sftppy.session import Session

PASSWORD = "correct-horse-battery"


@pytest.fixture
def keyfile(tmp_path):
    path = tmp_path / "id_test"
    path.write_text("not really a key")
    return path


class TestConfig:
    def test_defaults(self):
        config = Config(host="example.com")

        assert config.port == 22
        assert config.connect is True
        assert isinstance(config.timeout, Timeout)
        assert config.hostkeys.verify is True

    def test_each_config_gets_its_own_defaults(self):
        first, second = Config(host="one"), Config(host="two")

        assert first.timeout is not second.timeout
        assert first.hostkeys is not second.hostkeys

    @pytest.mark.parametrize("host", ["", "   "])
    def test_blank_host_rejected(self, host):
        with pytest.raises(ValueError, match="Host"):
            Config(host=host)

    @pytest.mark.parametrize("port", [0, -1, 65536])
    def test_port_range(self, port):
        with pytest.raises(ValueError, match="port"):
            Config(host="example.com", port=port)

    def test_password_credential(self):
        credential = Config(host="h", user="me", password=PASSWORD).credential()

        assert credential == Basic(user="me", password=PASSWORD)
        assert credential.options() == {"username": "me", "password": PASSWORD}

    def test_key_wins_over_password(self, keyfile):
        config = Config(host="h", user="me", password=PASSWORD, key=str(keyfile), passphrase="secret")

        credential = config.credential()

        assert isinstance(credential, Key)
        assert credential.options()["key_filename"] == str(keyfile)
        assert credential.options()["passphrase"] == "secret"

    def test_no_credential_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            Config(host="h", user="me").credential()

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            Config(host="h", user="me", password="", key="  ").credential()

    def test_session_checks_credentials_before_connecting(self):
        with pytest.raises(ConfigurationError):
            Session(Config(host="h", user="me"))


class TestTimeout:
    def test_options(self):
        assert Timeout(connect=1, banner=2, auth=3).options() == {
            "timeout": 1,
            "banner_timeout": 2,
            "auth_timeout": 3,
        }

    @pytest.mark.parametrize("field", ["connect", "banner", "auth"])
    def test_must_be_positive(self, field):
        with pytest.raises(ValueError, match="positive"):
            Timeout(**{field: 0})


class TestCredentials:
    def test_basic_rejects_blank_user(self):
        with pytest.raises(ValueError, match="Username"):
            Basic(user=" ", password=PASSWORD)

    def test_basic_warns_on_weak_password(self):
        with pytest.warns(UserWarning, match="shorter than 8"):
            Basic(user="me", password="admin")

    def test_basic_strong_password_is_quiet(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            Basic(user="me", password=PASSWORD)

    def test_key_file_must_exist(self, tmp_path):
        with pytest.raises(ValueError, match="not found"):
            Key(user="me", path=str(tmp_path / "missing"))

    def test_key_path_must_be_a_file(self, tmp_path):
        with pytest.raises(ValueError, match="not a file"):
            Key(user="me", path=str(tmp_path))

    def test_empty_passphrase_means_none(self, keyfile):
        assert Key(user="me", path=str(keyfile), passphrase="").passphrase is None


class TestHostKeys:
    def test_disabled_verification_warns(self):
        with pytest.warns(UserWarning, match="verification is disabled"):
            HostKeys(verify=False)

    def test_known_hosts_file_must_exist(self, tmp_path):
        with pytest.raises(ValueError, match="not found"):
            HostKeys(known=str(tmp_path / "known_hosts"))

    def test_verifying_policy(self, tmp_path):
        known = tmp_path / "known_hosts"
        known.write_text("")
        client = MagicMock(spec=paramiko.SSHClient)

        HostKeys(known=str(known)).apply(client)

        client.load_system_host_keys.assert_called_once_with()
        client.load_host_keys.assert_called_once_with(str(known))
        policy = client.set_missing_host_key_policy.call_args.args[0]
        assert isinstance(policy, paramiko.RejectPolicy)

    def test_trusting_policy(self):
        client = MagicMock(spec=paramiko.SSHClient)
        with pytest.warns(UserWarning):
            settings = HostKeys(verify=False)

        settings.apply(client)

        client.load_system_host_keys.assert_not_called()
        policy = client.set_missing_host_key_policy.call_args.args[0]
        assert isinstance(policy, paramiko.AutoAddPolicy)
