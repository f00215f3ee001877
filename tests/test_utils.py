import os
import re

import pytest

from ephemeral_pki import config, utils
from ephemeral_pki.errors import PersistenceError, RandomnessError


# =============================================================================
# Secrets aléatoires
# =============================================================================


class TestRandomString:

    @pytest.mark.parametrize("length", [0, 1, 16, 64, 300])
    def test_exact_length(self, length):
        assert len(utils.random_string(length)) == length

    def test_only_alphabet_characters(self):
        secret = utils.random_string(500)
        assert set(secret) <= set(config.RANDOM_STRING_CHARS)

    def test_alphabet_is_url_and_basic_auth_safe(self):
        assert len(config.RANDOM_STRING_CHARS) == 65
        assert len(set(config.RANDOM_STRING_CHARS)) == 65
        assert re.fullmatch(r"[0-9a-zA-Z!~-]+", config.RANDOM_STRING_CHARS)

    def test_two_calls_differ(self):
        assert utils.random_string(16) != utils.random_string(16)

    def test_modulo_mapping(self, monkeypatch):
        monkeypatch.setattr(utils.secrets, "token_bytes", lambda n: bytes([0, 64, 65, 255]))
        alphabet = config.RANDOM_STRING_CHARS
        assert utils.random_string(4) == alphabet[0] + alphabet[64] + alphabet[0] + alphabet[255 % 65]

    def test_custom_alphabet(self):
        assert set(utils.random_string(50, alphabet="ab")) <= {"a", "b"}

    def test_negative_length(self):
        with pytest.raises(ValueError):
            utils.random_string(-1)

    def test_no_fallback_when_randomness_unavailable(self, monkeypatch):
        def broken(n):
            raise NotImplementedError("no urandom")

        monkeypatch.setattr(utils.secrets, "token_bytes", broken)
        with pytest.raises(RandomnessError) as excinfo:
            utils.random_string(16)
        assert excinfo.value.stage == "random"


# =============================================================================
# Numéros de série
# =============================================================================


class TestSerialNumber:

    def test_positive_and_128_bits(self):
        for _ in range(50):
            serial = utils.generate_serial_number()
            assert 0 < serial < 2 ** 128

    def test_unique(self):
        assert len({utils.generate_serial_number() for _ in range(100)}) == 100

    def test_randomness_failure(self, monkeypatch):
        def broken(n):
            raise OSError("entropy source unavailable")

        monkeypatch.setattr(utils.secrets, "randbelow", broken)
        with pytest.raises(RandomnessError):
            utils.generate_serial_number()


# =============================================================================
# Fichiers
# =============================================================================


@pytest.mark.skipif(os.name == "nt", reason="permissions POSIX")
class TestFiles:

    def test_write_file_atomic_permissions_and_content(self, tmp_path):
        target = tmp_path / "secret.key"
        utils.write_file_atomic(target, b"data", 0o600)

        assert target.read_bytes() == b"data"
        assert utils.get_permissions(target) == 0o600
        assert os.listdir(tmp_path) == ["secret.key"]

    def test_write_file_atomic_replaces_existing(self, tmp_path):
        target = tmp_path / "server.crt"
        target.write_bytes(b"old")
        os.chmod(target, 0o666)

        utils.write_file_atomic(target, b"new", 0o644)

        assert target.read_bytes() == b"new"
        assert utils.get_permissions(target) == 0o644

    def test_write_file_atomic_cleans_up_on_failure(self, tmp_path, monkeypatch):
        def broken_replace(src, dst):
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(utils.os, "replace", broken_replace)
        target = tmp_path / "server.key"

        with pytest.raises(PersistenceError) as excinfo:
            utils.write_file_atomic(target, b"data", 0o600)

        assert excinfo.value.path == target
        assert str(target) in str(excinfo.value)
        assert os.listdir(tmp_path) == []

    def test_write_file_atomic_missing_directory(self, tmp_path):
        with pytest.raises(PersistenceError):
            utils.write_file_atomic(tmp_path / "missing" / "ca.pem", b"data", 0o644)

    def test_ensure_directory_creates_owner_only(self, tmp_path):
        directory = tmp_path / "a" / "certs"
        utils.ensure_directory(directory)

        assert directory.is_dir()
        assert utils.get_permissions(directory) == 0o700

    def test_ensure_directory_tightens_existing(self, tmp_path):
        directory = tmp_path / "certs"
        directory.mkdir()
        os.chmod(directory, 0o755)

        utils.ensure_directory(directory)
        assert utils.get_permissions(directory) == 0o700

    def test_ensure_directory_keeps_read_only(self, tmp_path):
        directory = tmp_path / "certs"
        directory.mkdir()
        os.chmod(directory, 0o555)
        try:
            utils.ensure_directory(directory)
            assert utils.get_permissions(directory) == 0o500
        finally:
            os.chmod(directory, 0o700)

    def test_ensure_directory_on_file(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")

        with pytest.raises(PersistenceError) as excinfo:
            utils.ensure_directory(blocker / "certs")
        assert excinfo.value.stage == "persistence"


def test_fingerprint_format(ca):
    parts = utils.calculate_fingerprint(ca.certificate).split(":")
    assert len(parts) == 32
    assert all(re.fullmatch(r"[0-9A-F]{2}", p) for p in parts)
