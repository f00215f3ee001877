import os
from datetime import timedelta

import pytest
from cryptography import x509
from cryptography.x509.oid import NameOID

from ephemeral_pki import config
from ephemeral_pki.config import PKIConfig
from ephemeral_pki.errors import KeyGenerationError, PersistenceError
from ephemeral_pki.root_ca import RootCAManager


class TestCreateCA:

    def test_certificate_written_as_pem(self, tmp_path, ca):
        pem = (tmp_path / "ca.pem").read_bytes()

        assert pem.startswith(b"-----BEGIN CERTIFICATE-----")
        assert x509.load_pem_x509_certificate(pem) == ca.certificate
        assert ca.cert_path == tmp_path / "ca.pem"

    def test_private_key_never_written(self, tmp_path, ca):
        assert os.listdir(tmp_path) == ["ca.pem"]
        assert b"PRIVATE KEY" not in (tmp_path / "ca.pem").read_bytes()

    def test_is_ca_with_cert_sign(self, ca):
        cert = ca.certificate
        basic_constraints = cert.extensions.get_extension_for_class(x509.BasicConstraints).value
        key_usage = cert.extensions.get_extension_for_class(x509.KeyUsage).value

        assert basic_constraints.ca is True
        assert key_usage.key_cert_sign is True
        assert key_usage.digital_signature is True
        assert key_usage.key_encipherment is True

    def test_subject(self, ca):
        subject = ca.certificate.subject

        assert subject.get_attributes_for_oid(NameOID.COMMON_NAME)[0].value == "Private Certificate Authority"
        assert subject.get_attributes_for_oid(NameOID.ORGANIZATION_NAME)[0].value == config.ORGANIZATION
        assert ca.certificate.issuer == subject

    def test_validity_window(self, ca):
        cert = ca.certificate
        assert cert.not_valid_after_utc - cert.not_valid_before_utc == timedelta(days=375)

    def test_validity_override(self, tmp_path, fast_config):
        ca = RootCAManager(fast_config, quiet=True).create_ca(tmp_path / "ca.pem", timedelta(days=2))
        cert = ca.certificate
        assert cert.not_valid_after_utc - cert.not_valid_before_utc == timedelta(days=2)

    def test_key_matches_certificate(self, ca):
        assert ca.private_key.public_key().public_numbers() == ca.certificate.public_key().public_numbers()
        assert ca.private_key.key_size == 1024

    def test_public_pem(self, tmp_path, ca):
        assert ca.public_pem() == (tmp_path / "ca.pem").read_text()

    def test_fresh_ca_each_time(self, tmp_path, fast_config):
        manager = RootCAManager(fast_config, quiet=True)
        first = manager.create_ca(tmp_path / "first.pem")
        second = manager.create_ca(tmp_path / "second.pem")

        assert first.certificate.serial_number != second.certificate.serial_number
        assert first.private_key.private_numbers() != second.private_key.private_numbers()

    def test_write_failure_reports_path(self, tmp_path, fast_config):
        target = tmp_path / "missing" / "ca.pem"

        with pytest.raises(PersistenceError) as excinfo:
            RootCAManager(fast_config, quiet=True).create_ca(target)

        assert excinfo.value.stage == "persistence"
        assert excinfo.value.path == target

    def test_key_generation_failure(self, tmp_path):
        with pytest.raises(KeyGenerationError) as excinfo:
            RootCAManager(PKIConfig(key_size=256), quiet=True).create_ca(tmp_path / "ca.pem")

        assert excinfo.value.stage == "ca"
        assert not (tmp_path / "ca.pem").exists()

    def test_console_output(self, tmp_path, fast_config, capsys):
        RootCAManager(fast_config).create_ca(tmp_path / "ca.pem")
        out = capsys.readouterr().out

        assert "CA créée" in out


class TestValidateCA:

    def test_valid_ca(self, ca, fast_config):
        assert RootCAManager(fast_config, quiet=True).validate_ca(ca.certificate) is True

    def test_leaf_is_not_a_ca(self, tmp_path, ca, fast_config):
        from ephemeral_pki.certificate_issuer import CertificateIssuer

        issued = CertificateIssuer(fast_config, quiet=True).create_cert(
            "example.org", tmp_path / "server.crt", tmp_path / "server.key", ca)

        assert RootCAManager(fast_config, quiet=True).validate_ca(issued.certificate) is False

    def test_table_output(self, ca, fast_config, capsys):
        RootCAManager(fast_config).validate_ca(ca.certificate)
        assert "keyCertSign" in capsys.readouterr().out
