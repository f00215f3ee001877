"""Fixtures communes: configuration rapide (clés 1024 bits) et CA de test."""

import pytest

from ephemeral_pki.config import PKIConfig
from ephemeral_pki.root_ca import RootCAManager


@pytest.fixture
def fast_config():
    """PKIConfig avec des clés courtes pour accélérer les tests."""
    return PKIConfig(key_size=1024)


@pytest.fixture
def ca(tmp_path, fast_config):
    """CA éphémère dont le certificat est écrit dans tmp_path/ca.pem."""
    return RootCAManager(fast_config, quiet=True).create_ca(tmp_path / "ca.pem")
