"""
Ephemeral PKI - Amorçage de certificats TLS hors ligne
======================================================

Crée, à chaque exécution, une autorité de certification éphémère et
l'utilise pour émettre le certificat serveur d'un hôte:
- CA auto-signée (clé privée gardée en mémoire uniquement)
- Certificat serveur avec SAN DNS ou IP
- Clé privée serveur écrite en 600
- Générateur de secrets aléatoires

Modules principaux:
- config: Configuration globale et PKIConfig
- signing: Modèles de certificats et signature
- root_ca: Création de la CA
- certificate_issuer: Émission des certificats serveur
- bootstrap: Amorçage complet (generate_pki)
"""

__version__ = "1.0.0"

# Imports principaux
from . import config
from . import utils
from .config import PKIConfig
from .errors import PKIError, RandomnessError, KeyGenerationError, SigningError, PersistenceError
from .models import CertificateTemplate, CertificateAuthority, IssuedCertificate, PKIArtifacts
from .keygen import KeyGenerator
from .signing import new_certificate_template, apply_host, sign, verify_issued_by
from .root_ca import RootCAManager
from .certificate_issuer import CertificateIssuer
from .bootstrap import generate_pki
from .utils import random_string

# Exports
__all__ = [
    'config',
    'utils',
    'PKIConfig',
    'PKIError',
    'RandomnessError',
    'KeyGenerationError',
    'SigningError',
    'PersistenceError',
    'CertificateTemplate',
    'CertificateAuthority',
    'IssuedCertificate',
    'PKIArtifacts',
    'KeyGenerator',
    'new_certificate_template',
    'apply_host',
    'sign',
    'verify_issued_by',
    'RootCAManager',
    'CertificateIssuer',
    'generate_pki',
    'random_string',
]
