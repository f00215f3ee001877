"""
Configuration globale de la PKI éphémère
Contient les constantes du projet et la structure PKIConfig
"""

import os
import string
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

# ============================================
# 📁 CHEMINS DES RÉPERTOIRES
# ============================================

# Variable d'environnement permettant de déplacer le répertoire de travail
HOME_ENV_VAR = "EPHEMERAL_PKI_HOME"

# Répertoire par défaut (~/.ephemeral-pki)
DEFAULT_HOME_DIR = Path.home() / ".ephemeral-pki"

# Noms des fichiers produits
CA_CERT_FILENAME = "ca.pem"
SERVER_CERT_FILENAME = "server.crt"
SERVER_KEY_FILENAME = "server.key"

# ============================================
# 🔐 PARAMÈTRES CRYPTOGRAPHIQUES
# ============================================

# 2048 bits: faible consommation de ressources, compatibilité maximale
RSA_KEY_SIZE = 2048

# Exposant public RSA (standard)
RSA_PUBLIC_EXPONENT = 65537

# Taille des numéros de série (bits)
SERIAL_NUMBER_BITS = 128

# ============================================
# 📜 PARAMÈTRES DES CERTIFICATS X.509
# ============================================

# Organisation inscrite dans le sujet de chaque certificat
ORGANIZATION = "Ephemeral PKI Utility Cluster"

# Common Name de l'autorité éphémère
CA_COMMON_NAME = "Private Certificate Authority"

# 13 mois: durée maximale acceptée par les navigateurs
VALIDITY_PERIOD = timedelta(days=375)

# Noms toujours ajoutés aux certificats serveur non-IP
LOCALHOST_DNS_NAMES = ["localhost", "*.localhost"]

# Longueur maximale d'un Common Name (RFC 5280, ub-common-name)
MAX_COMMON_NAME_LENGTH = 64

# ============================================
# 🎲 SECRETS ALÉATOIRES
# ============================================

# Caractères spéciaux limités (sûrs pour git / basic auth)
# https://owasp.org/www-community/password-special-characters
RANDOM_STRING_CHARS = string.digits + string.ascii_lowercase + string.ascii_uppercase + "!~-"

DEFAULT_SECRET_LENGTH = 24

# ============================================
# 🔒 SÉCURITÉ
# ============================================

# Permissions des fichiers (Unix)
PRIVATE_KEY_PERMISSIONS = 0o600  # rw------- (propriétaire seulement)
CERT_PERMISSIONS = 0o644  # rw-r--r-- (lecture publique)
DIR_PERMISSIONS = 0o700  # rwx------

# ============================================
# 🎨 PARAMÈTRES D'AFFICHAGE CLI
# ============================================

CLI_SYMBOLS = {
    "success": "✓",
    "error": "✗",
    "warning": "⚠",
    "info": "ℹ",
    "cert": "📜",
    "root": "👑",
    "server": "🖥️"
}


# ============================================
# ⚙️ CONFIGURATION INJECTABLE
# ============================================

@dataclass(frozen=True)
class PKIConfig:
    """
    Paramètres d'une exécution de la PKI

    Les valeurs par défaut reprennent les constantes ci-dessus; les tests
    peuvent réduire la taille des clés ou la durée de validité.
    """
    organization: str = ORGANIZATION
    ca_common_name: str = CA_COMMON_NAME
    validity: timedelta = VALIDITY_PERIOD
    key_size: int = RSA_KEY_SIZE
    public_exponent: int = RSA_PUBLIC_EXPONENT
    alphabet: str = RANDOM_STRING_CHARS
    show_progress: bool = False


DEFAULT_CONFIG = PKIConfig()


# ============================================
# 🛠️ FONCTIONS UTILITAIRES DE CONFIG
# ============================================

def get_home_dir() -> Path:
    """Retourne le répertoire racine (EPHEMERAL_PKI_HOME ou ~/.ephemeral-pki)"""
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser().resolve()
    return DEFAULT_HOME_DIR


def get_certs_dir() -> Path:
    """
    Retourne le chemin absolu du répertoire des certificats

    Returns:
        Path: <home>/certs
    """
    return get_home_dir() / "certs"


def get_ca_cert_path(directory: Path) -> Path:
    return Path(directory) / CA_CERT_FILENAME


def get_server_cert_path(directory: Path) -> Path:
    return Path(directory) / SERVER_CERT_FILENAME


def get_server_key_path(directory: Path) -> Path:
    return Path(directory) / SERVER_KEY_FILENAME


__all__ = [
    # Répertoires et fichiers
    'HOME_ENV_VAR', 'DEFAULT_HOME_DIR',
    'CA_CERT_FILENAME', 'SERVER_CERT_FILENAME', 'SERVER_KEY_FILENAME',

    # Paramètres crypto
    'RSA_KEY_SIZE', 'RSA_PUBLIC_EXPONENT', 'SERIAL_NUMBER_BITS',

    # Certificats
    'ORGANIZATION', 'CA_COMMON_NAME', 'VALIDITY_PERIOD', 'LOCALHOST_DNS_NAMES',
    'MAX_COMMON_NAME_LENGTH',

    # Secrets
    'RANDOM_STRING_CHARS', 'DEFAULT_SECRET_LENGTH',

    # Sécurité
    'PRIVATE_KEY_PERMISSIONS', 'CERT_PERMISSIONS', 'DIR_PERMISSIONS',

    # Interface CLI
    'CLI_SYMBOLS',

    # Configuration
    'PKIConfig', 'DEFAULT_CONFIG',

    # Fonctions utilitaires
    'get_home_dir', 'get_certs_dir', 'get_ca_cert_path', 'get_server_cert_path',
    'get_server_key_path'
]
