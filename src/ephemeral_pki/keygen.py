"""
Générateur de clés RSA
Génération des paires de clés et sauvegarde sécurisée des clés privées
"""

from pathlib import Path
from typing import Optional
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives import serialization
from tqdm import tqdm

from . import config
from . import utils
from .errors import KeyGenerationError


class KeyGenerator:
    """
    Classe pour générer et sauvegarder les clés RSA de la PKI
    """

    def __init__(self, pki_config: Optional[config.PKIConfig] = None, quiet: bool = False):
        """
        Args:
            pki_config: Taille de clé, exposant et barre de progression
            quiet: Ne rien afficher sur la console
        """
        self.config = pki_config or config.DEFAULT_CONFIG
        self.quiet = quiet

    # ============================================
    # 🔐 GÉNÉRATION DE CLÉS RSA
    # ============================================

    def generate_rsa_key(self) -> rsa.RSAPrivateKey:
        """
        Génère une nouvelle paire de clés RSA (une par certificat)

        Returns:
            RSAPrivateKey: Clé privée RSA générée

        Raises:
            KeyGenerationError: Si la génération échoue
        """
        key_size = self.config.key_size

        if not self.quiet:
            utils.print_info(f"Génération d'une clé RSA de {key_size} bits...")

        try:
            with tqdm(total=1, desc=f"RSA {key_size}", disable=not self.config.show_progress,
                      bar_format="{l_bar}{bar}| {n_fmt}/{total_fmt}") as pbar:
                private_key = rsa.generate_private_key(
                    public_exponent=self.config.public_exponent,
                    key_size=key_size
                )
                pbar.update(1)
        except (ValueError, MemoryError) as e:
            raise KeyGenerationError(f"Échec de la génération de la clé RSA {key_size} bits: {e}") from e

        if not self.quiet:
            utils.print_success(f"Clé RSA {key_size} bits générée")
        return private_key

    # ============================================
    # 💾 SAUVEGARDE DES CLÉS
    # ============================================

    def save_private_key(self, private_key: rsa.RSAPrivateKey, filepath: Path) -> Path:
        """
        Sauvegarde une clé privée au format PEM PKCS#1 ("RSA PRIVATE KEY")

        La clé n'est pas chiffrée: le fichier est écrit de manière atomique
        avec les permissions 600 (propriétaire seulement).

        Args:
            private_key: Clé privée à sauvegarder
            filepath: Chemin du fichier de sortie

        Returns:
            Path: Chemin du fichier écrit

        Raises:
            PersistenceError: Si l'écriture échoue
        """
        pem_data = private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.TraditionalOpenSSL,
            encryption_algorithm=serialization.NoEncryption()
        )

        utils.write_file_atomic(filepath, pem_data, config.PRIVATE_KEY_PERMISSIONS)

        if not self.quiet:
            utils.print_success(f"Clé privée sauvegardée: {utils.describe_path(filepath)}")
        return Path(filepath)


__all__ = ['KeyGenerator']
