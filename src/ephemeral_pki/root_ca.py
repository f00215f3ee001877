"""
Root CA (Certificate Authority) éphémère
Crée l'autorité auto-signée d'une exécution
"""

from dataclasses import replace
from datetime import timedelta
from pathlib import Path
from typing import Optional
from cryptography import x509
from cryptography.hazmat.primitives import serialization

from . import config, utils
from .errors import PKIError
from .keygen import KeyGenerator
from .models import CertificateAuthority
from .signing import new_certificate_template, parse_certificate, sign, verify_issued_by


class RootCAManager:
    """
    Gestionnaire de la CA éphémère

    Une nouvelle CA est créée à chaque exécution. Sa clé privée reste en
    mémoire: elle sert uniquement à signer les certificats serveur.
    """

    def __init__(self, pki_config: Optional[config.PKIConfig] = None, quiet: bool = False):
        """
        Args:
            pki_config: Paramètres de la PKI (taille de clé, validité, ...)
            quiet: Ne rien afficher sur la console
        """
        self.config = pki_config or config.DEFAULT_CONFIG
        self.quiet = quiet
        self.key_gen = KeyGenerator(self.config, quiet=quiet)

    # ============================================
    # 👑 CRÉATION DE LA CA
    # ============================================

    def create_ca(self, destination_file: Path, validity: Optional[timedelta] = None) -> CertificateAuthority:
        """
        Crée la CA (clé + certificat auto-signé) et sauvegarde son certificat

        Args:
            destination_file: Fichier PEM du certificat public
            validity: Durée de validité (défaut: celle de la configuration)

        Returns:
            CertificateAuthority: Certificat relu et clé privée en mémoire

        Raises:
            PKIError: Étape "ca" pour l'aléa, la clé ou la signature,
                étape "persistence" pour l'écriture du fichier
        """
        destination_file = Path(destination_file)
        pki_config = self.config if validity is None else replace(self.config, validity=validity)

        if not self.quiet:
            utils.print_header(f"{config.CLI_SYMBOLS['root']} Création de la CA éphémère")

        try:
            # Étape 1: Modèle du certificat
            template = new_certificate_template(pki_config)
            template.is_ca = True
            template.key_cert_sign = True
            template.common_name = pki_config.ca_common_name

            # Étape 2: Clé privée
            private_key = self.key_gen.generate_rsa_key()

            # Étape 3: Auto-signature (émetteur = sujet)
            der_bytes = sign(template, private_key.public_key(), None, private_key)

            # Étape 4: Relecture du DER
            certificate = parse_certificate(der_bytes)
        except PKIError as e:
            e.stage = "ca"
            raise

        # Étape 5: Sauvegarde du certificat public uniquement
        self._save_certificate(certificate, destination_file)

        if not self.quiet:
            utils.print_success(f"CA créée (SN: {certificate.serial_number:X})")
            utils.display_cert_info(certificate)

        return CertificateAuthority(certificate=certificate, private_key=private_key, cert_path=destination_file)

    def _save_certificate(self, certificate: x509.Certificate, cert_path: Path) -> Path:
        """Sauvegarde le certificat de la CA au format PEM"""
        pem_data = certificate.public_bytes(serialization.Encoding.PEM)
        utils.write_file_atomic(cert_path, pem_data, config.CERT_PERMISSIONS)

        if not self.quiet:
            utils.print_success(f"Certificat sauvegardé: {utils.describe_path(cert_path)}")
        return cert_path

    # ============================================
    # 🔍 VALIDATION DE LA CA
    # ============================================

    def validate_ca(self, certificate: x509.Certificate) -> bool:
        """
        Valide qu'un certificat est bien une CA racine utilisable

        Args:
            certificate: Certificat à valider

        Returns:
            bool: True si valide
        """
        checks = []

        # 1. Auto-signé: subject == issuer et signature valide
        checks.append(("Auto-signé", verify_issued_by(certificate, certificate)))

        # 2. BasicConstraints CA=True
        try:
            basic_constraints = certificate.extensions.get_extension_for_class(x509.BasicConstraints).value
            checks.append(("BasicConstraints CA=True", basic_constraints.ca))
        except x509.ExtensionNotFound:
            checks.append(("BasicConstraints CA=True", False))

        # 3. KeyUsage keyCertSign
        try:
            key_usage = certificate.extensions.get_extension_for_class(x509.KeyUsage).value
            checks.append(("KeyUsage: keyCertSign", key_usage.key_cert_sign))
        except x509.ExtensionNotFound:
            checks.append(("KeyUsage: keyCertSign", False))

        # 4. Période de validité
        now = utils.now_utc()
        checks.append((
            "Période de validité",
            certificate.not_valid_before_utc <= now <= certificate.not_valid_after_utc
        ))

        if not self.quiet:
            table = utils.create_table("🔍 Validation de la CA", ["Vérification", "Résultat"])
            for check_name, result in checks:
                status = "[green]✓ Valide[/green]" if result else "[red]✗ Invalide[/red]"
                table.add_row(check_name, status)
            utils.console.print(table)

        return all(result for _, result in checks)


__all__ = ['RootCAManager']
