"""
Certificate Issuer
Émet les certificats serveur signés par la CA éphémère
"""

from dataclasses import replace
from datetime import timedelta
from pathlib import Path
from typing import Optional

from cryptography.hazmat.primitives import serialization

from . import config, utils
from .errors import PKIError
from .keygen import KeyGenerator
from .models import CertificateAuthority, IssuedCertificate
from .signing import apply_host, new_certificate_template, parse_certificate, sign


class CertificateIssuer:
    """
    Émetteur de certificats serveur

    La CA est toujours passée explicitement: une même CA peut signer
    plusieurs certificats.
    """

    def __init__(self, pki_config: Optional[config.PKIConfig] = None, quiet: bool = False):
        self.config = pki_config or config.DEFAULT_CONFIG
        self.quiet = quiet
        self.key_gen = KeyGenerator(self.config, quiet=quiet)

    # ============================================
    # 📜 ÉMISSION CERTIFICATS
    # ============================================

    def create_cert(
            self,
            host: str,
            cert_file: Path,
            key_file: Path,
            ca: CertificateAuthority,
            validity: Optional[timedelta] = None
    ) -> IssuedCertificate:
        """
        Émet un certificat serveur pour `host`, signé par la CA

        Args:
            host: Nom DNS ou adresse IP littérale
            cert_file: Fichier PEM du certificat
            key_file: Fichier PEM de la clé privée (permissions 600)
            ca: Autorité émettrice (certificat + clé privée)
            validity: Durée de validité (défaut: celle de la configuration)

        Returns:
            IssuedCertificate: Certificat signé et chemins des fichiers

        Raises:
            PKIError: Étape "leaf" pour l'aléa, la clé ou la signature,
                étape "persistence" pour l'écriture des fichiers
        """
        cert_file, key_file = Path(cert_file), Path(key_file)
        pki_config = self.config if validity is None else replace(self.config, validity=validity)

        if not self.quiet:
            utils.print_header(f"{config.CLI_SYMBOLS['server']} Émission du certificat serveur: {host}")

        try:
            # 1. Modèle (pas de keyCertSign)
            template = apply_host(new_certificate_template(pki_config), host)

            # 2. Clé propre au certificat serveur
            private_key = self.key_gen.generate_rsa_key()

            # 3. Signature par la CA
            der_bytes = sign(template, private_key.public_key(), ca.certificate, ca.private_key)
            certificate = parse_certificate(der_bytes)
        except PKIError as e:
            e.stage = "leaf"
            raise

        # 4. Certificat puis clé privée: les deux fichiers ou aucun
        utils.write_file_atomic(cert_file, certificate.public_bytes(serialization.Encoding.PEM), config.CERT_PERMISSIONS)
        if not self.quiet:
            utils.print_success(f"Certificat sauvegardé: {utils.describe_path(cert_file)}")

        try:
            self.key_gen.save_private_key(private_key, key_file)
        except PKIError:
            cert_file.unlink(missing_ok=True)
            raise

        if not self.quiet:
            utils.print_success(f"Certificat serveur émis (SN: {certificate.serial_number:X})")
            utils.display_cert_info(certificate)

        return IssuedCertificate(certificate=certificate, cert_path=cert_file, key_path=key_file)


__all__ = ['CertificateIssuer']
