"""
Modèles de données pour la PKI éphémère
Classes représentant les certificats et les artefacts produits
"""

from dataclasses import dataclass, field
from datetime import datetime
from ipaddress import IPv4Address, IPv6Address
from pathlib import Path
from typing import List, Optional, Union

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

IPAddressTypes = Union[IPv4Address, IPv6Address]


@dataclass
class CertificateTemplate:
    """
    Description en mémoire d'un certificat à émettre
    """
    serial_number: int
    organization: str
    not_before: datetime
    not_after: datetime
    common_name: Optional[str] = None
    is_ca: bool = False
    digital_signature: bool = True
    key_encipherment: bool = True
    key_cert_sign: bool = False
    dns_names: List[str] = field(default_factory=list)
    ip_addresses: List[IPAddressTypes] = field(default_factory=list)

    def subject(self) -> x509.Name:
        """Construit le Distinguished Name (O, puis CN s'il est défini)"""
        attributes = [x509.NameAttribute(NameOID.ORGANIZATION_NAME, self.organization)]
        if self.common_name:
            attributes.append(x509.NameAttribute(NameOID.COMMON_NAME, self.common_name))
        return x509.Name(attributes)


@dataclass
class CertificateAuthority:
    """
    Autorité éphémère: certificat auto-signé + clé privée en mémoire

    La clé privée n'est jamais écrite sur disque.
    """
    certificate: x509.Certificate
    private_key: rsa.RSAPrivateKey
    cert_path: Optional[Path] = None

    def public_pem(self) -> str:
        """Certificat public de la CA au format PEM"""
        return self.certificate.public_bytes(serialization.Encoding.PEM).decode()


@dataclass
class IssuedCertificate:
    """
    Certificat serveur signé par la CA et ses fichiers
    """
    certificate: x509.Certificate
    cert_path: Path
    key_path: Path


@dataclass
class PKIArtifacts:
    """
    Résultat d'un amorçage complet
    """
    directory: Path
    ca_cert_path: Path
    cert_path: Path
    key_path: Path
    ca_pem: str
    ca_certificate: x509.Certificate
    certificate: x509.Certificate


__all__ = [
    'IPAddressTypes',
    'CertificateTemplate',
    'CertificateAuthority',
    'IssuedCertificate',
    'PKIArtifacts'
]
