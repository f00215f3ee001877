"""
Construction et signature des certificats X.509
Opérations communes à la CA et aux certificats serveur
"""

import ipaddress
from typing import Optional

from cryptography import x509
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from . import config, utils
from .errors import SigningError
from .models import CertificateTemplate


# ============================================
# 📝 MODÈLES DE CERTIFICATS
# ============================================

def new_certificate_template(pki_config: Optional[config.PKIConfig] = None) -> CertificateTemplate:
    """
    Crée un modèle de certificat avec un numéro de série neuf

    notBefore vaut "maintenant", notAfter = notBefore + validité.
    Usage par défaut: signature numérique + chiffrement de clé.

    Raises:
        RandomnessError: Si le numéro de série ne peut pas être tiré
        SigningError: Si la fin de validité dépasse les dates représentables
    """
    pki_config = pki_config or config.DEFAULT_CONFIG

    not_before = utils.now_utc()
    try:
        not_after = not_before + pki_config.validity
    except OverflowError as e:
        raise SigningError(f"Durée de validité hors limites: {pki_config.validity}") from e

    return CertificateTemplate(
        serial_number=utils.generate_serial_number(),
        organization=pki_config.organization,
        not_before=not_before,
        not_after=not_after,
    )


def apply_host(template: CertificateTemplate, host: str) -> CertificateTemplate:
    """
    Place l'hôte dans les Subject Alternative Names

    Une adresse IP littérale va dans la liste IP. Sinon l'hôte rejoint la
    liste DNS avec localhost et *.localhost, et devient le Common Name si
    aucun n'est défini et s'il tient en 64 octets (un nom DNS peut en
    compter 253; il reste alors porté par les SAN).
    """
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        ip = None

    if ip is not None:
        template.ip_addresses.append(ip)
    else:
        # localhost pour que les tests locaux utilisent le même certificat
        template.dns_names.extend([host] + config.LOCALHOST_DNS_NAMES)
        if not template.common_name and len(host.encode()) <= config.MAX_COMMON_NAME_LENGTH:
            template.common_name = host

    return template


def _key_usage(template: CertificateTemplate) -> x509.KeyUsage:
    return x509.KeyUsage(
        digital_signature=template.digital_signature,
        content_commitment=False,
        key_encipherment=template.key_encipherment,
        data_encipherment=False,
        key_agreement=False,
        key_cert_sign=template.key_cert_sign,
        crl_sign=False,
        encipher_only=False,
        decipher_only=False
    )


# ============================================
# ✍️ SIGNATURE
# ============================================

def sign(
        template: CertificateTemplate,
        public_key: rsa.RSAPublicKey,
        issuer_cert: Optional[x509.Certificate],
        issuer_key: rsa.RSAPrivateKey
) -> bytes:
    """
    Signe un modèle et retourne le certificat encodé en DER

    Args:
        template: Modèle du certificat (sujet)
        public_key: Clé publique du sujet
        issuer_cert: Certificat de l'émetteur, None pour un auto-signé
        issuer_key: Clé privée de l'émetteur

    Returns:
        bytes: Certificat DER

    Raises:
        SigningError: Si la construction ou la signature échoue
    """
    try:
        subject = template.subject()
        issuer_name = subject if issuer_cert is None else issuer_cert.subject

        cert_builder = (
            x509.CertificateBuilder()
            .subject_name(subject)
            .issuer_name(issuer_name)
            .public_key(public_key)
            .serial_number(template.serial_number)
            .not_valid_before(template.not_before)
            .not_valid_after(template.not_after)
            .add_extension(x509.BasicConstraints(ca=template.is_ca, path_length=None), critical=True)
            .add_extension(_key_usage(template), critical=True)
            .add_extension(x509.SubjectKeyIdentifier.from_public_key(public_key), critical=False)
        )

        if issuer_cert is not None:
            cert_builder = cert_builder.add_extension(
                x509.AuthorityKeyIdentifier.from_issuer_public_key(issuer_cert.public_key()),
                critical=False
            )

        names = [x509.DNSName(name) for name in template.dns_names]
        names += [x509.IPAddress(ip) for ip in template.ip_addresses]
        if names:
            cert_builder = cert_builder.add_extension(x509.SubjectAlternativeName(names), critical=False)

        certificate = cert_builder.sign(private_key=issuer_key, algorithm=hashes.SHA256())
    except (ValueError, TypeError) as e:
        raise SigningError(f"Échec de la signature du certificat: {e}") from e

    return certificate.public_bytes(serialization.Encoding.DER)


def parse_certificate(der_bytes: bytes) -> x509.Certificate:
    """
    Relit un certificat DER fraîchement produit

    Raises:
        SigningError: Si les octets ne forment pas un certificat valide
    """
    try:
        return x509.load_der_x509_certificate(der_bytes)
    except ValueError as e:
        raise SigningError(f"Certificat produit illisible: {e}") from e


# ============================================
# 🔍 VÉRIFICATION DE LA CHAÎNE
# ============================================

def verify_issued_by(certificate: x509.Certificate, issuer_cert: x509.Certificate) -> bool:
    """
    Vérifie qu'un certificat est signé par l'émetteur donné

    Contrôle l'égalité émetteur/sujet puis la signature avec la clé
    publique de l'émetteur.
    """
    try:
        certificate.verify_directly_issued_by(issuer_cert)
    except (ValueError, TypeError, InvalidSignature):
        return False
    return True


__all__ = [
    'new_certificate_template',
    'apply_host',
    'sign',
    'parse_certificate',
    'verify_issued_by'
]
