"""
Amorçage de la PKI éphémère
Crée une CA neuve puis le certificat serveur d'un hôte

Étapes: Start -> CA créée -> certificat signé -> fichiers écrits -> Done.
Toute erreur interrompt l'amorçage; aucune reprise n'est tentée. Un nouvel
appel régénère une CA et un certificat complets.
"""

from pathlib import Path
from typing import Optional, Union

from . import config, utils
from .certificate_issuer import CertificateIssuer
from .models import PKIArtifacts
from .root_ca import RootCAManager


def generate_pki(
        host: str,
        directory: Optional[Union[str, Path]] = None,
        pki_config: Optional[config.PKIConfig] = None,
        quiet: bool = False
) -> PKIArtifacts:
    """
    Crée une CA et un certificat serveur signé pour `host`

    Args:
        host: Nom DNS ou adresse IP du serveur
        directory: Répertoire des artefacts (défaut: config.get_certs_dir())
        pki_config: Paramètres de la PKI
        quiet: Ne rien afficher sur la console

    Returns:
        PKIArtifacts: Chemins des fichiers et certificat PEM de la CA

    Raises:
        ValueError: Si l'hôte est vide
        PKIError: Si une étape échoue (voir `stage`)
    """
    if not host or not host.strip():
        raise ValueError("L'hôte ne peut pas être vide")

    pki_config = pki_config or config.DEFAULT_CONFIG
    directory = Path(directory) if directory is not None else config.get_certs_dir()

    utils.ensure_directory(directory, config.DIR_PERMISSIONS)

    ca_file = config.get_ca_cert_path(directory)
    ca = RootCAManager(pki_config, quiet=quiet).create_ca(ca_file, pki_config.validity)

    issued = CertificateIssuer(pki_config, quiet=quiet).create_cert(
        host,
        config.get_server_cert_path(directory),
        config.get_server_key_path(directory),
        ca,
        pki_config.validity
    )

    ca_pem = ca.public_pem()

    if not quiet:
        utils.console.print(f"\nCA éphémère ci-dessous, sauvegardée dans {ca_file}\n")
        utils.console.print(ca_pem, markup=False, highlight=False)

    return PKIArtifacts(
        directory=directory,
        ca_cert_path=ca_file,
        cert_path=issued.cert_path,
        key_path=issued.key_path,
        ca_pem=ca_pem,
        ca_certificate=ca.certificate,
        certificate=issued.certificate
    )


__all__ = ['generate_pki']
