"""
Fonctions utilitaires pour la PKI éphémère
"""

import os
import hashlib
import secrets
import tempfile
from pathlib import Path
from datetime import datetime, timezone
from typing import Union
from cryptography import x509
from cryptography.hazmat.primitives import serialization
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from . import config
from .errors import PersistenceError, RandomnessError

# Console Rich pour l'affichage
console = Console()


# ============================================
# 🔐 FONCTIONS CRYPTOGRAPHIQUES
# ============================================

def generate_serial_number(bits: int = config.SERIAL_NUMBER_BITS) -> int:
    """
    Génère un numéro de série aléatoire de 128 bits

    Le numéro est tiré dans [1, 2**bits): RFC 5280 impose un entier positif.

    Raises:
        RandomnessError: Si la source d'aléa système est indisponible
    """
    try:
        return secrets.randbelow((1 << bits) - 1) + 1
    except (OSError, NotImplementedError) as e:
        raise RandomnessError(f"Impossible de générer un numéro de série: {e}") from e


def random_string(length: int, alphabet: str = config.RANDOM_STRING_CHARS) -> str:
    """
    Génère un secret aléatoire de longueur exacte `length`

    Chaque octet aléatoire est réduit modulo len(alphabet). Avec 65
    caractères, cette réduction introduit un léger biais statistique connu
    et accepté (256 n'est pas un multiple de 65); le conserver garde la
    distribution identique aux secrets déjà générés.

    Args:
        length: Nombre de caractères
        alphabet: Caractères autorisés

    Returns:
        str: Secret aléatoire

    Raises:
        ValueError: Si la longueur est négative
        RandomnessError: Si la source d'aléa système est indisponible
    """
    if length < 0:
        raise ValueError(f"Longueur invalide: {length}")

    try:
        data = secrets.token_bytes(length)
    except (OSError, NotImplementedError) as e:
        raise RandomnessError(f"Impossible de générer un secret aléatoire: {e}") from e

    return ''.join(alphabet[b % len(alphabet)] for b in data)


def calculate_fingerprint(cert: x509.Certificate) -> str:
    """
    Calcule l'empreinte SHA-256 d'un certificat

    Returns:
        str: Empreinte au format hexadécimal avec séparateurs (ex: "A1:B2:C3:...")
    """
    cert_bytes = cert.public_bytes(serialization.Encoding.DER)
    fingerprint = hashlib.sha256(cert_bytes).hexdigest().upper()
    return ':'.join(fingerprint[i:i + 2] for i in range(0, len(fingerprint), 2))


# ============================================
# 📁 GESTION DES FICHIERS
# ============================================

def ensure_directory(path: Path, permissions: int = config.DIR_PERMISSIONS) -> None:
    """
    Crée un répertoire (et ses parents) réservé au propriétaire

    Un répertoire neuf reçoit exactement `permissions`. Un répertoire
    existant perd les droits hors de `permissions` mais n'en gagne aucun:
    un répertoire en lecture seule le reste.

    Args:
        path: Chemin du répertoire à créer
        permissions: Permissions en octal (ex: 0o700)

    Raises:
        PersistenceError: Si la création ou le chmod échoue
    """
    path = Path(path)
    try:
        existed = path.is_dir()
        path.mkdir(parents=True, exist_ok=True)
        if existed:
            permissions = get_permissions(path) & permissions
        set_file_permissions(path, permissions)
    except OSError as e:
        raise PersistenceError(f"Impossible de préparer le répertoire ({e.strerror or e})", path) from e


def set_file_permissions(filepath: Path, permissions: int) -> None:
    """
    Définit les permissions d'un fichier (Unix uniquement)
    Sur Windows, cette fonction ne fait rien
    """
    if os.name != 'nt':  # Pas Windows
        os.chmod(filepath, permissions)


def write_file_atomic(filepath: Path, data: bytes, permissions: int) -> Path:
    """
    Écrit un fichier de manière atomique

    Les données sont écrites dans un fichier temporaire du même répertoire
    (créé en 0600), synchronisées, puis renommées sur la cible. Le fichier
    final n'existe donc jamais à moitié écrit ni avec de mauvaises
    permissions.

    Args:
        filepath: Chemin du fichier de sortie
        data: Contenu à écrire
        permissions: Permissions finales en octal

    Returns:
        Path: Chemin du fichier écrit

    Raises:
        PersistenceError: Si l'écriture échoue (le fichier temporaire est supprimé)
    """
    filepath = Path(filepath)

    try:
        fd, tmp_name = tempfile.mkstemp(dir=filepath.parent, prefix=f".{filepath.name}.", suffix=".tmp")
    except OSError as e:
        raise PersistenceError(f"Impossible de créer le fichier ({e.strerror or e})", filepath) from e

    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        set_file_permissions(Path(tmp_name), permissions)
        os.replace(tmp_name, filepath)
    except OSError as e:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise PersistenceError(f"Impossible d'écrire le fichier ({e.strerror or e})", filepath) from e

    return filepath


def get_permissions(filepath: Path) -> int:
    """Retourne les bits de permission d'un fichier (ex: 0o600)"""
    return filepath.stat().st_mode & 0o777


# ============================================
# 📅 GESTION DES DATES
# ============================================

def now_utc() -> datetime:
    """
    Retourne la date/heure actuelle en UTC avec timezone

    Returns:
        datetime: Date/heure actuelle en UTC
    """
    return datetime.now(timezone.utc)


def format_datetime(dt: datetime, fmt: str = "%Y-%m-%d %H:%M:%S UTC") -> str:
    return dt.strftime(fmt)


# ============================================
# 🎨 AFFICHAGE CLI AVEC RICH
# ============================================

def print_success(message: str) -> None:
    """Affiche un message de succès avec symbole et couleur verte"""
    console.print(f"[green]{config.CLI_SYMBOLS['success']} {message}[/green]")


def print_error(message: str) -> None:
    """Affiche un message d'erreur avec symbole et couleur rouge"""
    console.print(f"[red]{config.CLI_SYMBOLS['error']} {message}[/red]")


def print_warning(message: str) -> None:
    """Affiche un avertissement avec symbole et couleur jaune"""
    console.print(f"[yellow]{config.CLI_SYMBOLS['warning']} {message}[/yellow]")


def print_info(message: str) -> None:
    """Affiche une information avec symbole et couleur cyan"""
    console.print(f"[cyan]{config.CLI_SYMBOLS['info']} {message}[/cyan]")


def print_header(title: str) -> None:
    """
    Affiche un en-tête stylisé avec bordure

    Args:
        title: Titre à afficher
    """
    console.print()
    console.print(Panel.fit(
        f"[bold magenta]{title}[/bold magenta]",
        border_style="magenta",
        box=box.DOUBLE
    ))
    console.print()


def create_table(title: str, columns: list) -> Table:
    """
    Crée une table Rich stylisée prête à être remplie

    Args:
        title: Titre de la table
        columns: Liste des noms de colonnes

    Returns:
        Table: Table Rich
    """
    table = Table(
        title=title,
        title_style="bold cyan",
        border_style="blue",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )

    for col in columns:
        table.add_column(col)

    return table


def display_cert_info(cert: x509.Certificate) -> None:
    """
    Affiche les informations d'un certificat X.509 de manière formatée

    Args:
        cert: Certificat X.509 à afficher
    """
    table = create_table(f"{config.CLI_SYMBOLS['cert']} Informations du certificat", ["Champ", "Valeur"])

    table.add_row("Sujet", f"[cyan]{cert.subject.rfc4514_string()}[/cyan]")
    table.add_row("Émetteur", f"[yellow]{cert.issuer.rfc4514_string()}[/yellow]")
    table.add_row("N° Série", f"[green]{cert.serial_number:X}[/green]")
    table.add_row("Valide de", format_datetime(cert.not_valid_before_utc))
    table.add_row("Valide jusqu'à", format_datetime(cert.not_valid_after_utc))

    # Subject Alternative Names (certificats serveur)
    try:
        san = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName).value
    except x509.ExtensionNotFound:
        san = None
    if san is not None:
        names = san.get_values_for_type(x509.DNSName)
        names += [str(ip) for ip in san.get_values_for_type(x509.IPAddress)]
        table.add_row("SAN", ", ".join(names))

    table.add_row("Empreinte SHA-256", f"[dim]{calculate_fingerprint(cert)}[/dim]")

    console.print(table)


def describe_path(path: Union[str, Path]) -> str:
    """Chemin affichable avec ses permissions (ex: 'server.key (600)')"""
    path = Path(path)
    if not path.exists():
        return str(path)
    return f"{path} ({get_permissions(path):o})"


# ============================================
# 🎨 EXPORTS
# ============================================

__all__ = [
    # Crypto
    'generate_serial_number', 'random_string', 'calculate_fingerprint',

    # Fichiers
    'ensure_directory', 'set_file_permissions', 'write_file_atomic', 'get_permissions',

    # Dates
    'now_utc', 'format_datetime',

    # Affichage CLI
    'print_success', 'print_error', 'print_warning', 'print_info', 'print_header',
    'create_table', 'display_cert_info', 'describe_path',

    # Console Rich
    'console'
]
