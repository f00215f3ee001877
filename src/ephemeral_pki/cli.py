#!/usr/bin/env python3
"""
Interface en ligne de commande de la PKI éphémère

    ephemeral-pki generate HOST [--dir DIR] [--days N] [--key-size N] [--quiet]
    ephemeral-pki secret [LENGTH]

Toute erreur de la PKI termine le processus avec le code 1.
"""

import argparse
import sys
from dataclasses import replace
from datetime import timedelta
from typing import List, Optional

from rich.markup import escape

from . import __version__, config, utils
from .bootstrap import generate_pki
from .errors import PKIError

STAGE_LABELS = {
    "random": "source d'aléa",
    "ca": "création de la CA",
    "leaf": "signature du certificat serveur",
    "persistence": "écriture sur disque",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ephemeral-pki",
        description="Crée une CA éphémère et un certificat serveur signé, sans CA externe."
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Générer la CA et le certificat serveur")
    generate.add_argument("host", help="Nom DNS ou adresse IP du serveur")
    generate.add_argument("--dir", dest="directory", help=f"Répertoire de sortie (défaut: ${config.HOME_ENV_VAR}/certs)")
    generate.add_argument("--days", type=int, default=config.VALIDITY_PERIOD.days, help="Durée de validité (jours)")
    generate.add_argument("--key-size", type=int, default=config.RSA_KEY_SIZE, help="Taille clé RSA (bits)")
    generate.add_argument("--progress", action="store_true", help="Afficher la progression des clés")
    generate.add_argument("--quiet", action="store_true", help="N'afficher que le certificat de la CA")

    secret = subparsers.add_parser("secret", help="Générer un secret aléatoire")
    secret.add_argument("length", type=int, nargs="?", default=config.DEFAULT_SECRET_LENGTH,
                        help="Longueur du secret")

    return parser


def run_generate(args: argparse.Namespace) -> int:
    if args.days <= 0:
        utils.print_error(f"Durée de validité invalide: {args.days}")
        return 2

    pki_config = replace(
        config.DEFAULT_CONFIG,
        validity=timedelta(days=args.days),
        key_size=args.key_size,
        show_progress=args.progress
    )

    artifacts = generate_pki(args.host, args.directory, pki_config, quiet=args.quiet)

    if args.quiet:
        sys.stdout.write(artifacts.ca_pem)
    else:
        utils.print_success(f"Certificat serveur: {utils.describe_path(artifacts.cert_path)}")
        utils.print_success(f"Clé privée: {utils.describe_path(artifacts.key_path)}")
    return 0


def run_secret(args: argparse.Namespace) -> int:
    if args.length < 0:
        utils.print_error(f"Longueur invalide: {args.length}")
        return 2

    sys.stdout.write(utils.random_string(args.length, config.DEFAULT_CONFIG.alphabet) + "\n")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Point d'entrée du script `ephemeral-pki`"""
    args = build_parser().parse_args(argv)

    try:
        if args.command == "generate":
            return run_generate(args)
        return run_secret(args)
    except PKIError as e:
        utils.print_error(f"Échec ({STAGE_LABELS.get(e.stage, e.stage)}): {escape(str(e))}")
    except ValueError as e:
        utils.print_error(escape(str(e)))
    except KeyboardInterrupt:
        utils.print_warning("Interrompu par l'utilisateur")
    return 1


if __name__ == "__main__":
    sys.exit(main())
