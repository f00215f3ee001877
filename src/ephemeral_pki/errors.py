"""
Exceptions de la PKI éphémère

Chaque erreur porte l'étape (stage) à laquelle l'amorçage a échoué:
"random", "ca", "leaf" ou "persistence".
"""

from pathlib import Path
from typing import Optional, Union


class PKIError(Exception):
    """Erreur de base de la PKI éphémère"""

    stage = "pki"

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        if stage is not None:
            self.stage = stage


class RandomnessError(PKIError):
    """Source d'aléa cryptographique indisponible (pas de repli)"""

    stage = "random"


class KeyGenerationError(PKIError):
    """Échec de la génération d'une paire de clés"""


class SigningError(PKIError):
    """Échec de construction, signature ou relecture d'un certificat"""


class PersistenceError(PKIError):
    """Échec d'écriture sur disque (répertoire, fichier ou permissions)"""

    stage = "persistence"

    def __init__(self, message: str, path: Union[str, Path], stage: Optional[str] = None):
        self.path = Path(path)
        super().__init__(f"{message}: {self.path}", stage)


__all__ = [
    'PKIError',
    'RandomnessError',
    'KeyGenerationError',
    'SigningError',
    'PersistenceError'
]
