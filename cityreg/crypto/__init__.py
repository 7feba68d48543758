"""Encryption collaborator.

The registry never interprets encrypted payloads; it only stores the string
an :class:`Encryptor` returns and displays a short prefix of it.
"""

from cityreg.crypto.encryptor import Encryptor, SimulatedFHEEncryptor

__all__ = ["Encryptor", "SimulatedFHEEncryptor"]
