"""Vault Connectors Meta information.
   Vault Connectors expose keys and secrets through a uniform interface.
"""
__title__ = 'vault_connectors'
__description__ = (
   'Vault Connectors expose key management and secret storage '
   'over local entity storage or HashiCorp Vault.'
)
__version__ = '0.3.0'
__copyright__ = 'Copyright (c) 2024 Jesus Lara'
__author__ = 'Jesus Lara'
__author_email__ = 'jesuslarag@gmail.com'
__license__ = 'Apache-2.0'
__url__ = 'https://github.com/phenobarbital/vault-connectors'
