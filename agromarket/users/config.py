"""Constantes du module utilisateurs."""

USER_ROLE_CONSUMER = "consumer"
USER_ROLE_PRODUCER = "producer"
