from typing import Any, Dict

from agromarket.addresses.models import AddressRead

SNAPSHOT_FIELDS = ("street", "number", "complement", "district", "city", "state", "zip_code")


def build_address_snapshot(address: AddressRead) -> Dict[str, Any]:
    """Copie par valeur des champs d'adresse à figer dans la commande."""
    snapshot: Dict[str, Any] = {"address_id": address.id}
    for field in SNAPSHOT_FIELDS:
        snapshot[field] = getattr(address, field)
    return snapshot
