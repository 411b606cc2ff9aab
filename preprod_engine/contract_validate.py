import jsonschema

from .schema_loader import load_schema


def validate_breakdown_scenes(data: list) -> None:
    """Validate recovered breakdown scene objects against BreakdownScenes.v1.json.

    Raises jsonschema.ValidationError if non-conformant.
    """
    jsonschema.validate(data, load_schema("BreakdownScenes.v1.json"))


def validate_inventory(data: list) -> None:
    """Validate an owned-equipment list against EquipmentInventory.v1.json.

    Raises jsonschema.ValidationError if non-conformant.
    """
    jsonschema.validate(data, load_schema("EquipmentInventory.v1.json"))


def validate_generation_error(data: dict) -> None:
    """Validate an endpoint error body against GenerationError.v1.json.

    Raises jsonschema.ValidationError if non-conformant.
    """
    jsonschema.validate(data, load_schema("GenerationError.v1.json"))
