from typing import Any, Dict, Type
from jsonschema import validate, ValidationError
from pydantic import BaseModel
from tasktrack.logs import get_logger

log = get_logger("data.validate")

JSON_SCHEMA_DRAFT = "https://json-schema.org/draft/2020-12/schema"

# A saved blob is a list of records. Records are checked one by one when
# they are turned back into tasks, so only the outer shape is enforced here.
BLOB_SCHEMA: Dict[str, Any] = {
    "$schema": JSON_SCHEMA_DRAFT,
    "type": "array",
    "items": {"type": "object"},
}

def validate_blob(data: Any) -> bool:
    """
    Check decoded blob data against :data:`BLOB_SCHEMA`.

    Returns:
        True if the data is a list of objects, False otherwise.
    """
    try:
        validate(instance=data, schema=BLOB_SCHEMA)
        return True
    except ValidationError as e:
        log.error(f"Saved tasks FAILED validation: {e.message}")
        return False

def generate_schema(model: Type[BaseModel]) -> Dict[str, Any]:
    """Generate JSON schema from Pydantic model."""
    schema = model.model_json_schema()
    schema["$schema"] = JSON_SCHEMA_DRAFT
    return schema
