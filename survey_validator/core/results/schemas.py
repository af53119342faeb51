"""
JSON Schema definitions for survey validation data.

This module defines JSON schemas for validating input/output data structures.
Schemas follow JSON Schema Draft-07.
"""

from typing import Dict, Any, List, Optional
import json


# ============================================================================
# Input Schemas
# ============================================================================

SURVEY_POINT_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Survey Point",
    "description": "A measured survey point",
    "type": "object",
    "properties": {
        "point_id": {
            "type": "string",
            "description": "Unique identifier for the point"
        },
        "id": {
            "type": "string",
            "description": "Alternative key for point ID (CSV compatibility)"
        },
        "easting": {
            "type": "number",
            "description": "X coordinate in meters"
        },
        "northing": {
            "type": "number",
            "description": "Y coordinate in meters"
        },
        "height": {
            "type": ["number", "null"],
            "description": "Elevation in meters (optional)"
        },
        "survey_type": {
            "type": "string",
            "description": "Point role: traverse, control or detail"
        },
        "type": {
            "type": "string",
            "description": "Alternative key for survey_type"
        },
        "coordinate_system": {
            "type": ["string", "null"],
            "description": "Coordinate system label"
        }
    },
    "required": ["easting", "northing"]
}

SURVEY_DATA_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Survey Data",
    "description": "Project dataset submitted for validation",
    "type": "object",
    "properties": {
        "project_id": {"type": "string"},
        "coordinate_system": {"type": ["string", "null"]},
        "points": {
            "type": "array",
            "items": {"$ref": "#/definitions/survey_point"}
        }
    },
    "required": ["points"],
    "definitions": {
        "survey_point": SURVEY_POINT_SCHEMA
    }
}

LEVELING_OBSERVATION_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Leveling Observation",
    "description": "One row of a level book",
    "type": "object",
    "properties": {
        "point_id": {"type": "string", "minLength": 1},
        "backsight": {"type": ["number", "null"], "minimum": 0},
        "intermediate": {"type": ["number", "null"], "minimum": 0},
        "foresight": {"type": ["number", "null"], "minimum": 0},
        "bs": {"type": ["number", "null"], "minimum": 0},
        "is": {"type": ["number", "null"], "minimum": 0},
        "fs": {"type": ["number", "null"], "minimum": 0},
        "distance": {
            "type": "number",
            "minimum": 0,
            "description": "Sight distance in meters"
        }
    },
    "required": ["point_id"]
}

TRAVERSE_OPTIONS_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Traverse Options",
    "description": "Acceptance settings for the Bowditch adjustment",
    "type": "object",
    "properties": {
        "required_precision": {
            "type": "number",
            "exclusiveMinimum": 0,
            "default": 5000
        },
        "tolerance_class": {
            "type": "string",
            "enum": ["first_order", "second_order", "third_order", "engineering", "construction"]
        }
    }
}


# ============================================================================
# Output Schemas
# ============================================================================

VALIDATION_ISSUE_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Validation Issue",
    "type": "object",
    "properties": {
        "check_name": {"type": "string"},
        "severity": {"type": "string", "enum": ["error", "warning", "info"]},
        "description": {"type": "string"},
        "point_ids": {"type": "array", "items": {"type": "string"}},
        "details": {"type": "object"}
    },
    "required": ["check_name", "severity", "description"]
}

TRAVERSE_RESULT_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Traverse Adjustment",
    "type": "object",
    "properties": {
        "status": {"type": "string", "enum": ["PASS", "FAIL", "ERROR"]},
        "message": {"type": "string"},
        "traverse_type": {"type": ["string", "null"], "enum": ["closed", "open", None]},
        "misclosure_e": {"type": "number"},
        "misclosure_n": {"type": "number"},
        "linear_misclosure": {"type": "number", "minimum": 0},
        "total_distance": {"type": "number", "minimum": 0},
        "closure_ratio": {"type": "string"},
        "precision": {"type": ["number", "null"]},
        "required_precision": {"type": "number"},
        "legs": {"type": "array", "items": {"type": "object"}},
        "adjusted_points": {"type": "array", "items": {"type": "object"}},
        "suggested_fixes": {"type": "array", "items": {"type": "string"}}
    },
    "required": ["status", "message"]
}

VALIDATION_REPORT_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Validation Report",
    "description": "Complete output of a validation run",
    "type": "object",
    "properties": {
        "project_id": {"type": "string"},
        "timestamp": {"type": "string", "format": "date-time"},
        "status": {"type": "string", "enum": ["PASS", "WARNING", "FAIL"]},
        "confidence_score": {"type": "number", "minimum": 0, "maximum": 100},
        "summary": {
            "type": "object",
            "properties": {
                "total_points": {"type": "integer", "minimum": 0},
                "traverse_points": {"type": "integer", "minimum": 0},
                "control_points": {"type": "integer", "minimum": 0},
                "detail_points": {"type": "integer", "minimum": 0},
                "points_with_height": {"type": "integer", "minimum": 0},
                "bounding_box": {"type": "object"},
                "centroid_easting": {"type": "number"},
                "centroid_northing": {"type": "number"}
            }
        },
        "issues": {
            "type": "array",
            "items": {"$ref": "#/definitions/validation_issue"}
        },
        "checks_performed": {
            "type": "array",
            "items": {"type": "string"}
        },
        "processing_time_ms": {"type": "number", "minimum": 0},
        "traverse_adjustment": {"$ref": "#/definitions/traverse_result"}
    },
    "required": ["project_id", "status", "confidence_score", "summary", "issues", "checks_performed"],
    "definitions": {
        "validation_issue": VALIDATION_ISSUE_SCHEMA,
        "traverse_result": TRAVERSE_RESULT_SCHEMA
    }
}

_SCHEMAS: Dict[str, Dict[str, Any]] = {
    "survey_point": SURVEY_POINT_SCHEMA,
    "survey_data": SURVEY_DATA_SCHEMA,
    "leveling_observation": LEVELING_OBSERVATION_SCHEMA,
    "traverse_options": TRAVERSE_OPTIONS_SCHEMA,
    "validation_issue": VALIDATION_ISSUE_SCHEMA,
    "traverse_result": TRAVERSE_RESULT_SCHEMA,
    "report": VALIDATION_REPORT_SCHEMA,
}


# ============================================================================
# Validation Functions
# ============================================================================

def validate_json(data: Dict[str, Any], schema: Dict[str, Any]) -> List[str]:
    """
    Validate JSON data against a schema.

    Only the top level is checked: required fields, declared types, enums
    and numeric bounds. Nested objects and ``$ref`` are not followed.

    Args:
        data: Dictionary to validate
        schema: JSON schema to validate against

    Returns:
        List of validation error messages (empty if valid)
    """
    if not isinstance(data, dict):
        return [f"Expected object, got {type(data).__name__}"]

    errors = []

    for field in schema.get("required", []):
        if field not in data:
            errors.append(f"Missing required field: {field}")

    properties = schema.get("properties", {})
    for field, value in data.items():
        if field not in properties:
            continue
        prop_schema = properties[field]

        expected_type = prop_schema.get("type")
        if expected_type and not _check_type(value, expected_type):
            errors.append(f"Field '{field}' has wrong type: expected {expected_type}")
            continue

        if "enum" in prop_schema and value not in prop_schema["enum"]:
            errors.append(f"Field '{field}' must be one of {prop_schema['enum']}")

        if isinstance(value, (int, float)) and not isinstance(value, bool):
            if "minimum" in prop_schema and value < prop_schema["minimum"]:
                errors.append(f"Field '{field}' is below minimum: {prop_schema['minimum']}")
            if "maximum" in prop_schema and value > prop_schema["maximum"]:
                errors.append(f"Field '{field}' is above maximum: {prop_schema['maximum']}")
            if "exclusiveMinimum" in prop_schema and value <= prop_schema["exclusiveMinimum"]:
                errors.append(f"Field '{field}' must be greater than {prop_schema['exclusiveMinimum']}")

        if isinstance(value, str) and "minLength" in prop_schema and len(value) < prop_schema["minLength"]:
            errors.append(f"Field '{field}' is shorter than {prop_schema['minLength']}")

    return errors


def _check_type(value: Any, expected_type: Any) -> bool:
    """Check if value matches expected JSON schema type(s)."""
    if isinstance(expected_type, list):
        return any(_check_type(value, t) for t in expected_type)

    # bool is an int subclass but not a JSON number
    if isinstance(value, bool) and expected_type in ("number", "integer"):
        return False

    type_map = {
        "string": str,
        "number": (int, float),
        "integer": int,
        "boolean": bool,
        "array": list,
        "object": dict,
        "null": type(None)
    }

    if expected_type in type_map:
        return isinstance(value, type_map[expected_type])

    return True


def get_schema(schema_name: str) -> Optional[Dict[str, Any]]:
    """
    Get a schema by name.

    Args:
        schema_name: Name of the schema (e.g., 'survey_point', 'survey_data', 'report')

    Returns:
        Schema dictionary or None if not found
    """
    return _SCHEMAS.get(schema_name)


def export_schemas(output_path: str) -> None:
    """
    Export all schemas to a JSON file.

    Args:
        output_path: Path to write the schemas file
    """
    with open(output_path, 'w', encoding="utf-8") as f:
        json.dump(_SCHEMAS, f, indent=2)
