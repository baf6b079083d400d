"""
Schema Registry for uploadable entity types.
Describes the columns a batch file may carry and drives template generation.
"""
from typing import Dict, Any

from netpay.core.config import settings

class SchemaRegistry:
    """Registry of JSON schemas for uploadable entity types."""

    def __init__(self):
        self.schemas = self._initialize_schemas()

    def get_schema(self, entity_type: str) -> Dict[str, Any]:
        """Get schema for entity type."""
        if entity_type not in self.schemas:
            raise ValueError(f"Schema not found for entity type: {entity_type}")
        return self.schemas[entity_type]

    def _initialize_schemas(self) -> Dict[str, Dict[str, Any]]:
        return {
            'salary_inputs': self._salary_inputs_schema(),
        }

    def _amount(self, example: float) -> Dict[str, Any]:
        return {
            "type": "number",
            "minimum": 0,
            "maximum": float(settings.MAX_INPUT_AMOUNT),
            "multipleOf": 0.01,
            "example": example
        }

    def _salary_inputs_schema(self) -> Dict[str, Any]:
        """Schema for one employee's monthly salary inputs."""
        return {
            "type": "object",
            "required": ["basic_salary"],
            "properties": {
                "employee_id": {
                    "type": "string",
                    "minLength": 1,
                    "maxLength": 20,
                    "example": "EMP001"
                },
                "full_name": {
                    "type": "string",
                    "maxLength": 100,
                    "example": "Jane Wanjiku Kamau"
                },
                "basic_salary": self._amount(50000.00),
                "benefits": self._amount(0.00),
                "pension_contribution": self._amount(0.00),
                "mortgage_interest": self._amount(0.00),
                "medical_fund_contribution": self._amount(0.00)
            }
        }
