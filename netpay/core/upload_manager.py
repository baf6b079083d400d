"""
Upload Manager for batch salary files.
Provides a consistent pipeline: load -> map -> check required fields.
Nothing is persisted; loaded rows are handed straight back to the caller.
"""
import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from .schemas import SchemaRegistry

@dataclass
class ColumnMapping:
    """Maps uploaded columns to schema fields."""
    source_column: str
    target_field: str
    transform: Optional[str] = None  # 'upper', 'lower', 'strip'

class UploadManager:
    """Loads CSV/Excel/JSON files and shapes them to an entity schema."""

    def __init__(self, entity_type: str = 'salary_inputs'):
        self.entity_type = entity_type
        self.schema_registry = SchemaRegistry()

    def get_schema(self) -> Dict[str, Any]:
        """Get JSON schema for the entity type."""
        return self.schema_registry.get_schema(self.entity_type)

    def generate_template(self) -> pd.DataFrame:
        """Generate a one-row sample template from the schema."""
        properties = self.get_schema().get('properties', {})
        columns = []
        sample_data = {}

        for field, field_schema in properties.items():
            columns.append(field)
            if 'example' in field_schema:
                sample_data[field] = field_schema['example']
            elif field_schema.get('type') == 'string':
                sample_data[field] = f"Sample {field}"
            else:
                sample_data[field] = ""

        return pd.DataFrame([sample_data]).reindex(columns=columns)

    def load_file(self, file_path: Union[str, Path]) -> pd.DataFrame:
        """Load data from CSV, Excel, or JSON file. Every cell is read as text."""
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        file_ext = file_path.suffix.lower()

        try:
            if file_ext == '.csv':
                return pd.read_csv(file_path, dtype=str, keep_default_na=False)
            elif file_ext in ['.xlsx', '.xls']:
                return pd.read_excel(file_path, dtype=str, keep_default_na=False)
            elif file_ext == '.json':
                with open(file_path, 'r') as f:
                    data = json.load(f)
                if isinstance(data, list):
                    return pd.DataFrame(data)
                return pd.DataFrame([data])
        except Exception as e:
            raise ValueError(f"Error loading file: {str(e)}")
        raise ValueError(f"Unsupported file format: {file_ext}")

    def map_columns(self, df: pd.DataFrame, mappings: List[ColumnMapping]) -> pd.DataFrame:
        """Apply column mappings and transformations."""
        column_map = {m.source_column: m.target_field for m in mappings}
        mapped_df = df.rename(columns=column_map)

        for mapping in mappings:
            if mapping.target_field in mapped_df.columns and mapping.transform:
                col = mapping.target_field
                if mapping.transform == 'upper':
                    mapped_df[col] = mapped_df[col].astype(str).str.upper()
                elif mapping.transform == 'lower':
                    mapped_df[col] = mapped_df[col].astype(str).str.lower()
                elif mapping.transform == 'strip':
                    mapped_df[col] = mapped_df[col].astype(str).str.strip()

        return mapped_df

    def check_text_fields(self, row: Dict[str, Any]) -> List[str]:
        """Length and pattern checks for string fields in one row."""
        properties = self.get_schema().get('properties', {})
        problems = []
        for field, field_schema in properties.items():
            value = row.get(field)
            if field_schema.get('type') != 'string' or not isinstance(value, str) or value == '':
                continue
            max_length = field_schema.get('maxLength')
            if max_length and len(value) > max_length:
                problems.append(f"{field}: exceeds maximum length {max_length}")
            pattern = field_schema.get('pattern')
            if pattern and not re.match(pattern, value):
                problems.append(f"{field}: does not match required pattern")
        return problems

    def missing_columns(self, df: pd.DataFrame) -> List[str]:
        """Required schema fields absent from the frame."""
        required = self.get_schema().get('required', [])
        return [field for field in required if field not in df.columns]
