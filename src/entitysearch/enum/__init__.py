from .field_type import FieldType as FieldType
