"""Domain types for the dictionary loader: records, attribute types and identifiers.

The domain layer is free of IO side effects.
"""

from raddict.domain.ids import (
    attribute_code_of,
    encode_attribute_id,
    is_vendor_specific,
    vendor_of,
)
from raddict.domain.models import (
    TYPE_KEYWORDS,
    AttributeDef,
    AttributeType,
    ValueDef,
    VendorDef,
    attribute_type_from_keyword,
)

__all__ = [
    "TYPE_KEYWORDS",
    "AttributeDef",
    "AttributeType",
    "ValueDef",
    "VendorDef",
    "attribute_code_of",
    "attribute_type_from_keyword",
    "encode_attribute_id",
    "is_vendor_specific",
    "vendor_of",
]
