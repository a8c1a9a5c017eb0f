"""Core constants: built-in pattern catalogue and shared literal values.

BUILTIN_PATTERNS seeds settings.codegen_patterns; override the whole mapping
with CODEGEN_PATTERNS (JSON) to replace it.
"""

from typing import Any

# Only fixed-width templates set code_length. A SEQUENCE grows past its width
# once the counter does, and truncating it would repeat an earlier code.
BUILTIN_PATTERNS: dict[str, dict[str, Any]] = {
    # ORD-250609-HQ-0001
    "order": {
        "pattern": "{TYPE}-{DATE:ymd}-{LOCATION}-{SEQUENCE:4}",
        "type": "ORD",
        "location": "HQ",
        "sequence_length": 4,
    },
    # PO/NYC/20250609/00001
    "purchase_order": {
        "pattern": "PO/{LOCATION}/{DATE:Ymd}/{SEQUENCE:5}",
        "type": "PO",
        "location": "NYC",
        "sequence_length": 5,
    },
    # INV-202506-MUM-00001, sequence unique per year-month
    "invoice": {
        "pattern": "INV-{DATE:Ym}-{LOCATION}-{SEQUENCE:5}",
        "type": "INV",
        "location": "MUM",
        "date_format": "Ym",
        "sequence_length": 5,
    },
    # TRK-<uuid4>
    "tracking_id": {
        "pattern": "TRK-{UUID}",
        "type": "TRK",
        "use_sequence": False,
        "code_length": 40,
    },
    # ENT-2025-000001, sequence resets yearly
    "entity_code": {
        "pattern": "ENT-{DATE:Y}-{SEQUENCE:6}",
        "type": "ENT",
        "sequence_length": 6,
        "date_format": "Y",
    },
    # TXN-250609143000-A1B2C3D4
    "transaction_id": {
        "pattern": "TXN-{DATE:ymdHis}-{RANDOM:8}",
        "type": "TXN",
        "use_sequence": False,
        "code_length": 25,
    },
    # ADDR-BLR-X9Y2Z
    "address_code": {
        "pattern": "ADDR-{LOCATION}-{RANDOM:5}",
        "type": "ADDR",
        "location": "BLR",
        "use_sequence": False,
        "code_length": 14,
    },
    # CON-250609-0001
    "contact_code": {
        "pattern": "CON-{DATE:ymd}-{SEQUENCE:4}",
        "type": "CON",
        "sequence_length": 4,
    },
    # TAX-PNQ-2025-001, unique per location per year
    "tax_code": {
        "pattern": "TAX-{LOCATION}-{DATE:Y}-{SEQUENCE:3}",
        "type": "TAX",
        "location": "PNQ",
        "date_format": "Y",
        "sequence_length": 3,
    },
    # DEPT-SALES-FGH
    "department_code": {
        "pattern": "DEPT-{TYPE}-{RANDOM:3}",
        "type": "SALES",
        "use_sequence": False,
        "code_length": 14,
    },
}
