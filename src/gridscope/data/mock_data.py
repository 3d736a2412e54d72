"""Mock table data for previews and tests.

Produces the inbound payload shape accepted by GridStore.load(): nine
columns covering every data type and N rows with record-style ids.
"""

from __future__ import annotations

import random
from datetime import date, timedelta
from typing import Any

OBJECT_ID = "Sample_Object__c"

FIRST_NAMES = [
    "John", "Jane", "Michael", "Sarah", "David", "Emily", "James", "Emma",
    "Robert", "Olivia", "William", "Sophia", "Richard", "Isabella", "Joseph",
    "Mia", "Thomas", "Charlotte", "Christopher", "Amelia",
]  # fmt: skip

LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller",
    "Davis", "Rodriguez", "Martinez", "Hernandez", "Lopez", "Gonzalez",
    "Wilson", "Anderson", "Thomas", "Taylor", "Moore", "Jackson", "Martin",
]  # fmt: skip

STATUSES = ["Open", "In Progress", "Closed", "On Hold", "Cancelled"]
PRIORITIES = ["Low", "Medium", "High", "Critical"]
ACTIONS = ["Review", "Update", "Complete", "Process", "Verify"]
SUBJECTS = ["documents", "records", "data", "files", "reports"]


def _quoted(values: list[str]) -> str:
    return ",".join(f"'{v}'" for v in values)


def generate_id(index: int, prefix: str = "a00") -> str:
    """Record-style id: prefix + 12-digit zero-padded index + 'ABC'."""
    return f"{prefix}{index:012d}ABC"


def random_date(rng: random.Random, start: date, end: date) -> str:
    """ISO date (YYYY-MM-DD) uniformly between start and end."""
    span = max(0, (end - start).days)
    return (start + timedelta(days=rng.randint(0, span))).isoformat()


def generate_columns() -> list[dict[str, Any]]:
    def col(field_id: str, label: str, data_type: str, values: str | None = None):
        return {
            "objectId": OBJECT_ID,
            "fieldId": field_id,
            "label": label,
            "dataType": data_type,
            "values": values,
        }

    return [
        col("Name", "Name", "text"),
        col("Amount__c", "Amount", "number"),
        col("Status__c", "Status", "picklist", _quoted(STATUSES)),
        col("Priority__c", "Priority", "picklist", _quoted(PRIORITIES)),
        col("Start_Date__c", "Start Date", "date"),
        col("Due_Date__c", "Due Date", "date"),
        col("Is_Active__c", "Active", "boolean"),
        col("Is_Approved__c", "Approved", "boolean"),
        col("Description__c", "Description", "text"),
    ]


def generate_rows(
    count: int = 200, rng: random.Random | None = None, id_field: str = "id"
) -> list[dict[str, Any]]:
    """Generate mock rows.

    Args:
        count: Number of rows
        rng: Random source; pass a seeded instance for repeatable data
        id_field: Key to store each row's id under
    """
    rng = rng or random.Random()
    rows = []
    for i in range(1, count + 1):
        start = random_date(rng, date(2024, 1, 1), date(2025, 7, 1))
        due = random_date(rng, date.fromisoformat(start), date(2025, 12, 31))
        rows.append(
            {
                id_field: generate_id(i),
                "Name": f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)} {i}",
                "Amount__c": round(rng.uniform(100, 50000), 2),
                "Status__c": rng.choice(STATUSES),
                "Priority__c": rng.choice(PRIORITIES),
                "Start_Date__c": start,
                "Due_Date__c": due,
                "Is_Active__c": rng.random() > 0.3,
                "Is_Approved__c": rng.random() > 0.5,
                "Description__c": (
                    f"Task item {i} - {rng.choice(ACTIONS)} {rng.choice(SUBJECTS)}"
                ),
            }
        )
    return rows


def generate_mock_table_data(
    row_count: int = 200, rng: random.Random | None = None
) -> dict[str, list[dict[str, Any]]]:
    """Complete payload: ``{"columns": [...], "rows": [...]}``."""
    return {"columns": generate_columns(), "rows": generate_rows(row_count, rng)}
