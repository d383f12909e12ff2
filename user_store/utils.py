"""
User Store Utilities

Small helpers shared by the models and the read/write APIs:
- UTC timestamp creation and formatting (the store only ever holds UTC)
- UpdateExpression building with reserved-word safe attribute placeholders
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional, Tuple

logger = logging.getLogger(__name__)


# =============================================================================
# Timestamps (UTC only)
# =============================================================================

def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Convert datetime to UTC.

    Naive datetimes are assumed to already be in UTC.

    Examples:
        >>> to_utc(datetime(2024, 1, 1, 10, 0))  # -> 2024-01-01 10:00:00+00:00
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def format_timestamp(dt: datetime) -> str:
    """Render a datetime as the fixed-width ISO-8601 string stored in DynamoDB.

    Microseconds are always written so stored values keep a single width.
    """
    return to_utc(dt).isoformat(timespec='microseconds')


# =============================================================================
# Expression Building
# =============================================================================

def build_update_expression(
    set_values: Dict[str, Any],
    remove_attributes: Iterable[str] = ()
) -> Tuple[str, Dict[str, str], Dict[str, Any]]:
    """Build a SET/REMOVE UpdateExpression.

    Attribute names are always aliased (``#a0``) so reserved words never clash.

    Args:
        set_values: Attributes to write, name -> value
        remove_attributes: Attributes to delete from the item

    Returns:
        Tuple of (update_expression, expression_attribute_names,
        expression_attribute_values)

    Example:
        >>> build_update_expression({'Username': 'ada'}, ['Summary'])
        ('SET #a0 = :v0 REMOVE #a1', {'#a0': 'Username', '#a1': 'Summary'}, {':v0': 'ada'})
    """
    names: Dict[str, str] = {}
    values: Dict[str, Any] = {}
    set_parts = []
    remove_parts = []

    for index, (attribute, value) in enumerate(set_values.items()):
        name_placeholder = f"#a{index}"
        value_placeholder = f":v{index}"
        names[name_placeholder] = attribute
        values[value_placeholder] = value
        set_parts.append(f"{name_placeholder} = {value_placeholder}")

    offset = len(set_parts)
    for index, attribute in enumerate(remove_attributes, start=offset):
        name_placeholder = f"#a{index}"
        names[name_placeholder] = attribute
        remove_parts.append(name_placeholder)

    clauses = []
    if set_parts:
        clauses.append("SET " + ", ".join(set_parts))
    if remove_parts:
        clauses.append("REMOVE " + ", ".join(remove_parts))

    if not clauses:
        raise ValueError("Update expression needs at least one SET or REMOVE attribute")

    return " ".join(clauses), names, values
