"""
Audit event emitted after a successful brokerage operation.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field

from claimdesk.core.enums import AuditAction


class AuditEvent(BaseModel):
    """What happened, to which record, by whom."""

    action: AuditAction
    entity_type: str
    entity_id: str
    actor_id: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
