from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class DashboardContext:
    user_id: str
    user_email: Optional[str] = None
    user_name: str = "Friend"
    streak: Dict[str, Any] = field(default_factory=dict)
