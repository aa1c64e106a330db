from dataclasses import dataclass
from typing import Dict, Optional


@dataclass
class SessionState:
    name: Optional[str] = None
    class_name: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.name and self.class_name)

    def clear(self) -> None:
        self.name = None
        self.class_name = None

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name or "", "className": self.class_name or ""}

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> "SessionState":
        data = data or {}
        return cls(name=data.get("name") or None, class_name=data.get("className") or None)
