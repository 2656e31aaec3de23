from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class User:
    id: str
    username: str
    role: str = "user"
    active: bool = True

    def to_dict(self) -> dict:
        return asdict(self)
