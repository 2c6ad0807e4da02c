from dataclasses import dataclass
from typing import Tuple


@dataclass
class GeneratorConfig:
    max_attempts: int = 8
    # extra rooms drawn in [area // lo, area // hi)
    recruit_divisors: Tuple[int, int] = (15, 5)
    # extra links drawn in [area // lo, area // hi)
    link_divisors: Tuple[int, int] = (60, 40)
    recruit_retry_limit: int = 64
    link_retry_limit: int = 64

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        for name in ("recruit_divisors", "link_divisors"):
            lo, hi = getattr(self, name)
            if lo <= 0 or hi <= 0:
                raise ValueError(f"{name} must be positive")


__all__ = ["GeneratorConfig"]
