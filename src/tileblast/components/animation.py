from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(slots=True)
class TimedAnimation:
    """A render request being played back by the view layer.

    ``token`` is echoed back in the completion event; ``None`` marks
    fire-and-forget effects nobody waits on.
    """
    kind: str
    duration: float
    token: int | None = None
    elapsed: float = 0.0
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def progress(self) -> float:
        if self.duration <= 0:
            return 1.0
        return min(1.0, self.elapsed / self.duration)
