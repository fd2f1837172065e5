from dataclasses import dataclass
from datetime import datetime


# fmt: off
@dataclass(frozen=True)
class ClickEventModel:
    id: str               # Unique identifier of the click event
    timestamp: datetime   # Time of the click (UTC)
    referrer: str         # Referrer/source of the click
    location: str         # Coarse-grained location, e.g. 'New York, US'
    user_agent: str       # User agent string of the client
# fmt: on
