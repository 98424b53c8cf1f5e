"""
Session assembly and grading.

- filters: SessionFilter validation
- aircraft: aircraft tag families
- assembler: SessionAssembler / SessionResult
- service: SessionService / SessionSummary (feedback into review and progress)
"""

from src.sessions.aircraft import aircraft_matches, canonical_aircraft
from src.sessions.assembler import SessionAssembler, SessionResult
from src.sessions.filters import SessionFilter
from src.sessions.service import SessionService, SessionSummary

__all__ = [
    "SessionFilter",
    "SessionAssembler",
    "SessionResult",
    "SessionService",
    "SessionSummary",
    "aircraft_matches",
    "canonical_aircraft",
]
