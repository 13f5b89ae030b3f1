"""Canal domain model."""

from .controller import AdmissionDecision, CanalController, CanalState
from .ship import Ship, ShipClass, Side
from .locks import LockComplex
from .accidents import AccidentEvent, AccidentGenerator, Repair

__all__ = [
    "AdmissionDecision",
    "CanalController",
    "CanalState",
    "Ship",
    "ShipClass",
    "Side",
    "LockComplex",
    "AccidentEvent",
    "AccidentGenerator",
    "Repair",
]
