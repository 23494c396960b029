"""
Module: falseness

Purpose:
    Truth checking of blocks, methods and sets of course heads.

Key Functions:
    - find_collisions(): Direct check of a block
    - check_method(): Direct check of a plain course
    - check_heads(): Direct check of many copies of a unit
    - check_many(): Parallel checks of many candidates

Key Classes:
    - FalsenessDetector: Strategy dispatch with cached table
    - FalsenessTable: Relational index of false relative heads
    - FalsenessReport / Collision: Results
    - FalsenessConfig: Strategy and limits
"""

from .config import FalsenessConfig, Strategy, Unit
from .detector import FalsenessDetector
from .direct import check_courses, check_heads, check_method, find_collisions, unit_block
from .parallel import FalsenessCheckQueue, check_many
from .relational import FalsenessTable
from .report import Collision, FalsenessReport

__all__ = [
    "Collision",
    "FalsenessCheckQueue",
    "FalsenessConfig",
    "FalsenessDetector",
    "FalsenessReport",
    "FalsenessTable",
    "Strategy",
    "Unit",
    "check_courses",
    "check_heads",
    "check_many",
    "check_method",
    "find_collisions",
    "unit_block",
]
