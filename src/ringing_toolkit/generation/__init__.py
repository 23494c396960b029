"""
Module: generation

Purpose:
    Block generation from place notation: the BlockBuilder state machine
    and the stopping rules that decide when a block is complete.

Key Functions:
    - generate_block(): Generate with a GenerationConfig
    - generate_leads(): Fixed number of leads
    - generate_until_rounds(): Until the block closes

Key Classes:
    - BlockBuilder: Incremental single-owner builder
    - GenerationConfig: Stopping rule and safety caps
"""

from .builder import (
    BlockBuilder,
    BuilderState,
    generate_block,
    generate_leads,
    generate_until_rounds,
)
from .config import GenerationConfig, Termination

__all__ = [
    "BlockBuilder",
    "BuilderState",
    "GenerationConfig",
    "Termination",
    "generate_block",
    "generate_leads",
    "generate_until_rounds",
]
