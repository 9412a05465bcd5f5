"""External scanner engines."""

from securethis.engines.fluid_attacks import FluidAttacksEngine

__all__ = ["FluidAttacksEngine"]
