"""Tool layer: direct actions and natural-language instructions on registered sessions."""

from .computer_tools import ComputerTools
from .instruction_tools import InstructionTools

__all__ = ["ComputerTools", "InstructionTools"]
