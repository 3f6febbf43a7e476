"""Overlay Join Processor

Main processor that wires configuration, geometry capability and join engine.
"""

from .overlay_joiner import OverlayJoiner, JoinerStatus

__all__ = ['OverlayJoiner', 'JoinerStatus']
