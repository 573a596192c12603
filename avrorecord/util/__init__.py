"""Low-level byte handling shared by the decoder and encoder."""

from .ByteBuf import ByteBuf  # noqa: F401

__all__ = ["ByteBuf"]
