"""Encoding helpers.

``RecordEncoder`` writes one record in Avro binary. ``ContainerEncoder``
frames records into object container blocks closed by a sync marker.
"""

from .ContainerEncoder import ContainerEncoder  # noqa: F401
from .RecordEncoder import RecordEncoder, encode  # noqa: F401

__all__ = [
    "ContainerEncoder",
    "RecordEncoder",
    "encode",
]
