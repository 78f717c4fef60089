"""Image adapters."""

from .pillow import PillowRenderer, fit_within
from .qoi import QoiDecoder, QoiHeader, read_qoi_header

__all__ = ["PillowRenderer", "QoiDecoder", "QoiHeader", "fit_within", "read_qoi_header"]
