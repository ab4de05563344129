"""
playpromote - Google Play track promotion step for CI pipelines
"""

__version__ = "1.0.0"

from .core import Promoter
from .errors import PromoterError

__all__ = ["Promoter", "PromoterError"]
