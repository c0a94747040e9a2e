"""Pack entry generation: the CRF search, single jobs and batches."""

from .batch import BatchContext
from .kinds import PackKind
from .single import EncodeOptions, SingleTargetJob
from .two_pass import Trial, TwoPassContext

__all__ = [
    "BatchContext",
    "EncodeOptions",
    "PackKind",
    "SingleTargetJob",
    "Trial",
    "TwoPassContext",
]
