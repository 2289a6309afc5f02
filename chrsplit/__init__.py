"""chrsplit: split a JSONL/NDJSON file into one file per category.

Built for "split by chromosome" genomics workflows, but any top-level or
dotted field can serve as the split key:
  - Single forward-only pass, constant memory per category
  - Every non-blank record lands in exactly one output, order preserved
  - Unmatched or unparsable records go to ``<prefix>_unknown.jsonl``
  - Outputs are flushed and closed on every exit path
"""

__version__ = "0.1.0"
__description__ = "Split a JSONL/NDJSON file by the value of one field"

from chrsplit.core.router import SplitError, StreamingRouter
from chrsplit.models.config import SplitConfig
from chrsplit.models.stats import SplitStats

__all__ = ["SplitConfig", "SplitError", "SplitStats", "StreamingRouter", "__version__"]
