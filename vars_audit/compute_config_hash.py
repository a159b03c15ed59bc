"""Logic for fingerprinting the inputs that decide audit verdicts."""

import hashlib
import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

# Escalation only changes the exit status, never a verdict.
VERDICT_NEUTRAL_SECTIONS = ("fatal",)


def compute_config_hash(
    config: dict[str, Any], layer_sources: Sequence[str | Path] = ()
) -> str:
    """Compute a stable hash of the audit inputs.

    Covers the thresholds, filters and run options plus the layer list in
    precedence order, so two reports share a hash exactly when they audited the
    same layers under the same rules. Key order in the config does not matter.
    """
    fingerprint = {
        "config": {
            k: v for k, v in config.items() if k not in VERDICT_NEUTRAL_SECTIONS
        },
        "layers": [str(s) for s in layer_sources],
    }
    fingerprint_json = json.dumps(
        fingerprint, sort_keys=True, ensure_ascii=True, default=str
    )
    return hashlib.sha256(fingerprint_json.encode("utf-8")).hexdigest()
