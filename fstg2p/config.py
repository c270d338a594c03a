"""Decoder and command-line configuration.

Configuration is a nested dict with three sections. A JSON file may
override any subset of the defaults:

    {"search": {"nbest": 5, "beam": 500}, "decoder": {"delimiter": " "}}
"""

import copy
import json
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    'decoder': {
        'delimiter': None,
        'unknown_symbol': None,
        'dump_dir': '.',
    },
    'search': {
        'nbest': 1,
        'beam': 10000,
        'threshold': 99.0,
    },
    'output': {
        'print_scores': True,
        'separator': ' ',
    },
}


def merge_config(base: Dict, overrides: Dict) -> Dict:
    """Merge overrides into a copy of base, section by section.

    Raises:
        ValueError: overrides name a section or key missing from base
    """
    merged = copy.deepcopy(base)
    for section, values in overrides.items():
        if section not in merged:
            raise ValueError(f"Unknown config section: {section}")
        if not isinstance(values, dict):
            raise ValueError(f"Config section {section} must be an object")
        for key, value in values.items():
            if key not in merged[section]:
                raise ValueError(f"Unknown config key: {section}.{key}")
            merged[section][key] = value
    return merged


def load_config(path: Optional[str] = None) -> Dict:
    """Load configuration, merging a JSON file over the defaults.

    Args:
        path: Optional JSON config file

    Returns:
        Configuration dictionary
    """
    if path is None:
        return copy.deepcopy(DEFAULT_CONFIG)

    with open(path, 'r', encoding='utf-8') as f:
        overrides = json.load(f)

    logger.info("Loaded config from %s", path)
    return merge_config(DEFAULT_CONFIG, overrides)
