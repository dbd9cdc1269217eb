"""
I/O utilities for loading configuration and writing results.
"""

import json
import logging
import os
from typing import Dict

import yaml

logger = logging.getLogger(__name__)


def load_config(config_path: str) -> Dict:
    """
    Loads configuration from a YAML file.

    Args:
        config_path (str): Path to the YAML configuration file.

    Returns:
        Dict: The loaded configuration.
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Config file not found: {config_path}")
    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)
    return config


def load_json(json_path: str) -> Dict:
    """
    Loads a JSON document.

    Args:
        json_path (str): Path to the JSON file.

    Returns:
        Dict: The parsed document.
    """
    with open(json_path, 'r') as f:
        return json.load(f)


def save_json(data: Dict, output_path: str) -> None:
    """
    Writes a dict as indented JSON, creating parent folders as needed.

    Args:
        data (Dict): JSON-serializable data.
        output_path (str): Destination file path.
    """
    out_dir = os.path.dirname(output_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    with open(output_path, 'w') as f:
        json.dump(data, f, indent=2)
    logger.info(f"Saved: {output_path}")
