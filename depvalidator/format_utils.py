"""
Output format utilities for depvalidator CLI commands.

Provides functions to format validation records as JSONL, JSON and YAML.
"""

import json
import os
from typing import Dict, List, Any, Iterator

import yaml

FORMATS = ('jsonl', 'json', 'yaml')


def format_output(data: Iterator[Dict[str, Any]], format: str) -> Iterator[str]:
    """
    Format data according to the specified format.

    Args:
        data: Iterator of dictionaries to format
        format: Output format (jsonl, json, yaml)

    Yields:
        Formatted strings for output
    """
    if format == "jsonl":
        yield from format_jsonl(data)
    elif format == "json":
        yield from format_json(data)
    elif format == "yaml":
        yield from format_yaml(data)
    else:
        raise ValueError(f"Unknown format: {format}")


def format_jsonl(data: Iterator[Dict[str, Any]]) -> Iterator[str]:
    """Format data as JSON Lines (one JSON object per line)."""
    for item in data:
        yield json.dumps(item, ensure_ascii=False)


def format_json(data: Iterator[Dict[str, Any]]) -> Iterator[str]:
    """
    Format validation records as a single JSON document.

    The document carries a summary next to the records:
        {"summary": {"total": 2, "valid": 1, "invalid": 1}, "results": [...]}
    """
    results = list(data)
    yield json.dumps(
        {'summary': summarize(results), 'results': results},
        ensure_ascii=False,
        indent=2
    )


def format_yaml(data: Iterator[Dict[str, Any]]) -> Iterator[str]:
    """Format data as YAML."""
    # Collect all data (needed for YAML document)
    all_data = list(data)
    yield yaml.dump(all_data, default_flow_style=False, allow_unicode=True, sort_keys=False)


def summarize(results: List[Dict[str, Any]]) -> Dict[str, int]:
    """Count valid and invalid repository records."""
    valid = sum(1 for r in results if r.get('valid'))
    return {'total': len(results), 'valid': valid, 'invalid': len(results) - valid}


def get_format_from_env(default: str = "jsonl") -> str:
    """Get output format from DEPVALIDATOR_FORMAT environment variable."""
    value = os.environ.get("DEPVALIDATOR_FORMAT", default).lower()
    return value if value in FORMATS else default
