"""
GeoJSON dataset loading.

This module contains functions for loading the railway lines dataset from
a file or disk path and turning it into a segment catalog.
"""

import os
import json
import logging
from typing import Tuple, Dict, List, Any

from core.catalog import SegmentCatalog
from core.validation import validate_dataset_file, InvalidDataset

logger = logging.getLogger(__name__)


def load_geojson_file(geojson_file) -> Tuple[SegmentCatalog, Dict[str, Any]]:
    """
    Load and parse a GeoJSON file into a segment catalog.

    Args:
        geojson_file: A file-like object containing GeoJSON data (text or bytes)

    Returns:
        tuple: (SegmentCatalog, dict with metadata)

    Raises:
        InvalidDataset: If file validation or parsing fails
    """
    validate_dataset_file(geojson_file)

    try:
        raw = json.load(geojson_file)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidDataset(f"Invalid GeoJSON file: {str(e)}") from e

    catalog = SegmentCatalog.load(raw)

    metadata = {
        'name': None,
        'feature_count': len(raw.get('features', [])),
        'segment_count': len(catalog),
        'dropped_features': catalog.dropped,
    }

    # Try to get the dataset name from the document, then the file name
    if raw.get('name'):
        metadata['name'] = raw['name']
    elif isinstance(getattr(geojson_file, 'name', None), str):
        filename = os.path.basename(geojson_file.name)
        metadata['name'] = os.path.splitext(filename)[0]

    logger.info(f"Successfully loaded GeoJSON file with {len(catalog)} segments "
                f"({catalog.dropped} unnamed features dropped)")
    return catalog, metadata


def load_geojson_from_path(file_path: str) -> Tuple[SegmentCatalog, Dict[str, Any]]:
    """
    Load a GeoJSON file from disk path.

    Args:
        file_path: Path to the GeoJSON file

    Returns:
        tuple: (SegmentCatalog, dict with metadata)

    Raises:
        FileNotFoundError: If the file does not exist
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"GeoJSON file not found: {file_path}")

    with open(file_path, 'r', encoding='utf-8') as f:
        catalog, metadata = load_geojson_file(f)

        # Use filename if no name was extracted
        if not metadata['name']:
            metadata['name'] = os.path.splitext(os.path.basename(file_path))[0]

        return catalog, metadata


def get_sample_data_paths() -> List[str]:
    """
    Get paths to all GeoJSON datasets in the data directory.

    Returns:
        list: List of paths to GeoJSON files
    """
    from config.settings import DATA_DIR

    sample_files = []
    if os.path.exists(DATA_DIR):
        for file in sorted(os.listdir(DATA_DIR)):
            if file.endswith('.geojson'):
                sample_files.append(os.path.join(DATA_DIR, file))

    return sample_files
