"""
samples.py
~~~~~~~~~~

Training samples for the example programs.

A sample is an ``(input, target)`` pair of 1-D float arrays, which is what
``Network.train`` consumes.
"""

import csv
import logging
from typing import List, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)

Sample = Tuple[np.ndarray, np.ndarray]

# The four cases of exclusive or
XOR_SAMPLES: List[Sample] = [
    (np.array([0.0, 0.0]), np.array([0.0])),
    (np.array([0.0, 1.0]), np.array([1.0])),
    (np.array([1.0, 0.0]), np.array([1.0])),
    (np.array([1.0, 1.0]), np.array([0.0])),
]

IRIS_INPUT_COLUMNS = ('sepal_length', 'sepal_width', 'petal_length', 'petal_width')
IRIS_TARGET_COLUMNS = ('setosa', 'virginica', 'versicolor')


def load_csv_samples(
    path: str,
    input_columns: Sequence[str],
    target_columns: Sequence[str]
) -> List[Sample]:
    """
    Read samples from a CSV file with a header row.

    Args:
        path: Path to the CSV file
        input_columns: Columns forming the input vector, in order
        target_columns: Columns forming the target vector, in order

    Returns:
        list: One ``(input, target)`` pair per data row

    Raises:
        KeyError: If a requested column is not in the header
        ValueError: If a cell is not a number
    """
    samples = []
    with open(path, newline='') as f:
        reader = csv.DictReader(f)
        header = reader.fieldnames or []
        missing = [c for c in (*input_columns, *target_columns) if c not in header]
        if missing:
            raise KeyError(f"{path} has no column(s): {', '.join(missing)}")

        for line, row in enumerate(reader, start=2):
            try:
                x = np.array([float(row[c]) for c in input_columns])
                y = np.array([float(row[c]) for c in target_columns])
            except (TypeError, ValueError) as e:
                raise ValueError(f"{path}, line {line}: {e}") from e
            samples.append((x, y))

    logger.debug(f"Loaded {len(samples)} sample(s) from {path}")
    return samples
