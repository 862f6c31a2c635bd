#!/usr/bin/env python3
"""
Train a network on the Iris flower data set.

Usage:
    python scripts/iris_demo.py [TRAIN_CSV] [TEST_CSV]

Both files need a header row with the columns sepal_length, sepal_width,
petal_length, petal_width, setosa, virginica and versicolor, the last three
being a one-hot encoding of the species. Paths default to train.csv and
test.csv in the current directory.
"""

import argparse
import logging
import sys

import numpy as np

from fonet import ActivationKind, Network
from fonet.config import configure_logging
from fonet.samples import IRIS_INPUT_COLUMNS, IRIS_TARGET_COLUMNS, load_csv_samples

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument('train_csv', nargs='?', default='train.csv')
    parser.add_argument('test_csv', nargs='?', default='test.csv')
    parser.add_argument('--epochs', type=int, default=10000)
    parser.add_argument('--rate', type=float, default=1.111)
    parser.add_argument('--seed', type=int, default=None)
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main training function."""
    args = parse_args(argv)
    configure_logging()

    try:
        samples = load_csv_samples(args.train_csv, IRIS_INPUT_COLUMNS, IRIS_TARGET_COLUMNS)
        tests = load_csv_samples(args.test_csv, IRIS_INPUT_COLUMNS, IRIS_TARGET_COLUMNS)
    except (OSError, KeyError, ValueError) as e:
        print(f"❌ Error reading samples: {e}", file=sys.stderr)
        return 1

    net = Network([4, 5, 5, 3], ActivationKind.SIGMOID, rng=args.seed)
    logger.info("Training started!")
    net.train(samples, args.epochs, args.rate)
    logger.info("Training finished!")

    correct = 0
    for x, y in tests:
        prediction = net.predict(x)
        rounded = np.round(prediction)
        if np.array_equal(rounded, y):
            correct += 1
        print(f"Predicted: {prediction.tolist()} -> {rounded.tolist()}, Expected: {y.tolist()}")

    if tests:
        print(f"\n✅ {correct}/{len(tests)} test samples classified correctly")
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
