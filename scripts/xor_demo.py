#!/usr/bin/env python3
"""
Train a network on exclusive or.

Usage:
    python scripts/xor_demo.py [--epochs N] [--rate ETA] [--seed S] [--save NAME]

The script will:
1. Build a 2-3-1 network with the sigmoid activation
2. Train it on the four XOR cases
3. Print the prediction for every case
4. Optionally store the trained network in the model database
"""

import argparse
import logging

from fonet import ActivationKind, Network
from fonet.config import DEFAULT_MODEL_DIR, configure_logging
from fonet.model_persistence import save_network
from fonet.samples import XOR_SAMPLES

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument('--epochs', type=int, default=100000)
    parser.add_argument('--rate', type=float, default=1.001)
    parser.add_argument('--seed', type=int, default=None,
                        help='seed for the weight initialization')
    parser.add_argument('--verbose', action='store_true',
                        help='log every epoch')
    parser.add_argument('--save', metavar='NAME',
                        help='store the trained network under NAME')
    parser.add_argument('--model-dir', default=DEFAULT_MODEL_DIR)
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main training function."""
    args = parse_args(argv)
    configure_logging()

    net = Network([2, 3, 1], ActivationKind.SIGMOID, rng=args.seed)
    logger.info("Training started!")
    net.train(XOR_SAMPLES, args.epochs, args.rate, args.verbose)
    logger.info("Training finished!")

    correct = 0
    for x, y in XOR_SAMPLES:
        prediction = net.predict(x)
        if round(float(prediction[0])) == y[0]:
            correct += 1
        print(f"{x.tolist()} -> {prediction.tolist()} (expected {y[0]:g})")

    if args.save:
        accuracy = correct / len(XOR_SAMPLES)
        if not save_network(net, args.save, model_dir=args.model_dir,
                            trained=True, accuracy=accuracy):
            return 1
        print(f"💾 Saved network as '{args.save}'")
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
