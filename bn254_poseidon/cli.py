"""
Command-line tools.

    bn254-poseidon-commitment --guess 5 --rand 0xa --address 0x70997970c51812dc3a010c7d01b50e0d17dc79c8
    bn254-poseidon-hash2 -a 54939530 -b 190384929
    bn254-poseidon-params -t 3 --output poseidon_params_bn254_t3.json
"""

import argparse
import json
import sys
from pathlib import Path

from .commitment import MAX_GUESS, guessing_game_commit
from .constants import circom_params
from .errors import InvalidParametersError, ParseStringError
from .field import field_from_dec_string, field_to_hex
from .hash import hash_two
from .parameters import dump_params


def _guess(text: str) -> int:
    try:
        value = int(text, 10)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid guess: {text!r}") from None
    if not 0 <= value <= MAX_GUESS:
        raise argparse.ArgumentTypeError(f"guess must be in [0, {MAX_GUESS}]: {text!r}")
    return value


def commitment_main(argv=None):
    parser = argparse.ArgumentParser(
        description='Compute a guessing-game commitment Poseidon(guess, address, rand)'
    )
    parser.add_argument(
        '-g', '--guess',
        type=_guess,
        required=True,
        help='The guess (decimal, 0-65535)'
    )
    parser.add_argument(
        '-r', '--rand',
        type=str,
        required=True,
        help='Randomness as hexstring'
    )
    parser.add_argument(
        '-a', '--address',
        type=str,
        required=True,
        help='Address as hexstring'
    )

    args = parser.parse_args(argv)

    try:
        commitment = guessing_game_commit(args.guess, args.address, args.rand)
    except ParseStringError as e:
        print(f"Failed to parse the inputs: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"guess: {args.guess}")
    print(f"address: {args.address}")
    print(f"rand: {args.rand}")
    print(f"commitment: {field_to_hex(commitment)}")


def hash2_main(argv=None):
    parser = argparse.ArgumentParser(
        description='Poseidon hash of two field elements (t=3)'
    )
    parser.add_argument('-a', type=str, required=True, help='First input (in decimal)')
    parser.add_argument('-b', type=str, required=True, help='Second input (in decimal)')

    args = parser.parse_args(argv)

    try:
        input_a = field_from_dec_string(args.a)
        input_b = field_from_dec_string(args.b)
    except ParseStringError as e:
        print(f"Failed to parse the inputs: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"input_a: {input_a}")
    print(f"input_b: {input_b}")
    print(f"hash: {hash_two(input_a, input_b)}")


def params_main(argv=None):
    parser = argparse.ArgumentParser(
        description='Export a Circom-compatible BN254 Poseidon parameter set as JSON'
    )
    parser.add_argument(
        '-t', '--state-size',
        type=int,
        required=True,
        help='State size t (number of inputs + 1)'
    )
    parser.add_argument(
        '--output',
        type=Path,
        help='Output path (default: stdout)'
    )

    args = parser.parse_args(argv)

    try:
        params = circom_params(args.state_size)
    except InvalidParametersError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.output is None:
        json.dump(params.to_json_dict(), sys.stdout, indent=2)
        print()
    else:
        dump_params(params, args.output)
        print(f"Written t={params.t} parameters to {args.output}")
