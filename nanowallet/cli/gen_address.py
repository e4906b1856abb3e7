# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from argparse import ArgumentParser, Namespace


def create_parser() -> ArgumentParser:
    from nanowallet.cli.util import create_parser
    parser = create_parser()
    parser.add_argument('--count', type=int, default=1, help='Number of addresses (default=1)')
    return parser


def execute(args: Namespace) -> None:
    from nanowallet.cli.util import check_or_exit
    from nanowallet.crypto.util import get_address_b58_from_bytes, get_random_address

    check_or_exit(args.count > 0, '--count must be positive')
    for _ in range(args.count):
        print(get_address_b58_from_bytes(get_random_address()))


def main():
    parser = create_parser()
    args = parser.parse_args()
    execute(args)
