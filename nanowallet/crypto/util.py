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

import hashlib
import os

import base58

from nanowallet.conf.settings import ADDRESS_SIZE
from nanowallet.exception import InvalidAddressError


def get_address_b58_from_bytes(address: bytes) -> str:
    """Gets the b58 address from the address in bytes

        :param address: bytes

        :return: address in base 58
        :rtype: string
    """
    return base58.b58encode(address).decode('utf-8')


def decode_address(address58: str) -> bytes:
    """ Decode address in base58 to bytes

    :param address58: Wallet address in base58
    :type address58: string

    :raises InvalidAddressError: if address is not a valid base58 string or has the wrong size

    :return: Address in bytes
    :rtype: bytes
    """
    try:
        decoded_address = base58.b58decode(address58)
    except ValueError:
        # Invalid base58 string
        raise InvalidAddressError('Invalid base58 address')
    if len(decoded_address) != ADDRESS_SIZE:
        raise InvalidAddressError(f'Address size must have {ADDRESS_SIZE} bytes, got {len(decoded_address)}')
    return decoded_address


def get_address_from_seed(seed: bytes) -> bytes:
    """Derive a deterministic address from an arbitrary seed, used for named accounts in scenarios and tests."""
    return hashlib.sha256(seed).digest()[:ADDRESS_SIZE]


def get_random_address() -> bytes:
    """Return a random address."""
    return os.urandom(ADDRESS_SIZE)
