from twisted.trial import unittest

from nanowallet.crypto.util import get_address_b58_from_bytes
from nanowallet.nanocontracts import Context, NCFail
from nanowallet.nanocontracts.exception import NCInvalidContext
from nanowallet.nanocontracts.types import NCDepositAction, NCWithdrawalAction, TokenUid

TOKEN_A = TokenUid(b'\x00' * 20)
TOKEN_B = TokenUid(b'\x01' * 20)


class ContextTestCase(unittest.TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.caller = b'\x02' * 20

    def test_actions_are_grouped_by_token(self) -> None:
        deposit = NCDepositAction(token_uid=TOKEN_A, amount=10)
        withdrawal = NCWithdrawalAction(token_uid=TOKEN_B, amount=5)
        ctx = Context(caller_id=self.caller, timestamp=123, actions=[deposit, withdrawal])

        self.assertEqual(ctx.caller_id, self.caller)
        self.assertEqual(ctx.timestamp, 123)
        self.assertEqual(dict(ctx.actions), {TOKEN_A: deposit, TOKEN_B: withdrawal})
        self.assertEqual(ctx.get_single_action(TOKEN_B), withdrawal)

    def test_no_actions(self) -> None:
        ctx = Context(caller_id=self.caller, timestamp=0)
        self.assertEqual(ctx.actions_list, ())
        with self.assertRaises(NCFail):
            ctx.get_single_action(TOKEN_A)

    def test_invalid_actions(self) -> None:
        with self.assertRaises(NCInvalidContext):
            Context(caller_id=self.caller, timestamp=0, actions=[
                NCDepositAction(token_uid=TOKEN_A, amount=1),
                NCWithdrawalAction(token_uid=TOKEN_A, amount=1),
            ])
        with self.assertRaises(NCInvalidContext):
            Context(caller_id=self.caller, timestamp=0, actions=[NCDepositAction(token_uid=TOKEN_A, amount=0)])

    def test_copy_for_caller(self) -> None:
        ctx = Context(caller_id=self.caller, timestamp=50, actions=[NCDepositAction(token_uid=TOKEN_A, amount=1)])
        other = ctx.copy_for_caller(b'\x03' * 20)
        self.assertEqual(other.caller_id, b'\x03' * 20)
        self.assertEqual(other.timestamp, 50)
        self.assertEqual(other.actions_list, ())

    def test_to_json(self) -> None:
        ctx = Context(caller_id=self.caller, timestamp=7, actions=[NCDepositAction(token_uid=TOKEN_B, amount=3)])
        self.assertEqual(ctx.to_json(), {
            'actions': [{'type': 'deposit', 'token_uid': TOKEN_B.hex(), 'amount': 3}],
            'caller_id': get_address_b58_from_bytes(self.caller),
            'timestamp': 7,
        })
