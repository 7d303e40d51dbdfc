import unittest

from solders.account import Account

from common.solana.account import SolAccountModel
from common.solana.pubkey import SolPubKey
from common.solana.token_program import SplTokenProg


class TestSolAccountModel(unittest.TestCase):
    def test_missing_account(self):
        address = SolPubKey.new_unique()
        acct = SolAccountModel.from_raw(address, None)
        self.assertTrue(acct.is_empty)
        self.assertEqual(acct.address, address)
        self.assertFalse(acct.is_owned_by(SolPubKey.default()))

    def test_from_solders_account(self):
        address = SolPubKey.new_unique()
        raw = Account(lamports=2_039_280, data=bytes(165), owner=SplTokenProg.ID)
        acct = SolAccountModel.from_raw(address, raw)

        self.assertFalse(acct.is_empty)
        self.assertEqual(len(acct.data), 165)
        self.assertTrue(acct.is_owned_by(SplTokenProg.ID))
        self.assertFalse(acct.is_owned_by(SolPubKey.new_unique()))

    def test_json(self):
        acct = SolAccountModel(address=SolPubKey.new_unique(), lamports=1, data=b"\x01\x02", owner=SplTokenProg.ID)
        data = acct.to_dict()
        self.assertEqual(data["data"], "AQI=")
        self.assertEqual(SolAccountModel.from_dict(data), acct)

    def test_wrong_type(self):
        with self.assertRaises(ValueError):
            SolAccountModel.from_raw(SolPubKey.new_unique(), 1)  # noqa


if __name__ == "__main__":
    unittest.main()
