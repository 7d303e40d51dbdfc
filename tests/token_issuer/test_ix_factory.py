import unittest

from common.solana.ata_program import SolAtaProg
from common.solana.pubkey import SolPubKey
from common.solana.sys_program import SolSysProg
from common.solana.token_program import SplTokenProg
from token_issuer.ix_factory import TokenIxFactory, TokenIssueParams, calc_base_amount


class TestCalcBaseAmount(unittest.TestCase):
    def test_default_supply(self):
        self.assertEqual(calc_base_amount(21_000_000, 6), 21_000_000_000_000)

    def test_zero(self):
        self.assertEqual(calc_base_amount(0, 9), 0)
        self.assertEqual(calc_base_amount(5, 0), 5)

    def test_overflow(self):
        self.assertEqual(calc_base_amount(18, 18), 18 * 10**18)
        with self.assertRaises(ValueError):
            calc_base_amount(19, 18)
        with self.assertRaises(ValueError):
            calc_base_amount(1, 255)

    def test_bad_values(self):
        with self.assertRaises(ValueError):
            calc_base_amount(-1, 6)
        with self.assertRaises(ValueError):
            calc_base_amount(1, 256)


class TestTokenIxFactory(unittest.TestCase):
    def setUp(self):
        self.factory = TokenIxFactory()
        self.payer = SolPubKey.new_unique()
        self.mint = SolPubKey.new_unique()
        self.owner = SolPubKey.new_unique()
        self.holding_account = self.factory.ata_prog.derive_address(self.mint, self.owner)

    def _new_params(self, **kwargs) -> TokenIssueParams:
        param_dict = dict(
            payer=self.payer,
            mint=self.mint,
            owner=self.owner,
            holding_account=self.holding_account,
            mint_authority=self.payer,
            freeze_authority=self.payer,
            decimals=6,
            amount=21_000_000_000_000,
            mint_rent_balance=1_461_600,
        )
        param_dict.update(kwargs)
        return TokenIssueParams(**param_dict)

    def test_ix_order(self):
        ix_list = self.factory.make_ix_list(self._new_params())
        self.assertEqual(len(ix_list), 4)

        prog_id_list = [SolPubKey.from_raw(ix.program_id) for ix in ix_list]
        self.assertEqual(prog_id_list, [SolSysProg.ID, SplTokenProg.ID, SolAtaProg.ID, SplTokenProg.ID])
        self.assertEqual(bytes(ix_list[1].data)[0], 20)
        self.assertEqual(bytes(ix_list[3].data)[0], 14)

    def test_alloc_mint(self):
        ix = self.factory.make_alloc_mint_ix(self._new_params())
        data = bytes(ix.data)
        self.assertEqual(int.from_bytes(data[4:12], "little"), 1_461_600)
        self.assertEqual(int.from_bytes(data[12:20], "little"), SplTokenProg.MintSize)
        self.assertEqual(data[20:52], SplTokenProg.ID.to_bytes())

        key_list = [SolPubKey.from_raw(meta.pubkey) for meta in ix.accounts]
        self.assertEqual(key_list, [self.payer, self.mint])
        self.assertTrue(all(meta.is_signer for meta in ix.accounts))

    def test_holding_account(self):
        ix = self.factory.make_create_holding_account_ix(self._new_params())
        key_list = [SolPubKey.from_raw(meta.pubkey) for meta in ix.accounts]
        self.assertEqual(key_list[:4], [self.payer, self.holding_account, self.owner, self.mint])

    def test_issue_supply(self):
        ix = self.factory.make_issue_supply_ix(self._new_params())
        data = bytes(ix.data)
        self.assertEqual(int.from_bytes(data[1:9], "little"), 21_000_000_000_000)
        self.assertEqual(data[9], 6)

        key_list = [SolPubKey.from_raw(meta.pubkey) for meta in ix.accounts]
        self.assertEqual(key_list, [self.mint, self.holding_account, self.payer])

    def test_no_freeze_authority(self):
        ix = self.factory.make_init_mint_ix(self._new_params(freeze_authority=None))
        self.assertEqual(len(bytes(ix.data)), 35)

    def test_bad_params(self):
        with self.assertRaises(ValueError):
            self.factory.make_ix_list(self._new_params(decimals=256))
        with self.assertRaises(ValueError):
            self.factory.make_ix_list(self._new_params(amount=2**64))


if __name__ == "__main__":
    unittest.main()
