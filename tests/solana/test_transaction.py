import unittest

from common.solana.errors import SolMissingSignerError, SolTxSizeError
from common.solana.hash import SolBlockHash
from common.solana.instruction import SolTxIx, make_acct_meta
from common.solana.pubkey import SolPubKey
from common.solana.signer import SolSigner
from common.solana.transaction import calc_signer_list
from common.solana.transaction_legacy import SolLegacyTx


class TestSolLegacyTx(unittest.TestCase):
    def setUp(self):
        self.payer = SolSigner.new()
        self.mint = SolSigner.new()
        self.prog_id = SolPubKey.new_unique()

    def _make_ix(self, *signer_list: SolPubKey, data: bytes = b"\x01") -> SolTxIx:
        return SolTxIx(
            program_id=self.prog_id,
            data=data,
            accounts=[make_acct_meta(key, is_signer=True, is_writable=True) for key in signer_list],
        )

    def _make_tx(self, ix_list) -> SolLegacyTx:
        return SolLegacyTx(
            name="Test",
            ix_list=ix_list,
            payer=self.payer.pubkey,
            blockhash=SolBlockHash.new_unique(),
            valid_block_height=200,
        )

    def test_signer_list(self):
        ix_list = [
            self._make_ix(self.mint.pubkey, self.payer.pubkey),
            self._make_ix(self.payer.pubkey),
            self._make_ix(self.mint.pubkey),
        ]
        self.assertEqual(calc_signer_list(self.payer.pubkey, ix_list), (self.payer.pubkey, self.mint.pubkey))

        tx = self._make_tx(ix_list)
        self.assertEqual(tx.required_signer_list(), (self.payer.pubkey, self.mint.pubkey))
        self.assertEqual(tx.ix_list, tuple(ix_list))
        self.assertEqual(tx.valid_block_height, 200)

    def test_sign(self):
        tx = self._make_tx([self._make_ix(self.payer.pubkey, self.mint.pubkey)])
        self.assertFalse(tx.is_signed)

        # the extra signer is ignored
        tx.sign([self.mint, SolSigner.new(), self.payer, self.payer])
        self.assertTrue(tx.is_signed)
        self.assertEqual(len(tx.serialize()), len(tx.to_bytes()))
        self.assertIn(tx.sig.to_string(), str(tx))

    def test_missing_signer(self):
        tx = self._make_tx([self._make_ix(self.payer.pubkey, self.mint.pubkey)])
        with self.assertRaises(SolMissingSignerError) as ctx:
            tx.sign([self.payer])
        self.assertEqual(ctx.exception.missing_list, (self.mint.pubkey,))
        self.assertFalse(tx.is_signed)

    def test_new_blockhash(self):
        tx = self._make_tx([self._make_ix(self.payer.pubkey)])
        tx.sign([self.payer])
        old_sig = tx.sig

        blockhash = SolBlockHash.new_unique()
        tx.set_recent_blockhash(blockhash, 500)
        self.assertFalse(tx.is_signed)
        self.assertEqual(tx.recent_blockhash, blockhash)
        self.assertEqual(tx.valid_block_height, 500)

        tx.sign([self.payer])
        self.assertNotEqual(tx.sig, old_sig)

    def test_no_blockhash(self):
        tx = SolLegacyTx(name="Test", ix_list=[self._make_ix(self.payer.pubkey)], payer=self.payer.pubkey)
        self.assertIsNone(tx.recent_blockhash)

    def test_tx_size(self):
        tx = self._make_tx([self._make_ix(self.payer.pubkey, data=bytes(1300))])
        tx.sign([self.payer])
        with self.assertRaises(SolTxSizeError):
            tx.serialize()


if __name__ == "__main__":
    unittest.main()
