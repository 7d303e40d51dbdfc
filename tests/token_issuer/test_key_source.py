import json
import os
import tempfile
import unittest
from unittest import mock

from common.config.config import Config
from common.solana.errors import SolInvalidIdentityError
from common.solana.signer import SolSigner
from common.solana_rpc.errors import SolNetworkUnavailableError
from tests.fake_ledger import FakeLedger
from token_issuer.key_source import FeePayerSource


class _SilentFaucetLedger(FakeLedger):
    async def get_tx_status_list(self, tx_sig_list):
        return tuple([None for _ in tx_sig_list])


class TestFeePayerSource(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.ledger = FakeLedger()
        self.signer = SolSigner.new()

    async def _get_signer(self, env: dict) -> SolSigner:
        with mock.patch.dict(os.environ, env, clear=True):
            return await FeePayerSource(Config(), self.ledger, poll_sec=0).get_signer()

    async def test_secret_key(self):
        signer = await self._get_signer({"SECRET_KEY": self.signer.to_base58_string()})
        self.assertEqual(signer, self.signer)
        self.assertEqual(await self.ledger.get_balance(signer.pubkey), 0)

    async def test_bad_secret_key(self):
        with self.assertRaises(SolInvalidIdentityError) as ctx:
            await self._get_signer({"SECRET_KEY": "0OIl"})
        self.assertEqual(ctx.exception.stage, "key")
        self.assertFalse(ctx.exception.is_retryable)

    async def test_keypair_file(self):
        with tempfile.TemporaryDirectory() as dir_name:
            file_name = os.path.join(dir_name, "id.json")
            with open(file_name, "w") as dst:
                json.dump(list(self.signer.to_bytes()), dst)

            signer = await self._get_signer({"SOLANA_KEYPAIR_FILE": file_name})
        self.assertEqual(signer, self.signer)

    async def test_secret_key_before_keypair_file(self):
        env = {"SECRET_KEY": self.signer.to_base58_string(), "SOLANA_KEYPAIR_FILE": "/not/exist/id.json"}
        self.assertEqual(await self._get_signer(env), self.signer)

    async def test_missing_keypair_file(self):
        with self.assertRaises(SolInvalidIdentityError) as ctx:
            await self._get_signer({"SOLANA_KEYPAIR_FILE": "/not/exist/id.json"})
        self.assertEqual(ctx.exception.stage, "key")

    async def test_airdrop(self):
        signer = await self._get_signer({"AIRDROP_LAMPORTS": "2_000_000_000"})
        self.assertNotEqual(signer, self.signer)
        self.assertEqual(await self.ledger.get_balance(signer.pubkey), 2_000_000_000)

    async def test_no_airdrop(self):
        signer = await self._get_signer({"AIRDROP_LAMPORTS": "0"})
        self.assertEqual(await self.ledger.get_balance(signer.pubkey), 0)

    async def test_airdrop_timeout(self):
        self.ledger = _SilentFaucetLedger()
        with self.assertRaises(SolNetworkUnavailableError) as ctx:
            await self._get_signer({"COMMIT_TIMEOUT_SEC": "0"})
        self.assertEqual(ctx.exception.stage, "key")
        self.assertTrue(ctx.exception.is_retryable)


if __name__ == "__main__":
    unittest.main()
