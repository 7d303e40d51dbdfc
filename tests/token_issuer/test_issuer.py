import itertools
import os
import unittest
from unittest import mock

from common.config.config import Config
from common.solana.errors import SolInvalidIdentityError
from common.solana.pubkey import SolPubKey
from common.solana.signer import SolSigner
from common.solana.sys_program import SolSysProg
from common.solana.token_program import SplTokenProg
from common.solana_rpc.errors import (
    SolNetworkUnavailableError,
    SolTxExpiredError,
    SolTxRejectedError,
    SolDuplicateAddressError,
)
from common.solana_rpc.transaction_sender import SolTxSender
from tests.fake_ledger import FakeLedger, FakeAccount
from token_issuer.issuer import TokenIssuer, TokenIssueResult
from token_issuer.ix_factory import TokenIxFactory, TokenIssueParams
from token_issuer.tx_assembler import TokenTxAssembler


class TestTokenIssuer(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            self.cfg = Config()
            _ = self.cfg.token_decimals, self.cfg.token_supply, self.cfg.commit_type

        self.ledger = FakeLedger()
        self.payer = SolSigner.new()
        self.ledger.fund(self.payer.pubkey, 10 * SolSysProg.LamportsPerSol)
        self.issuer = TokenIssuer(self.cfg, self.ledger, poll_sec=0)

    async def test_issue_default_token(self):
        res = await self.issuer.issue(self.payer)

        self.assertEqual(res.decimals, 6)
        self.assertEqual(res.amount, 21_000_000_000_000)
        self.assertEqual(res.owner, self.payer.pubkey)
        self.assertEqual(self.ledger.applied_sig_list, [res.tx_sig])

        token = await self.ledger.get_token_account(res.holding_account)
        self.assertEqual(token.amount, 21_000_000_000_000)
        self.assertEqual(token.mint, res.mint)
        self.assertEqual(token.owner, self.payer.pubkey)

        mint_acct = self.ledger.account_dict[res.mint]
        self.assertEqual(mint_acct.owner, SplTokenProg.ID)
        self.assertEqual(mint_acct.size, SplTokenProg.MintSize)
        self.assertEqual(mint_acct.lamports, self.ledger.calc_rent(SplTokenProg.MintSize))
        self.assertEqual(mint_acct.mint.decimals, 6)
        self.assertEqual(mint_acct.mint.supply, 21_000_000_000_000)
        self.assertEqual(mint_acct.mint.mint_authority, self.payer.pubkey)
        self.assertEqual(mint_acct.mint.freeze_authority, self.payer.pubkey)

        res_dict = res.to_dict()
        self.assertEqual(res_dict["mint"], res.mint.to_string())
        self.assertEqual(res_dict["tx_sig"], res.tx_sig.to_string())
        self.assertEqual(TokenIssueResult.from_dict(res_dict), res)

    async def test_issue_to_owner(self):
        owner = SolPubKey.new_unique()
        res = await self.issuer.issue(self.payer, owner=owner.to_string(), decimals=2, supply=500)

        self.assertEqual(res.owner, owner)
        self.assertEqual(res.holding_account, self.issuer._ix_factory.ata_prog.derive_address(res.mint, owner))
        token = await self.ledger.get_token_account(res.holding_account)
        self.assertEqual(token.owner, owner)
        self.assertEqual(token.amount, 50_000)

    async def test_no_freeze_authority(self):
        res = await self.issuer.issue(self.payer, has_freeze_authority=False)
        self.assertIsNone(self.ledger.account_dict[res.mint].mint.freeze_authority)

    async def test_rent_unavailable(self):
        self.ledger.is_rent_unavailable = True
        with self.assertRaises(SolNetworkUnavailableError) as ctx:
            await self.issuer.issue(self.payer)

        self.assertEqual(ctx.exception.stage, "rent")
        self.assertTrue(ctx.exception.is_retryable)
        self.assertEqual(self.ledger.blockhash_cnt, 0)
        self.assertEqual(self.ledger.send_cnt, 0)

    async def test_bad_owner(self):
        with self.assertRaises(SolInvalidIdentityError) as ctx:
            await self.issuer.issue(self.payer, owner="not-a-base58-key")

        self.assertEqual(ctx.exception.stage, "derive")
        self.assertEqual(self.ledger.send_cnt, 0)

    async def test_amount_overflow(self):
        with self.assertRaises(ValueError):
            await self.issuer.issue(self.payer, decimals=18, supply=21_000_000)
        self.assertEqual(self.ledger.send_cnt, 0)

    async def test_only_canonical_order(self):
        mint = SolSigner.new()
        factory = TokenIxFactory()
        params = TokenIssueParams(
            payer=self.payer.pubkey,
            mint=mint.pubkey,
            owner=self.payer.pubkey,
            holding_account=factory.ata_prog.derive_address(mint.pubkey, self.payer.pubkey),
            mint_authority=self.payer.pubkey,
            decimals=6,
            amount=1_000,
            mint_rent_balance=self.ledger.calc_rent(SplTokenProg.MintSize),
        )
        canonical_ix_list = factory.make_ix_list(params)

        for ix_list in itertools.permutations(canonical_ix_list):
            if ix_list == canonical_ix_list:
                continue

            tx = TokenTxAssembler().assemble(ix_list, payer=self.payer.pubkey)
            with self.assertRaises(SolTxRejectedError):
                await SolTxSender(self.cfg, self.ledger, poll_sec=0).send(tx, [self.payer, mint])
            self.assertNotIn(mint.pubkey, self.ledger.account_dict)
            self.assertNotIn(params.holding_account, self.ledger.account_dict)

        self.assertEqual(self.ledger.applied_sig_list, [])
        res = await self.issuer.issue(self.payer, mint=mint, supply=1_000, decimals=0)
        self.assertEqual(self.ledger.applied_sig_list, [res.tx_sig])

    async def test_duplicate_mint(self):
        mint = SolSigner.new()
        res = await self.issuer.issue(self.payer, mint=mint)
        balance = await self.ledger.get_balance(self.payer.pubkey)

        with self.assertRaises(SolDuplicateAddressError) as ctx:
            await self.issuer.issue(self.payer, mint=mint)

        self.assertEqual(ctx.exception.stage, "submit")
        self.assertFalse(ctx.exception.is_retryable)
        self.assertEqual(self.ledger.account_dict[res.mint].mint.supply, res.amount)
        self.assertEqual(await self.ledger.get_balance(self.payer.pubkey), balance)

    async def test_duplicate_holding_account(self):
        mint = SolSigner.new()
        holding_account = self.issuer._ix_factory.ata_prog.derive_address(mint.pubkey, self.payer.pubkey)
        self.ledger.account_dict[holding_account] = FakeAccount(
            lamports=self.ledger.calc_rent(SplTokenProg.AccountSize),
            owner=SplTokenProg.ID,
            size=SplTokenProg.AccountSize,
        )

        with self.assertRaises(SolDuplicateAddressError):
            await self.issuer.issue(self.payer, mint=mint)
        self.assertNotIn(mint.pubkey, self.ledger.account_dict)

    async def test_insufficient_funds(self):
        payer = SolSigner.new()
        with self.assertRaises(SolTxRejectedError) as ctx:
            await self.issuer.issue(payer)

        self.assertIs(type(ctx.exception), SolTxRejectedError)
        self.assertEqual(ctx.exception.stage, "submit")
        self.assertEqual(self.ledger.applied_sig_list, [])

    async def test_retry_after_expiry(self):
        mint = SolSigner.new()
        self.ledger.drop_tx_cnt = 100
        self.ledger.block_step = 10

        with self.assertRaises(SolTxExpiredError) as ctx:
            await self.issuer.issue(self.payer, mint=mint)
        self.assertEqual(ctx.exception.stage, "submit")
        self.assertTrue(ctx.exception.is_retryable)
        self.assertNotIn(mint.pubkey, self.ledger.account_dict)

        self.ledger.drop_tx_cnt = 0
        self.ledger.block_step = 1
        res = await self.issuer.issue(self.payer, mint=mint)

        self.assertNotEqual(res.tx_sig, ctx.exception.tx_sig)
        self.assertEqual(res.mint, mint.pubkey)
        self.assertEqual(self.ledger.applied_sig_list, [res.tx_sig])
        self.assertEqual(self.ledger.account_dict[mint.pubkey].mint.supply, 21_000_000_000_000)


if __name__ == "__main__":
    unittest.main()
