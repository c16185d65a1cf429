import contextlib
import io
import os
import tempfile
import unittest

from aibe.cli import build_parser, main


class TestCli(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.public = os.path.join(self.tmp.name, "public_params.pkl")
        self.secret = os.path.join(self.tmp.name, "secret_keys.pkl")

    def tearDown(self):
        self.tmp.cleanup()

    def _run(self, *argv):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = main(list(argv))
        return code, out.getvalue()

    def test_parser_defaults(self):
        args = build_parser().parse_args(["demo-transfer"])
        self.assertEqual((args.balance, args.amount, args.bound), (60, 40, 10000))
        self.assertEqual((args.sender, args.receiver), ("zico1", "zico2"))

    def test_keygen_encrypt_decrypt(self):
        code, _ = self._run("keygen", "--public", self.public, "--secret", self.secret)
        self.assertEqual(code, 0)
        self.assertTrue(os.path.exists(self.public))
        self.assertTrue(os.path.exists(self.secret))

        code, out = self._run("encrypt", "--public", self.public, "--id", "alice", "--value", "35")
        self.assertEqual(code, 0)
        ciphertext = out.strip()

        code, out = self._run("decrypt", "--secret", self.secret, "--id", "alice",
                              "--ciphertext", ciphertext, "--bound", "100")
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "35")

    def test_decrypt_out_of_bound_reports_error(self):
        self._run("keygen", "--public", self.public, "--secret", self.secret)
        _, out = self._run("encrypt", "--public", self.public, "--id", "alice", "--value", "150")
        code, out = self._run("decrypt", "--secret", self.secret, "--id", "alice",
                              "--ciphertext", out.strip(), "--bound", "100")
        self.assertEqual(code, 1)
        self.assertIn("[!] Error", out)

    def test_missing_key_file(self):
        code, out = self._run("encrypt", "--public", self.public, "--id", "alice", "--value", "1")
        self.assertEqual(code, 1)
        self.assertIn("[!] Error", out)

    def test_extract_prints_hex_key(self):
        self._run("keygen", "--public", self.public, "--secret", self.secret)
        code, out = self._run("extract", "--secret", self.secret, "--id", "alice")
        self.assertEqual(code, 0)
        bytes.fromhex(out.strip())

    def test_demo_burn(self):
        code, out = self._run("demo-burn")
        self.assertEqual(code, 0)
        self.assertIn("[✓] Decrypted: 35", out)

    def test_demo_transfer(self):
        code, out = self._run("demo-transfer", "--balance", "60", "--amount", "40", "--bound", "100")
        self.assertEqual(code, 0)
        self.assertIn("decrypts to 20", out)


if __name__ == "__main__":
    unittest.main()
