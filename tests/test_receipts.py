import asyncio
import base64
import unittest

from services.receipts import (
    MAX_RECEIPT_BYTES,
    MSG_ENCODED_TOO_LARGE,
    MSG_TIMED_OUT,
    MSG_TOO_LARGE,
    ReceiptError,
    ReceiptFile,
    encode_receipt,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class TestEncodeReceipt(unittest.IsolatedAsyncioTestCase):
    async def test_no_receipt_yields_empty_string(self):
        self.assertEqual(await encode_receipt(None), "")

    async def test_data_url(self):
        receipt = ReceiptFile.from_bytes("receipt.png", "image/png", PNG_BYTES)
        encoded = await encode_receipt(receipt)
        prefix = "data:image/png;base64,"
        self.assertTrue(encoded.startswith(prefix))
        self.assertEqual(base64.b64decode(encoded[len(prefix):]), PNG_BYTES)

    async def test_oversize_rejected_before_reading(self):
        reads = []

        async def read():
            reads.append(1)
            return b""

        receipt = ReceiptFile("big.jpg", "image/jpeg", MAX_RECEIPT_BYTES + 1, read)
        with self.assertRaises(ReceiptError) as ctx:
            await encode_receipt(receipt)
        self.assertEqual(str(ctx.exception), MSG_TOO_LARGE)
        self.assertEqual(reads, [])

    async def test_understated_size_caught_after_read(self):
        data = b"x" * (MAX_RECEIPT_BYTES + 10)

        async def read():
            return data

        receipt = ReceiptFile("liar.png", "image/png", 10, read)
        with self.assertRaises(ReceiptError) as ctx:
            await encode_receipt(receipt)
        self.assertEqual(str(ctx.exception), MSG_TOO_LARGE)

    async def test_encoded_form_over_limit(self):
        # Under 1 MiB raw, but base64 inflates it past the encoded ceiling
        receipt = ReceiptFile.from_bytes("wide.webp", "image/webp", b"y" * 900_000)
        with self.assertRaises(ReceiptError) as ctx:
            await encode_receipt(receipt)
        self.assertEqual(str(ctx.exception), MSG_ENCODED_TOO_LARGE)

    async def test_unsupported_type(self):
        receipt = ReceiptFile.from_bytes("receipt.bmp", "image/bmp", PNG_BYTES)
        with self.assertRaises(ReceiptError):
            await encode_receipt(receipt)

    async def test_read_timeout(self):
        async def slow_read():
            await asyncio.sleep(5)
            return PNG_BYTES

        receipt = ReceiptFile("slow.gif", "image/gif", len(PNG_BYTES), slow_read)
        with self.assertRaises(ReceiptError) as ctx:
            await encode_receipt(receipt, timeout=0.05)
        self.assertEqual(str(ctx.exception), MSG_TIMED_OUT)


if __name__ == "__main__":
    unittest.main()
