import unittest
from types import SimpleNamespace

from services.forms import WizardForm
from services.receipts import MAX_RECEIPT_BYTES, ReceiptFile
from services.submission import PersistenceError
from services.wizard import ApplicationWizard, WizardStep, WizardTransitionError

RECEIPT = ReceiptFile.from_bytes("receipt.png", "image/png", b"\x89PNG" + b"\x00" * 32)


def _filled_wizard():
    wizard = ApplicationWizard()
    wizard.update(
        full_name="Ada Obi",
        phone="08012345678",
        email="ada@example.com",
        investment_amount=50_000,
        duration=3,
        account_name="Ada Obi",
        bank_name="Access Bank",
        account_number="0123456789",
    )
    return wizard


class _Pipeline:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    async def submit(self, form, step):
        self.calls.append((form, step))
        if self.error is not None:
            raise self.error
        return SimpleNamespace(id="inv-123")


class TestWizardNavigation(unittest.TestCase):
    def test_next_blocked_by_invalid_step(self):
        wizard = ApplicationWizard()
        self.assertFalse(wizard.next())
        self.assertEqual(wizard.step, WizardStep.DETAILS)
        self.assertEqual(wizard.error, "Please correct the errors below")
        self.assertIn("fullName", wizard.field_errors)

    def test_walks_to_review(self):
        wizard = _filled_wizard()
        self.assertTrue(wizard.next())
        self.assertTrue(wizard.next())
        self.assertFalse(wizard.next())  # no receipt yet
        self.assertEqual(wizard.step, WizardStep.PAYMENT)
        self.assertTrue(wizard.attach_receipt(RECEIPT))
        self.assertTrue(wizard.next())
        self.assertEqual(wizard.step, WizardStep.REVIEW)
        self.assertEqual(wizard.field_errors, {})

    def test_cannot_advance_past_review(self):
        wizard = ApplicationWizard(_filled_wizard().form, step=WizardStep.REVIEW)
        with self.assertRaises(WizardTransitionError):
            wizard.next()

    def test_back_clears_error(self):
        wizard = _filled_wizard()
        wizard.next()
        wizard.error = "Please correct the errors below"
        wizard.back()
        self.assertEqual(wizard.step, WizardStep.DETAILS)
        self.assertEqual(wizard.error, "")

    def test_back_not_allowed_from_first_step(self):
        with self.assertRaises(WizardTransitionError):
            ApplicationWizard().back()

    def test_oversize_receipt_keeps_previous_attachment(self):
        wizard = _filled_wizard()
        wizard.attach_receipt(RECEIPT)
        big = ReceiptFile.from_bytes("big.png", "image/png", b"x" * (MAX_RECEIPT_BYTES + 1))
        self.assertFalse(wizard.attach_receipt(big))
        self.assertIs(wizard.form.payment_screenshot, RECEIPT)
        self.assertIn("paymentScreenshot", wizard.field_errors)

    def test_unknown_field_rejected(self):
        with self.assertRaises(AttributeError):
            ApplicationWizard().update(nickname="ada")

    def test_projected_return_follows_amount_and_duration(self):
        form = WizardForm(custom_amount="100000", duration=3)
        self.assertEqual(form.projected_return(0.05), 115_000)
        form.duration = 12
        self.assertEqual(form.projected_return(0.05), 160_000)


class TestWizardSubmit(unittest.IsolatedAsyncioTestCase):
    async def test_submit_only_from_review(self):
        wizard = _filled_wizard()
        with self.assertRaises(WizardTransitionError):
            await wizard.submit(_Pipeline())

    async def test_success_is_terminal(self):
        wizard = ApplicationWizard(_filled_wizard().form, step=WizardStep.REVIEW)
        pipeline = _Pipeline()
        app = await wizard.submit(pipeline)
        self.assertEqual(app.id, "inv-123")
        self.assertEqual(wizard.step, WizardStep.SUCCESS)
        self.assertEqual(wizard.application_id, "inv-123")
        self.assertFalse(wizard.loading)
        self.assertEqual(pipeline.calls[0][1], WizardStep.REVIEW)
        with self.assertRaises(WizardTransitionError):
            wizard.back()
        with self.assertRaises(WizardTransitionError):
            wizard.update(full_name="Someone Else")

    async def test_failure_stays_on_review(self):
        wizard = ApplicationWizard(_filled_wizard().form, step=WizardStep.REVIEW)
        error = PersistenceError("An unexpected error occurred. Please try again later.")
        app = await wizard.submit(_Pipeline(error))
        self.assertIsNone(app)
        self.assertEqual(wizard.step, WizardStep.REVIEW)
        self.assertEqual(wizard.error, str(error))
        self.assertIs(wizard.failure, error)
        self.assertFalse(wizard.loading)


if __name__ == "__main__":
    unittest.main()
