import unittest

from services.forms import WizardForm
from services.receipts import MAX_RECEIPT_BYTES, ReceiptFile
from services.validation import (
    is_valid_account_number,
    is_valid_email,
    is_valid_phone,
    missing_notification_fields,
    notification_format_errors,
    validate_form,
    validate_step,
)


def _complete_form(**overrides):
    fields = {
        "full_name": "Ada Obi",
        "phone": "+2348012345678",
        "email": "ada@example.com",
        "investment_amount": 100_000,
        "duration": 6,
        "account_name": "Ada Obi",
        "bank_name": "First Bank",
        "account_number": "0123456789",
    }
    fields.update(overrides)
    return WizardForm(**fields)


class TestFieldFormats(unittest.TestCase):
    def test_phone_accepts_ten_to_fifteen_digits(self):
        for phone in ("0801234567", "+2348012345678", "080 1234 5678", "123456789012345"):
            self.assertTrue(is_valid_phone(phone), phone)

    def test_phone_rejects_others(self):
        for phone in ("080123456", "1234567890123456", "080-123-4567", "++2348012345678", "phone"):
            self.assertFalse(is_valid_phone(phone), phone)

    def test_account_number(self):
        self.assertTrue(is_valid_account_number("0123456789"))
        self.assertTrue(is_valid_account_number("012345678901"))
        self.assertTrue(is_valid_account_number("01234 56789"))
        self.assertFalse(is_valid_account_number("12345"))
        self.assertFalse(is_valid_account_number("0123456789012"))
        self.assertFalse(is_valid_account_number("01234abc89"))

    def test_email(self):
        self.assertTrue(is_valid_email("ada.obi+invest@mail.example.ng"))
        self.assertFalse(is_valid_email("ada@example"))
        self.assertFalse(is_valid_email("not-an-email"))

    def test_trailing_newline_is_not_accepted(self):
        self.assertFalse(is_valid_email("ada@example.com\n"))
        self.assertFalse(is_valid_email("ada@example.com\r\nBcc: x@evil.test"))


class TestValidateStep(unittest.TestCase):
    def test_details_step_passes(self):
        result = validate_step(1, _complete_form())
        self.assertTrue(result.valid)
        self.assertEqual(result.field_errors, {})

    def test_details_step_reports_each_field(self):
        result = validate_step(1, WizardForm())
        self.assertFalse(result.valid)
        self.assertEqual(
            set(result.field_errors),
            {"fullName", "phone", "email", "investmentAmount"},
        )

    def test_bad_phone_gets_phone_message(self):
        result = validate_step(1, _complete_form(phone="12345"))
        self.assertFalse(result.valid)
        self.assertEqual(result.field_errors, {"phone": "Please enter a valid phone number"})

    def test_custom_amount_satisfies_amount_rule(self):
        result = validate_step(1, _complete_form(investment_amount=0, custom_amount="70000"))
        self.assertTrue(result.valid)

    def test_bank_step(self):
        self.assertTrue(validate_step(2, _complete_form()).valid)
        result = validate_step(2, _complete_form(account_number="12345"))
        self.assertEqual(list(result.field_errors), ["accountNumber"])

    def test_payment_step_requires_receipt(self):
        result = validate_step(3, _complete_form())
        self.assertEqual(result.field_errors, {"paymentScreenshot": "Please upload payment proof"})

    def test_payment_step_rejects_oversize_receipt(self):
        receipt = ReceiptFile.from_bytes("r.png", "image/png", b"x" * (MAX_RECEIPT_BYTES + 1))
        result = validate_step(3, _complete_form(payment_screenshot=receipt))
        self.assertFalse(result.valid)
        self.assertIn("1MB", result.field_errors["paymentScreenshot"])

    def test_payment_step_rejects_pdf(self):
        receipt = ReceiptFile.from_bytes("r.pdf", "application/pdf", b"%PDF")
        result = validate_step(3, _complete_form(payment_screenshot=receipt))
        self.assertIn("JPG, PNG, GIF, or WEBP", result.field_errors["paymentScreenshot"])

    def test_review_step_has_no_rules(self):
        self.assertTrue(validate_step(4, WizardForm()).valid)


class TestValidateForm(unittest.TestCase):
    def test_complete_form_has_no_errors(self):
        self.assertEqual(validate_form(_complete_form()), [])

    def test_non_positive_amount(self):
        errors = validate_form(_complete_form(investment_amount=0, custom_amount="-5"))
        self.assertIn("Please enter a valid investment amount", errors)

    def test_unknown_duration(self):
        errors = validate_form(_complete_form(duration=9))
        self.assertEqual(errors, ["Please choose a duration of 3, 6 or 12 months"])

    def test_blank_required_fields(self):
        errors = validate_form(_complete_form(full_name="   ", account_name="\t", bank_name="  "))
        self.assertEqual(
            errors,
            ["Full name is required", "Account name is required", "Bank name is required"],
        )

    def test_format_errors_collected(self):
        errors = validate_form(_complete_form(email="bad", phone="1", account_number="2"))
        self.assertEqual(
            errors,
            ["Invalid email format", "Invalid phone number format", "Invalid account number format"],
        )


class TestNotificationChecks(unittest.TestCase):
    def test_missing_fields_in_order(self):
        body = {"fullName": "Ada", "email": "", "investmentAmount": 100, "duration": 3}
        self.assertEqual(missing_notification_fields(body), ["email", "projectedReturn", "applicationId"])

    def test_format_errors(self):
        self.assertEqual(notification_format_errors("a@b.co", 100, 3, 115), [])
        errors = notification_format_errors("bad", 0, 5, -1)
        self.assertEqual(len(errors), 4)


if __name__ == "__main__":
    unittest.main()
