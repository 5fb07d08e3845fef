"""
HTML bodies for the admin notification and the applicant confirmation.

Values are sanitized by the caller before rendering, so autoescape stays off
to avoid escaping the produced entities a second time.
"""
from __future__ import annotations

from typing import Optional

from jinja2 import Environment, StrictUndefined

_env = Environment(autoescape=False, undefined=StrictUndefined, trim_blocks=True, lstrip_blocks=True)
_env.filters["naira"] = lambda value: f"₦{int(value or 0):,}"

ADMIN_NOTIFICATION_TEMPLATE = _env.from_string("""\
<!DOCTYPE html>
<html>
  <head>
    <style>
      body { font-family: Arial, sans-serif; color: #333; }
      .container { max-width: 600px; margin: 0 auto; padding: 20px; }
      .header { background: linear-gradient(135deg, #0052FF 0%, #00D1A7 100%); color: white; padding: 20px; border-radius: 8px; margin-bottom: 20px; }
      .section { margin-bottom: 20px; }
      .section h2 { color: #0052FF; font-size: 16px; margin-bottom: 10px; }
      .details { background: #f6f9ff; padding: 15px; border-radius: 8px; }
      .detail-row { padding: 8px 0; border-bottom: 1px solid #e0e0e0; }
      .detail-label { font-weight: bold; color: #0052FF; }
      .highlight { background: #00D1A7; color: white; padding: 10px; border-radius: 4px; font-weight: bold; }
      .button { display: inline-block; background: #0052FF; color: white; padding: 12px 24px; border-radius: 6px; text-decoration: none; margin-top: 15px; }
      .footer { color: #999; font-size: 12px; margin-top: 30px; padding-top: 20px; border-top: 1px solid #e0e0e0; }
    </style>
  </head>
  <body>
    <div class="container">
      <div class="header">
        <h1>New Investment Application</h1>
        <p>A new investor has submitted an application</p>
      </div>

      <div class="section">
        <h2>Investor Information</h2>
        <div class="details">
          <div class="detail-row"><span class="detail-label">Name:</span> {{ full_name }}</div>
          <div class="detail-row"><span class="detail-label">Email:</span> {{ email }}</div>
          <div class="detail-row"><span class="detail-label">Phone:</span> {{ phone or "Not provided" }}</div>
        </div>
      </div>

      <div class="section">
        <h2>Investment Details</h2>
        <div class="details">
          <div class="detail-row"><span class="detail-label">Investment Amount:</span> {{ investment_amount | naira }}</div>
          <div class="detail-row"><span class="detail-label">Duration:</span> {{ duration }} months</div>
          <div class="detail-row"><span class="detail-label">Projected Return:</span> <span class="highlight">{{ projected_return | naira }}</span></div>
        </div>
      </div>

      <div class="section">
        <h2>Bank Details</h2>
        <div class="details">
          <div class="detail-row"><span class="detail-label">Bank:</span> {{ bank_name or "Not provided" }}</div>
          <div class="detail-row"><span class="detail-label">Account Number:</span> {{ masked_account }}</div>
          <div class="detail-row"><span class="detail-label">Transaction Reference:</span> {{ transaction_reference or "Not provided" }}</div>
        </div>
      </div>

      <div class="section">
        <h2>Payment Receipt</h2>
        <div class="details">
{% if payment_screenshot_url %}
          <div style="text-align: center; margin: 15px 0;">
            <a href="{{ payment_screenshot_url }}" target="_blank" style="display: block;">
              <img src="{{ payment_screenshot_url }}" alt="Payment Receipt" style="max-width: 100%; max-height: 300px; border: 1px solid #e0e0e0; border-radius: 4px;">
            </a>
            <a href="{{ payment_screenshot_url }}" target="_blank" class="button">View Full Receipt</a>
          </div>
{% else %}
          <p style="text-align: center; padding: 20px; color: #999;">No payment receipt uploaded</p>
{% endif %}
        </div>
      </div>

      <div class="section">
        <a href="{{ review_url }}" class="button">Review Application</a>
      </div>

      <div class="footer">
        <p>Application ID: {{ application_id }}</p>
        <p>This is an automated notification from Zteller Investor Portal</p>
      </div>
    </div>
  </body>
</html>
""")

CONFIRMATION_TEMPLATE = _env.from_string("""\
<h2>Investment Application Confirmation</h2>
<p>Dear {{ full_name }},</p>
<p>Thank you for submitting your investment application to Zteller!</p>
<p><strong>Application Details:</strong></p>
<ul>
  <li>Investment Amount: {{ investment_amount | naira }}</li>
  <li>Projected Return: {{ projected_return | naira }}</li>
  <li>Application ID: {{ application_id or "Pending" }}</li>
</ul>
<p>Our team will review your application and contact you shortly.</p>
<p>Best regards,<br/>Zteller Team</p>
""")


def mask_account_number(account_number: Optional[str]) -> str:
    if not account_number:
        return "Not provided"
    return f"****{account_number[-4:]}"


def render_admin_notification(
    *,
    full_name: str,
    email: str,
    phone: str,
    investment_amount: int,
    duration: int,
    projected_return: int,
    bank_name: str,
    account_number: str,
    payment_screenshot_url: str,
    transaction_reference: str,
    application_id: str,
    app_url: str,
) -> str:
    return ADMIN_NOTIFICATION_TEMPLATE.render(
        full_name=full_name,
        email=email,
        phone=phone,
        investment_amount=investment_amount,
        duration=duration,
        projected_return=projected_return,
        bank_name=bank_name,
        masked_account=mask_account_number(account_number),
        payment_screenshot_url=payment_screenshot_url,
        transaction_reference=transaction_reference,
        application_id=application_id,
        review_url=f"{app_url.rstrip('/')}/admin/applications/{application_id}",
    )


def admin_notification_subject(investment_amount: int, full_name: str) -> str:
    return f"New Investment Application - ₦{int(investment_amount or 0):,} from {full_name or 'Investor'}"


def render_confirmation(
    *,
    full_name: str,
    investment_amount: Optional[int],
    projected_return: Optional[int],
    application_id: Optional[str],
) -> str:
    return CONFIRMATION_TEMPLATE.render(
        full_name=full_name,
        investment_amount=investment_amount,
        projected_return=projected_return,
        application_id=application_id,
    )
