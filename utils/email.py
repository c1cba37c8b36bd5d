# utils/email.py
import requests
import os

BREVO_KEY = os.getenv("BREVO_API_KEY")
SENDER_NAME = os.getenv("EMAIL_SENDER_NAME", "Property Back Office")
SENDER_EMAIL = os.getenv("EMAIL_SENDER_ADDRESS", "noreply@example.com")


class EmailDeliveryError(Exception):
     """Raised when the transactional email API rejects a message."""


def send_email(to_email: str, subject: str, html_content: str):
     if not BREVO_KEY:
          raise EmailDeliveryError("BREVO_API_KEY is not set")

     response = requests.post(
          "https://api.brevo.com/v3/smtp/email",
          headers={
               "api-key": BREVO_KEY,
               "Content-Type": "application/json",
          },
          json={
               "sender": {"name": SENDER_NAME, "email": SENDER_EMAIL},
               "to": [{"email": to_email}],
               "subject": subject,
               "htmlContent": html_content,
          },
          timeout=10,
     )
     if response.status_code not in (200, 201):
          raise EmailDeliveryError(f"Brevo error: {response.text}")


def send_rent_reminder_email(to_email: str, tenant_name: str, message: str):
     send_email(
          to_email,
          "Rent payment reminder",
          f"""
               <h2>Hello {tenant_name},</h2>
               <p>{message}</p>
               <p>Please contact the agency if you have already paid.</p>
          """,
     )
