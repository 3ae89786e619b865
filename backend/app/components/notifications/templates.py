"""HTML email templates for SIMPLE notifications."""

from datetime import datetime, timezone
from html import escape

from ...platform.brand import BRAND_NAME, BRAND_PRODUCT_NAME

_ACCENT = "#111827"


def _layout(content: str, footer: str) -> str:
    year = datetime.now(timezone.utc).year
    return f"""\
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="margin:0;padding:0;background-color:#f4f4f7;font-family:-apple-system,BlinkMacSystemFont,'Segoe UI',Roboto,Helvetica,Arial,sans-serif;">
  <table width="100%" cellpadding="0" cellspacing="0" style="background-color:#f4f4f7;padding:40px 20px;">
    <tr>
      <td align="center">
        <table width="600" cellpadding="0" cellspacing="0" style="background-color:#ffffff;border-radius:8px;overflow:hidden;box-shadow:0 2px 8px rgba(0,0,0,0.08);">
          <tr>
            <td style="background-color:{_ACCENT};padding:32px 40px;text-align:center;">
              <h1 style="margin:0;color:#ffffff;font-size:28px;font-weight:700;letter-spacing:-0.5px;">{BRAND_NAME}</h1>
              <p style="margin:4px 0 0;color:#d1d5db;font-size:14px;">{BRAND_PRODUCT_NAME}</p>
            </td>
          </tr>
          <tr>
            <td style="padding:40px;">
{content}
              <hr style="border:none;border-top:1px solid #e5e7eb;margin:24px 0;">
              <p style="margin:0;color:#9ca3af;font-size:12px;text-align:center;">
                &copy; {year} {BRAND_PRODUCT_NAME}. All rights reserved.<br>
                {footer}
              </p>
            </td>
          </tr>
        </table>
      </td>
    </tr>
  </table>
</body>
</html>"""


def _button(link: str, label: str) -> str:
    return f"""\
              <table cellpadding="0" cellspacing="0" style="margin:0 auto 24px;">
                <tr>
                  <td style="background-color:{_ACCENT};border-radius:6px;text-align:center;">
                    <a href="{escape(link, quote=True)}"
                       style="display:inline-block;padding:14px 32px;color:#ffffff;font-size:16px;font-weight:600;text-decoration:none;">
                      {label}
                    </a>
                  </td>
                </tr>
              </table>"""


def evaluation_results_html(
    display_name: str,
    evaluation_label: str,
    score: int,
    maturity_label: str,
    results_link: str,
) -> str:
    content = f"""\
              <h2 style="margin:0 0 16px;color:#1f2937;font-size:22px;">Hi {escape(display_name)},</h2>
              <p style="margin:0 0 16px;color:#4b5563;font-size:16px;line-height:1.6;">
                Thank you for completing our {escape(evaluation_label)} cybersecurity evaluation.
              </p>
              <table width="100%" cellpadding="0" cellspacing="0" style="margin:0 0 24px;background-color:#f9fafb;border-radius:8px;border:1px solid #e5e7eb;">
                <tr>
                  <td style="padding:24px;text-align:center;">
                    <p style="margin:0 0 4px;color:#6b7280;font-size:14px;text-transform:uppercase;letter-spacing:0.5px;">Your score</p>
                    <p style="margin:0 0 8px;color:{_ACCENT};font-size:36px;font-weight:700;">{score} points</p>
                    <p style="margin:0;color:#4b5563;font-size:14px;">Maturity: {escape(maturity_label)}</p>
                  </td>
                </tr>
              </table>
{_button(results_link, "View Full Results")}
              <p style="margin:0 0 8px;color:#4b5563;font-size:15px;line-height:1.6;">Your personalised report includes:</p>
              <ul style="margin:0 0 16px;padding-left:20px;color:#4b5563;font-size:15px;line-height:1.6;">
                <li>A detailed analysis of your cybersecurity maturity level</li>
                <li>Strengths and improvement opportunities</li>
                <li>Practical recommendations to strengthen your security posture</li>
              </ul>
              <p style="margin:0 0 8px;color:#9ca3af;font-size:13px;">Or copy this link into your browser:</p>
              <p style="margin:0;color:{_ACCENT};font-size:13px;word-break:break-all;">{escape(results_link)}</p>"""
    return _layout(content, "If you did not request this evaluation, you can safely ignore this email.")


def welcome_html(first_name: str, dashboard_link: str) -> str:
    content = f"""\
              <h2 style="margin:0 0 16px;color:#1f2937;font-size:22px;">Welcome, {escape(first_name)}!</h2>
              <p style="margin:0 0 24px;color:#4b5563;font-size:16px;line-height:1.6;">
                Your {BRAND_NAME} account is active. Start with the initial evaluation to see
                where your organisation stands, then track your progress over time.
              </p>
{_button(dashboard_link, "Go to your dashboard")}"""
    return _layout(content, "You are receiving this because you created an account.")


def email_verification_html(display_name: str, verification_link: str) -> str:
    content = f"""\
              <h2 style="margin:0 0 16px;color:#1f2937;font-size:22px;">Hi {escape(display_name)},</h2>
              <p style="margin:0 0 24px;color:#4b5563;font-size:16px;line-height:1.6;">
                Please confirm your email address to activate your account.
              </p>
{_button(verification_link, "Verify email")}"""
    return _layout(content, "This link expires in 24 hours.")


def password_reset_html(reset_link: str) -> str:
    content = f"""\
              <h2 style="margin:0 0 16px;color:#1f2937;font-size:22px;">Reset your password</h2>
              <p style="margin:0 0 24px;color:#4b5563;font-size:16px;line-height:1.6;">
                We received a request to reset your password. The link below is valid for one hour.
              </p>
{_button(reset_link, "Reset password")}"""
    return _layout(content, "If you did not request a reset, you can safely ignore this email.")
