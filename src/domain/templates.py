"""OTP email content."""

from html import escape

OTP_EMAIL_SUBJECT = "Your OTP for OCR Ingredient Analyzer"

_OTP_EMAIL_TEMPLATE = """\
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>OTP Verification</title>
  <style>
    body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333;
           max-width: 600px; margin: 0 auto; padding: 20px; }}
    .container {{ border: 1px solid #ddd; border-radius: 8px; padding: 30px;
                 background-color: #f9f9f9; }}
    .otp-container {{ background-color: #4F46E5; color: white; padding: 20px;
                     border-radius: 8px; text-align: center; margin: 20px 0; }}
    .otp-code {{ font-size: 32px; font-weight: bold; letter-spacing: 8px; margin: 10px 0; }}
    .footer {{ text-align: center; margin-top: 30px; font-size: 12px; color: #666; }}
  </style>
</head>
<body>
  <div class="container">
    <h2>Verify Your Email Address</h2>
    <p>Please use the following One-Time Password (OTP) to verify your email address:</p>
    <div class="otp-container">
      <div>Your OTP Code</div>
      <div class="otp-code">{code}</div>
    </div>
    <ul>
      <li>This OTP is valid for {minutes} minutes only</li>
      <li>Please do not share this OTP with anyone</li>
      <li>If you didn't request this OTP, please ignore this email</li>
    </ul>
    <div class="footer">
      <p>This is an automated message. Please do not reply to this email.</p>
    </div>
  </div>
</body>
</html>
"""


def render_otp_email(code: str, ttl_seconds: int = 600) -> str:
    """Render the HTML body embedding the code and its validity window."""
    return _OTP_EMAIL_TEMPLATE.format(code=escape(code), minutes=ttl_seconds // 60)
