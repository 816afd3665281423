"""Static HTML bodies for transactional e-mail"""

from html import escape

_LAYOUT = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>{title}</title></head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
  <div style="background: linear-gradient(135deg, #0ea5e9, #8b5cf6); padding: 30px; text-align: center; border-radius: 10px 10px 0 0;">
    <h1 style="color: white; margin: 0;">ShadowMesh</h1>
  </div>
  <div style="background: #f9fafb; padding: 30px; border-radius: 0 0 10px 10px; border: 1px solid #e5e7eb;">
    <h2 style="color: #1f2937; margin-top: 0;">{title}</h2>
    {content}
    <p style="color: #6b7280; font-size: 14px;">If you didn't request this, please ignore this email.</p>
  </div>
</body>
</html>
"""

_CODE_BLOCK = (
    '<div style="text-align: center; margin: 30px 0; font-size: 32px; '
    'letter-spacing: 8px; font-weight: bold;">{code}</div>'
)


def password_reset_email(reset_link: str) -> tuple[str, str]:
    link = escape(reset_link, quote=True)
    content = (
        "<p>You requested to reset your password. Use the link below to choose a new one:</p>"
        f'<p style="text-align: center; margin: 30px 0;"><a href="{link}">Reset Password</a></p>'
        f'<p style="color: #6b7280; font-size: 14px;">Or copy this link: {link}</p>'
        '<p style="color: #6b7280; font-size: 14px;">This link will expire in 1 hour.</p>'
    )
    return "ShadowMesh Password Reset", _LAYOUT.format(title="Password Reset Request", content=content)


def admin_password_reset_email(otp: str) -> tuple[str, str]:
    content = (
        "<p>Use this code to reset your admin password:</p>"
        + _CODE_BLOCK.format(code=escape(otp))
        + '<p style="color: #6b7280; font-size: 14px;">This code will expire in 10 minutes.</p>'
    )
    return "ShadowMesh Admin Password Reset Code", _LAYOUT.format(
        title="Admin Password Reset", content=content
    )


def verification_code_email(otp: str) -> tuple[str, str]:
    content = (
        "<p>Your verification code is:</p>"
        + _CODE_BLOCK.format(code=escape(otp))
        + '<p style="color: #6b7280; font-size: 14px;">This code will expire in 10 minutes.</p>'
    )
    return "ShadowMesh Verification Code", _LAYOUT.format(title="Verification Code", content=content)
