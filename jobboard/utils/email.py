import asyncio
import logging
import smtplib
from concurrent.futures import ThreadPoolExecutor
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from jobboard import config

logger = logging.getLogger(__name__)

# Thread pool for async email sending
executor = ThreadPoolExecutor(max_workers=3)

SMTP_CONFIGS = {
    "gmail": {"host": "smtp.gmail.com", "port": 587, "use_tls": True},
    "outlook": {"host": "smtp-mail.outlook.com", "port": 587, "use_tls": True},
    "yahoo": {"host": "smtp.mail.yahoo.com", "port": 587, "use_tls": True},
    "office365": {"host": "smtp.office365.com", "port": 587, "use_tls": True},
    "custom": {"host": config.SMTP_HOST, "port": config.SMTP_PORT, "use_tls": True},
}


def detect_email_provider(email_address):
    """Auto-detect email provider from email address"""
    email_lower = email_address.lower()
    if "@gmail.com" in email_lower:
        return "gmail"
    elif "@outlook.com" in email_lower or "@hotmail.com" in email_lower:
        return "outlook"
    elif "@yahoo.com" in email_lower:
        return "yahoo"
    else:
        return "custom"


def get_smtp_config():
    provider = config.MAIL_PROVIDER
    if provider == "auto":
        provider = detect_email_provider(config.MAIL_USERNAME)
    return SMTP_CONFIGS.get(provider, SMTP_CONFIGS["custom"])


def build_message(to_email, subject, text_content, html_content=None, attachments=None):
    message = MIMEMultipart("mixed")
    message["Subject"] = subject
    message["From"] = f"{config.MAIL_FROM_NAME} <{config.MAIL_USERNAME}>"
    message["To"] = to_email

    body = MIMEMultipart("alternative")
    body.attach(MIMEText(text_content, "plain"))
    if html_content:
        body.attach(MIMEText(html_content, "html"))
    message.attach(body)

    for filename, content in attachments or []:
        part = MIMEApplication(content, Name=filename)
        part["Content-Disposition"] = f'attachment; filename="{filename}"'
        message.attach(part)

    return message


def send_email_sync(to_email, subject, text_content, html_content=None, attachments=None):
    """Send email via SMTP.

    Without configured credentials the message is only logged (dev mode) and
    False is returned. SMTP errors propagate to the caller.
    """
    if not config.MAIL_USERNAME or not config.MAIL_PASSWORD:
        log_email_to_console(to_email, subject, text_content, attachments)
        return False

    smtp_config = get_smtp_config()
    message = build_message(to_email, subject, text_content, html_content, attachments)

    server = smtplib.SMTP(smtp_config["host"], smtp_config["port"])
    try:
        server.ehlo()
        if smtp_config["use_tls"]:
            server.starttls()
            server.ehlo()
        server.login(config.MAIL_USERNAME, config.MAIL_PASSWORD)
        server.send_message(message)
    finally:
        server.quit()

    logger.info("Email sent to %s: %s", to_email, subject)
    return True


def log_email_to_console(to_email, subject, text_content, attachments=None):
    names = [filename for filename, _ in attachments or []]
    logger.warning(
        "Email credentials not configured, not sending.\nTo: %s\nSubject: %s\nAttachments: %s\n%s",
        to_email, subject, names, text_content,
    )


async def send_email(to_email, subject, text_content, html_content=None, attachments=None):
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        executor, send_email_sync, to_email, subject, text_content, html_content, attachments
    )


async def send_application_notification(company_email, job_title, applicant_email, filename, content):
    """Tell the poster about a new application, CV attached."""
    subject = f"New Application for {job_title}"
    text_content = (
        f"A user ({applicant_email}) has applied for your job: {job_title}. "
        f"See attached CV."
    )
    return await send_email(
        company_email, subject, text_content, attachments=[(filename, content)]
    )


async def send_reset_code_email(email, reset_token, name="User"):
    subject = "Password Reset"
    text_content = f"""
Hello {name},

Your reset code is {reset_token}. It expires in {config.RESET_TOKEN_EXPIRE_MINUTES} minutes.

If you didn't request this, please ignore this email.
"""
    html_content = f"""
<html>
<body style="font-family:Arial,sans-serif;background:#f5f7fa;padding:20px;">
    <div style="max-width:600px;margin:0 auto;background:#fff;border-radius:12px;padding:40px;">
        <h2 style="color:#2d3748;">Password Reset</h2>
        <p style="color:#4a5568;">Hello <strong>{name}</strong>, use the code below to reset your password:</p>
        <p style="font-size:28px;font-weight:bold;letter-spacing:4px;font-family:'Courier New',monospace;">{reset_token}</p>
        <p style="color:#856404;">This code is valid for <strong>{config.RESET_TOKEN_EXPIRE_MINUTES} minutes</strong>.</p>
        <p style="color:#718096;font-size:13px;">If you didn't request this, please ignore this email.</p>
    </div>
</body>
</html>
"""
    return await send_email(email, subject, text_content, html_content)
