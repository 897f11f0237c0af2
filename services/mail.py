from flask import current_app
from flask_mailman import EmailMessage

from models import User


def admin_recipients():
    admins = User.query.filter(
        User.user_type == 'admin',
        User.status == 'active',
        User.email.isnot(None),
        User.email != ''
    ).all()
    return [admin.email for admin in admins]


def send_notification_email(subject, body):
    """
    Mail every active admin. Failures are logged per recipient and never
    raised to the caller. Returns the number of messages sent.
    """
    recipients = admin_recipients()
    html_content = f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
        <h2 style="color: #2c3e50; text-align: center;">Research Apps Notification</h2>
        <div style="background-color: #f8f9fa; padding: 20px; border-radius: 5px;">
            <p style="color: #2c3e50; font-size: 16px;">Hello,</p>
            <div style="background-color: #ffffff; padding: 15px; border-radius: 5px; margin: 20px 0;">
                <p style="color: #2c3e50; font-size: 16px; margin: 0;">{body}</p>
            </div>
            <p style="color: #2c3e50; font-size: 14px;">Please check the publication tracker for more details.</p>
        </div>
        <p style="color: #7f8c8d; font-size: 12px; text-align: center; margin-top: 20px;">
            This is an automated message, please do not reply.
        </p>
    </div>
    """

    if not recipients:
        current_app.logger.info("No admin e-mail addresses found, notification '%s' not sent", subject)
        return 0

    sent = 0
    for address in recipients:
        try:
            email = EmailMessage(
                subject=subject,
                body=html_content,
                from_email=current_app.config.get('DEFAULT_SENDER'),
                to=[address]
            )
            email.content_subtype = "html"
            email.send()
            sent += 1
            current_app.logger.info("Notification sent to %s", address)
        except Exception:
            current_app.logger.exception("Failed to send notification to %s", address)
    return sent
