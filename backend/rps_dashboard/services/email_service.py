"""
Email service
Sends rendered reports to the operational mailbox over SMTP (SSL)
"""
import smtplib
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import List, Optional, Tuple

import structlog

from rps_dashboard.config import settings

logger = structlog.get_logger(__name__)


class EmailService:
    """Service for sending emails"""

    @property
    def is_configured(self) -> bool:
        """Checks whether SMTP credentials are set (read on every call)"""
        return bool(settings.SMTP_USER and settings.SMTP_PASSWORD)

    @property
    def notification_address(self) -> str:
        return settings.NOTIFICATION_EMAIL

    def send_email(
        self,
        recipient: str,
        subject: str,
        body_text: str,
        body_html: Optional[str] = None,
        attachments: Optional[List[Tuple[str, bytes]]] = None
    ) -> bool:
        """
        Sends an email via SMTP

        Args:
            recipient: Recipient address
            subject: Subject line
            body_text: Plain text body
            body_html: HTML body (optional)
            attachments: List of (filename, content) tuples

        Returns:
            True if the message was handed to the SMTP server
        """
        email_from = settings.EMAIL_FROM or settings.SMTP_USER

        if not self.is_configured:
            logger.warning("Email service not configured", smtp_user=bool(settings.SMTP_USER))
            return False

        msg = MIMEMultipart("mixed")
        msg["From"] = email_from
        msg["To"] = recipient
        msg["Subject"] = subject

        body_part = MIMEMultipart("alternative")
        body_part.attach(MIMEText(body_text, "plain", "utf-8"))
        if body_html:
            body_part.attach(MIMEText(body_html, "html", "utf-8"))
        msg.attach(body_part)

        for filename, content in attachments or []:
            attachment = MIMEApplication(content, _subtype="pdf")
            attachment.add_header("Content-Disposition", "attachment", filename=filename)
            msg.attach(attachment)

        try:
            with smtplib.SMTP_SSL(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30) as server:
                server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
                refused = server.sendmail(email_from, recipient, msg.as_string())
        except smtplib.SMTPAuthenticationError as e:
            logger.error("SMTP authentication failed", code=e.smtp_code, error=str(e.smtp_error))
            return False
        except smtplib.SMTPRecipientsRefused as e:
            logger.error("Recipient refused", recipients=list(e.recipients))
            return False
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Email send failed", recipient=recipient, error_type=type(e).__name__, error=str(e))
            return False

        if refused:
            logger.warning("Some recipients failed", refused=refused)
        else:
            logger.info("Email sent", recipient=recipient, subject=subject)
        return True

    def send_service_report(
        self,
        report_no: str,
        customer_name: str,
        filename: str,
        content: bytes
    ) -> bool:
        """
        Dispatches a rendered service report to the notification mailbox

        Args:
            report_no: Report code, used in the subject
            customer_name: Customer the job was done for
            filename: Attachment name
            content: PDF bytes

        Returns:
            True if sent; False if the mailbox is not set or sending failed
        """
        if not self.notification_address:
            logger.warning("Notification mailbox not configured", report_no=report_no)
            return False

        return self.send_email(
            recipient=self.notification_address,
            subject=f"Service Report: {report_no} - {customer_name}",
            body_text=f"Please find attached the service report for {customer_name}.",
            attachments=[(filename, content)],
        )


# Singleton instance
email_service = EmailService()
