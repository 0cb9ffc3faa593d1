import asyncio
import html
import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from models.records import DEFAULT_DISPLAY_NAME

logger = logging.getLogger(__name__)

REMINDER_SUBJECT = "📚 Study Reminder - Time to Learn!"

STUDY_TIPS = [
    "Find a quiet, distraction-free environment",
    "Review your notes from the last session",
    "Set a clear goal for this study session",
    "Take short breaks every 25-30 minutes",
]


class EmailService:
    """Sends study reminder emails over SMTP."""

    def __init__(
        self,
        sender: str,
        password: str,
        smtp_server: str = "smtp.gmail.com",
        smtp_port: int = 587,
        timeout: float = 30.0,
    ):
        """
        Initialize the email service.

        Args:
            sender: From address, also used as the SMTP login
            password: SMTP password (an app password for Gmail)
            smtp_server: SMTP host
            smtp_port: 465 uses implicit TLS, anything else STARTTLS
            timeout: Socket timeout in seconds
        """
        self.sender = sender
        self.password = password
        self.smtp_server = smtp_server
        self.smtp_port = int(smtp_port)
        self.timeout = timeout

    async def send_reminder_email(
        self,
        user_email: str,
        user_name: Optional[str],
        reminder_time: str,
    ) -> bool:
        """
        Send one reminder email. Never raises.

        Args:
            user_email: Recipient address
            user_name: Display name, "Student" if empty
            reminder_time: Target time shown in the body

        Returns:
            True if the message was handed to the SMTP server, False otherwise
        """
        try:
            msg = self.build_message(user_email, user_name or DEFAULT_DISPLAY_NAME, reminder_time)
            # smtplib blocks, keep it off the event loop
            await asyncio.to_thread(self._send_email, msg)
            logger.info(f"Reminder email sent to {user_email}")
            return True
        except Exception as e:
            logger.error(f"Error sending email to {user_email}: {str(e)}")
            return False

    def build_message(self, user_email: str, user_name: str, reminder_time: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = REMINDER_SUBJECT
        msg["From"] = self.sender
        msg["To"] = user_email

        msg.attach(MIMEText(self._create_reminder_text(user_name, reminder_time), "plain", "utf-8"))
        msg.attach(MIMEText(self._create_reminder_html(user_name, reminder_time), "html", "utf-8"))
        return msg

    def _send_email(self, msg: MIMEMultipart) -> None:
        context = ssl.create_default_context()
        if self.smtp_port == 465:
            with smtplib.SMTP_SSL(self.smtp_server, self.smtp_port, context=context, timeout=self.timeout) as server:
                server.login(self.sender, self.password)
                server.send_message(msg)
        else:
            with smtplib.SMTP(self.smtp_server, self.smtp_port, timeout=self.timeout) as server:
                server.starttls(context=context)
                server.login(self.sender, self.password)
                server.send_message(msg)

    def _create_reminder_html(self, user_name: str, reminder_time: str) -> str:
        tips = "\n".join(f"            <li>{tip}</li>" for tip in STUDY_TIPS)
        return f"""
      <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        <h2 style="color: #4F46E5;">Time for Your Study Session! 📖</h2>
        <p>Hi {html.escape(user_name)},</p>
        <p>This is your scheduled study reminder for <strong>{html.escape(reminder_time)}</strong>.</p>
        <p>Remember: Consistency is key to mastering any subject. Even 15 minutes of focused study can make a big difference!</p>
        <div style="background-color: #F3F4F6; padding: 20px; border-radius: 8px; margin: 20px 0;">
          <h3 style="margin-top: 0; color: #1F2937;">Quick Study Tips:</h3>
          <ul style="color: #4B5563;">
{tips}
          </ul>
        </div>
        <p>Ready to continue your learning journey? Let's make today count!</p>
        <p style="margin-top: 30px; color: #6B7280; font-size: 14px;">
          You're receiving this because you set up study reminders. You can manage your reminders in the app settings.
        </p>
      </div>
    """

    def _create_reminder_text(self, user_name: str, reminder_time: str) -> str:
        tips = "\n".join(f"  - {tip}" for tip in STUDY_TIPS)
        return (
            f"Hi {user_name},\n\n"
            f"This is your scheduled study reminder for {reminder_time}.\n\n"
            "Remember: Consistency is key to mastering any subject. "
            "Even 15 minutes of focused study can make a big difference!\n\n"
            f"Quick Study Tips:\n{tips}\n\n"
            "Ready to continue your learning journey? Let's make today count!\n\n"
            "You're receiving this because you set up study reminders. "
            "You can manage your reminders in the app settings.\n"
        )
