"""
通知服务

邮件发送：接收 {recipient, subject, body}，返回 SendResult，不抛出异常。
发送失败只影响返回值，是否回退已提交的数据由调用方决定。
"""

import asyncio
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Protocol

from sitebuilder.core.config import Settings, settings as default_settings
from sitebuilder.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class SendResult:
    """发送结果"""

    success: bool
    error: Optional[str] = None


class Notifier(Protocol):
    async def send(self, recipient: str, subject: str, body: str) -> SendResult: ...


class SMTPNotifier:
    """SMTP 邮件通知"""

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

    def _build_message(self, recipient: str, subject: str, body: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self.config.EMAIL_FROM_NAME} <{self.config.EMAIL_FROM_ADDRESS}>"
        msg["To"] = recipient
        msg.attach(MIMEText(body, "plain", "utf-8"))
        return msg

    def _send_sync(self, msg: MIMEMultipart) -> None:
        with smtplib.SMTP(
            self.config.SMTP_HOST,
            self.config.SMTP_PORT,
            timeout=self.config.SMTP_TIMEOUT,
        ) as smtp:
            if self.config.SMTP_USE_TLS:
                smtp.starttls()
            if self.config.SMTP_USERNAME:
                smtp.login(self.config.SMTP_USERNAME, self.config.SMTP_PASSWORD)
            smtp.send_message(msg)

    async def send(self, recipient: str, subject: str, body: str) -> SendResult:
        msg = self._build_message(recipient, subject, body)
        try:
            # smtplib 是阻塞的，放到线程中执行
            await asyncio.to_thread(self._send_sync, msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("email_send_failed", recipient=recipient, subject=subject, error=str(e))
            return SendResult(success=False, error=str(e))

        logger.info("email_sent", recipient=recipient, subject=subject)
        return SendResult(success=True)
