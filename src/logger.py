import logging
import os
from logging.handlers import RotatingFileHandler
from typing import List

import requests
import colorlog


def setup_logging() -> None:
    """Configure the centralised logging settings."""
    log_level = os.getenv('SYNC_LOG_LEVEL', 'INFO').upper()

    logger = logging.getLogger()
    logger.setLevel(log_level)

    if not logger.hasHandlers():
        for handler in build_handlers():
            logger.addHandler(handler)


def build_handlers() -> List[logging.Handler]:
    """Create the console, file and Postmark handlers enabled by the environment."""
    log_file = os.getenv('SYNC_LOG_FILE')
    max_bytes = int(os.getenv('LOG_FILE_MAX_BYTES', '10485760'))  # 10 MB
    backup_count = int(os.getenv('LOG_FILE_BACKUP_COUNT', '5'))
    postmark_api_token = os.getenv('POSTMARK_API_TOKEN')
    postmark_sender_email = os.getenv('POSTMARK_SENDER_EMAIL')
    postmark_receiver_emails = os.getenv('POSTMARK_RECEIVER_EMAILS')
    postmark_alert_subject = os.getenv('POSTMARK_ALERT_SUBJECT', 'Schedule Sync Error Alert')

    console_handler = logging.StreamHandler()
    console_formatter = colorlog.ColoredFormatter(
        "%(log_color)s%(levelname)s:%(name)s:%(message)s",
        log_colors={
            'DEBUG': 'bold_blue',
            'INFO': 'bold_green',
            'WARNING': 'bold_yellow',
            'ERROR': 'bold_red',
            'CRITICAL': 'bold_purple'
        }
    )
    console_handler.setFormatter(console_formatter)
    handlers: List[logging.Handler] = [console_handler]

    if log_file:
        file_handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count)
        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s - (%(filename)s:%(lineno)d)'
        )
        file_handler.setFormatter(file_formatter)
        handlers.append(file_handler)

    # Sync failures are mailed to the station operators when Postmark is configured
    if postmark_api_token and postmark_sender_email and postmark_receiver_emails:
        postmark_handler = PostmarkHandler(
            api_token=postmark_api_token,
            sender_email=postmark_sender_email,
            receiver_emails=postmark_receiver_emails.split(','),
            subject=postmark_alert_subject
        )
        postmark_handler.setLevel(logging.ERROR)
        handlers.append(postmark_handler)

    return handlers


class PostmarkHandler(logging.Handler):
    """Logging handler that sends error records via PostmarkApp."""

    def __init__(self, api_token: str, sender_email: str, receiver_emails: List[str], subject: str) -> None:
        """
        Initialize the handler.

        Args:
            api_token: Postmark API token.
            sender_email: Sender email address.
            receiver_emails: List of receiver email addresses.
            subject: Subject line for the alert emails.
        """
        super().__init__()
        self.api_token = api_token
        self.sender_email = sender_email
        self.receiver_emails = receiver_emails
        self.subject = subject

    def emit(self, record: logging.LogRecord) -> None:
        """
        Send a log record as an email alert.

        Args:
            record: LogRecord to be sent.
        """
        payload = {
            'From': self.sender_email,
            'To': ','.join(self.receiver_emails),
            'Subject': self.subject,
            'TextBody': self.format(record)
        }
        headers = {
            'X-Postmark-Server-Token': self.api_token,
            'Content-Type': 'application/json'
        }
        try:
            response = requests.post(
                'https://api.postmarkapp.com/email', json=payload, headers=headers, timeout=10
            )
            response.raise_for_status()
        except requests.RequestException:
            self.handleError(record)
