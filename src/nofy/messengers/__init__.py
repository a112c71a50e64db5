"""Backend adapters implementing the ``Messenger`` port."""

from nofy.messengers.resend import ResendMessage, ResendMessenger
from nofy.messengers.slack import SlackMessage, SlackMessenger

__all__ = ["ResendMessage", "ResendMessenger", "SlackMessage", "SlackMessenger"]
