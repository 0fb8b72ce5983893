"""Notification module - message formatting, dispatch and transports."""

from metalwatch.notifications.base_sender import BaseMessageSender
from metalwatch.notifications.dispatcher import NotificationDispatcher, format_message
from metalwatch.notifications.twilio_sender import TwilioSender

__all__ = ["BaseMessageSender", "NotificationDispatcher", "TwilioSender", "format_message"]
