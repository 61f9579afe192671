"""Delivery module for shipping artifacts to remote storage."""

from .webhook import WebhookDelivery, send_file_to_webhook

__all__ = ["WebhookDelivery", "send_file_to_webhook"]
