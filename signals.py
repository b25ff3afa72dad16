"""
Stockwatch signals.

    alert_emitted(sender=Alert, alert=<Alert>)
        Sent after a new alert is persisted. Hook e-mail/SMS delivery here.
"""

from django.dispatch import Signal

alert_emitted = Signal()
